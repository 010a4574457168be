# chainloom/callbacks/console.py
"""
Built-in observers.

ConsoleObserver prints a readable trace with rich; it is what a chain's
``verbose=True`` turns on. LoggingObserver routes the same notifications
to the standard logger.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional
from uuid import UUID

from rich.console import Console
from rich.markup import escape
from rich.pretty import Pretty

from chainloom.logging.logger import get_logger
from chainloom.logging.tags import CHAIN

logger = get_logger(__name__)


class ConsoleObserver:
    """Prints chain entry/exit to a rich console, indented by nesting depth."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)
        self._depth: dict[UUID, int] = {}
        self._lock = threading.Lock()

    def _indent(self, run_id: UUID) -> str:
        return "  " * self._depth.get(run_id, 0)

    def on_chain_start(
        self,
        kind: str,
        inputs: Mapping[str, Any],
        run_id: UUID,
        parent_run_id: Optional[UUID],
    ) -> None:
        with self._lock:
            depth = self._depth.get(parent_run_id, -1) + 1 if parent_run_id else 0
            self._depth[run_id] = depth
        indent = self._indent(run_id)
        self.console.print(f"{indent}[bold green]> Entering new {kind} chain...[/bold green]")
        self.console.print(Pretty(dict(inputs)), style="dim")

    def on_chain_end(self, outputs: Mapping[str, Any], run_id: UUID) -> None:
        indent = self._indent(run_id)
        self.console.print(Pretty(dict(outputs)), style="dim")
        self.console.print(f"{indent}[bold green]< Finished chain.[/bold green]")
        with self._lock:
            self._depth.pop(run_id, None)

    def on_chain_error(self, error: BaseException, run_id: UUID) -> None:
        indent = self._indent(run_id)
        self.console.print(f"{indent}[bold red]x Chain failed:[/bold red] {escape(str(error))}")
        with self._lock:
            self._depth.pop(run_id, None)


class LoggingObserver:
    """Logs every notification at the given level."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def on_chain_start(
        self,
        kind: str,
        inputs: Mapping[str, Any],
        run_id: UUID,
        parent_run_id: Optional[UUID],
    ) -> None:
        logger.log(
            self.level,
            f"{CHAIN} Entering {kind} run_id={run_id} parent={parent_run_id} keys={sorted(inputs)}",
        )

    def on_chain_end(self, outputs: Mapping[str, Any], run_id: UUID) -> None:
        logger.log(self.level, f"{CHAIN} Finished run_id={run_id} keys={sorted(outputs)}")

    def on_chain_error(self, error: BaseException, run_id: UUID) -> None:
        logger.log(self.level, f"{CHAIN} Failed run_id={run_id}: {error}")


__all__ = ["ConsoleObserver", "LoggingObserver"]
