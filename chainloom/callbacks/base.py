# chainloom/callbacks/base.py
"""
Observer protocol for chain lifecycle notifications.

Observers are duck-typed: implement the three hooks and register the object
on a chain (``observers=[...]``) or per call (``CallOptions(callbacks=[...])``).
Any exception raised from a hook fails the enclosing call.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable
from uuid import UUID


@runtime_checkable
class Observer(Protocol):
    """
    Receives start/end/error notifications for every tracked run.

    Example:
        class PrintingObserver:
            def on_chain_start(self, kind, inputs, run_id, parent_run_id):
                print(f"start {kind} {run_id}")

            def on_chain_end(self, outputs, run_id):
                print(f"end {run_id}")

            def on_chain_error(self, error, run_id):
                print(f"error {run_id}: {error}")
    """

    def on_chain_start(
        self,
        kind: str,
        inputs: Mapping[str, Any],
        run_id: UUID,
        parent_run_id: Optional[UUID],
    ) -> None:
        """
        Called before a chain executes.

        Args:
            kind: Chain kind name (e.g., "LLM", "StuffDocuments")
            inputs: Input mapping as supplied by the caller
            run_id: Identifier of this run
            parent_run_id: Identifier of the enclosing run, None for a root run
        """
        ...

    def on_chain_end(self, outputs: Mapping[str, Any], run_id: UUID) -> None:
        """Called once after a chain succeeded."""
        ...

    def on_chain_error(self, error: BaseException, run_id: UUID) -> None:
        """Called once after a chain failed."""
        ...


class BaseObserver:
    """No-op observer; subclass and override only the hooks you need."""

    def on_chain_start(
        self,
        kind: str,
        inputs: Mapping[str, Any],
        run_id: UUID,
        parent_run_id: Optional[UUID],
    ) -> None:
        pass

    def on_chain_end(self, outputs: Mapping[str, Any], run_id: UUID) -> None:
        pass

    def on_chain_error(self, error: BaseException, run_id: UUID) -> None:
        pass


__all__ = ["Observer", "BaseObserver"]
