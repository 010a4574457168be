# chainloom/core/context.py
"""
RunContext - the shared cancellation signal passed through every call.

One context per top-level call. batch_call derives a child context so the
first failing member can cancel its siblings without cancelling the caller.
Cancellation is cooperative: chains and backends check the signal at their
suspension points (backend calls, memory load/save, retriever lookups).
"""

from __future__ import annotations

import threading
from typing import Optional

from chainloom.core.exceptions import ChainCancelledError


class RunContext:
    """
    Cancellable context shared by one call tree.

    Examples:
        >>> ctx = RunContext()
        >>> child = ctx.child()
        >>> ctx.cancel("shutting down")
        >>> child.cancelled
        True
    """

    def __init__(self, parent: Optional["RunContext"] = None) -> None:
        self._parent = parent
        self._event = threading.Event()
        self._reason: str | None = None

    def child(self) -> "RunContext":
        """Derive a context that is cancelled whenever this one is."""
        return RunContext(parent=self)

    def cancel(self, reason: str = "run context cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    @property
    def reason(self) -> str | None:
        if self._event.is_set():
            return self._reason
        return self._parent.reason if self._parent is not None else None

    def raise_if_cancelled(self) -> None:
        """Raise ChainCancelledError if this context (or an ancestor) was cancelled."""
        if self.cancelled:
            raise ChainCancelledError(self.reason or "run context cancelled")

    def wait(self, timeout: float) -> bool:
        """
        Sleep up to ``timeout`` seconds, waking early on cancellation.

        Returns True if the context was cancelled.
        """
        if self._parent is None:
            return self._event.wait(timeout)

        # Poll so parent cancellation is observed too
        step = min(timeout, 0.05) if timeout > 0 else 0
        remaining = timeout
        while remaining > 0:
            if self.cancelled:
                return True
            self._event.wait(step)
            remaining -= step
        return self.cancelled


__all__ = ["RunContext"]
