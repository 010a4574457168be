# chainloom/memory/base.py
"""
Memory port - conversational state loaded before and saved after a call.

Only the execution entrypoint (chainloom.chains.execution.call) touches
memory. Chains declare it through ``memory()``; they never load or save it
themselves.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Protocol, runtime_checkable

from chainloom.core.context import RunContext


@runtime_checkable
class Memory(Protocol):
    """Memory interface. Don't check isinstance - just call the methods."""

    def memory_keys(self) -> List[str]:
        """Keys that load_memory_variables() returns."""
        ...

    def load_memory_variables(
        self, context: RunContext, inputs: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Return variables to merge into the inputs before the chain runs."""
        ...

    def save_context(
        self,
        context: RunContext,
        inputs: Mapping[str, Any],
        outputs: Mapping[str, Any],
    ) -> None:
        """Persist one successful exchange (original inputs, outputs)."""
        ...

    def clear(self) -> None:
        """Forget all stored state."""
        ...


__all__ = ["Memory"]
