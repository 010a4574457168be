# chainloom/chains/base.py
"""
Chain contract.

Every unit of work (single-model calls, document combination, multi-stage
pipelines) implements the same small protocol, so the execution
entrypoints can drive any of them identically. Composite chains own their
inner chains and invoke them through chainloom.chains.execution.call;
they never extend another chain's implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, runtime_checkable
from uuid import UUID

from chainloom.callbacks.base import Observer
from chainloom.callbacks.manager import RunManager
from chainloom.core.context import RunContext
from chainloom.core.values import ChainValues
from chainloom.memory.base import Memory


@dataclass(frozen=True)
class CallOptions:
    """
    Call-scoped options accepted by the execution entrypoints.

    | option           | default | effect                                              |
    |------------------|---------|-----------------------------------------------------|
    | callbacks        | ()      | observers for this run and every nested run         |
    | stop             | None    | stop sequences forwarded to generation backends     |
    | parent_run_id    | None    | run id of the enclosing invocation                  |
    | include_run_info | False   | add ``run_info`` ({"run_id": ...}) to the outputs   |
    """

    callbacks: Sequence[Observer] = field(default_factory=tuple)
    stop: Optional[Sequence[str]] = None
    parent_run_id: Optional[UUID] = None
    include_run_info: bool = False


@dataclass(frozen=True)
class ChainCallOptions:
    """Options handed to Chain.call by the entrypoint for one run."""

    run_manager: RunManager
    stop: Optional[Sequence[str]] = None

    def child(self) -> CallOptions:
        """CallOptions for a nested invocation: same observers, this run as parent."""
        return CallOptions(
            callbacks=tuple(self.run_manager.inheritable_observers),
            stop=self.stop,
            parent_run_id=self.run_manager.run_id,
        )


@runtime_checkable
class Chain(Protocol):
    """
    Unit-of-work protocol.

    call() reads only the declared input keys and returns at least the
    declared output keys. input_keys()/output_keys() are static for the
    lifetime of an instance.
    """

    def call(
        self,
        context: RunContext,
        inputs: ChainValues,
        options: ChainCallOptions,
    ) -> ChainValues:
        """Run the chain's own logic. Use the execution entrypoints, not this, to invoke a chain."""
        ...

    def input_keys(self) -> List[str]: ...

    def output_keys(self) -> List[str]: ...

    def memory(self) -> Optional[Memory]: ...

    def kind(self) -> str: ...

    def verbose(self) -> bool: ...

    def observers(self) -> List[Observer]: ...


__all__ = ["Chain", "CallOptions", "ChainCallOptions"]
