# chainloom/callbacks/manager.py
"""
Run tracking for nested chain invocations.

Flow:
    CallbackManager.on_chain_start(kind, inputs)  -> RunManager
    RunManager.on_chain_end(outputs)  |  RunManager.on_chain_error(error)

Every start allocates a fresh run id and links it to the parent run id
carried by the call options. Children inherit only the call-scoped
(inheritable) observers; a chain's own observers and its verbose console
output stay local to that chain's run.

A manager with zero observers behaves exactly like one with observers,
minus the side effects.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence
from uuid import UUID, uuid4

from chainloom.callbacks.base import Observer
from chainloom.core.exceptions import ObserverError, RunStateError
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import RUN

logger = get_logger(__name__)


def _dedupe(observers: Sequence[Observer]) -> List[Observer]:
    """Drop repeated observer instances, keeping registration order."""
    seen: set[int] = set()
    unique: List[Observer] = []
    for observer in observers:
        if id(observer) not in seen:
            seen.add(id(observer))
            unique.append(observer)
    return unique


class RunState(Enum):
    RUNNING = "running"
    ENDED = "ended"
    FAILED = "failed"


class RunManager:
    """
    Notifier scoped to a single run.

    Exactly one of on_chain_end / on_chain_error may be called, once.
    """

    def __init__(
        self,
        run_id: UUID,
        parent_run_id: Optional[UUID],
        observers: Sequence[Observer],
        inheritable_observers: Sequence[Observer],
    ) -> None:
        self._run_id = run_id
        self._parent_run_id = parent_run_id
        self._observers = list(observers)
        self._inheritable = list(inheritable_observers)
        self._state = RunState.RUNNING
        self._lock = threading.Lock()

    @property
    def run_id(self) -> UUID:
        return self._run_id

    @property
    def parent_run_id(self) -> Optional[UUID]:
        return self._parent_run_id

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def inheritable_observers(self) -> List[Observer]:
        """Observers that child runs must receive."""
        return list(self._inheritable)

    def _finish(self, state: RunState) -> None:
        with self._lock:
            if self._state is not RunState.RUNNING:
                raise RunStateError(
                    f"run {self._run_id} already {self._state.value}, cannot mark {state.value}"
                )
            self._state = state

    def on_chain_end(self, outputs: Mapping[str, Any]) -> None:
        """
        Notify all observers that the run succeeded.

        Raises:
            RunStateError: If the run was already ended or failed
            ObserverError: If an observer hook raised
        """
        self._finish(RunState.ENDED)
        logger.debug(f"{RUN} end run_id={self._run_id}")

        for observer in self._observers:
            try:
                observer.on_chain_end(outputs, self._run_id)
            except Exception as e:
                raise ObserverError(
                    f"observer {type(observer).__name__} failed on chain end: {e}",
                    observer=observer,
                ) from e

    def on_chain_error(self, error: BaseException) -> None:
        """
        Notify all observers that the run failed.

        Raises:
            RunStateError: If the run was already ended or failed
            ObserverError: If an observer hook raised
        """
        self._finish(RunState.FAILED)
        logger.debug(f"{RUN} error run_id={self._run_id}: {error}")

        for observer in self._observers:
            try:
                observer.on_chain_error(error, self._run_id)
            except Exception as e:
                raise ObserverError(
                    f"observer {type(observer).__name__} failed on chain error: {e}",
                    observer=observer,
                ) from e

    def __repr__(self) -> str:
        return f"RunManager(run_id={self._run_id}, parent={self._parent_run_id}, state={self._state.value})"


class CallbackManager:
    """
    Issues RunManagers for one chain invocation.

    Args:
        inheritable: Call-scoped observers, passed on to child runs
        local: The chain's own observers, used for this run only
        verbose: Add a console observer to this run
        parent_run_id: Run id of the enclosing invocation, if any
    """

    def __init__(
        self,
        inheritable: Sequence[Observer] = (),
        local: Sequence[Observer] = (),
        *,
        verbose: bool = False,
        parent_run_id: Optional[UUID] = None,
    ) -> None:
        self._inheritable = _dedupe(inheritable)
        local_observers = list(local)
        if verbose:
            from chainloom.callbacks.console import ConsoleObserver

            if not any(isinstance(o, ConsoleObserver) for o in [*self._inheritable, *local_observers]):
                local_observers.append(ConsoleObserver())
        self._local = local_observers
        self._parent_run_id = parent_run_id

    @property
    def observers(self) -> List[Observer]:
        return _dedupe([*self._inheritable, *self._local])

    @property
    def parent_run_id(self) -> Optional[UUID]:
        return self._parent_run_id

    def on_chain_start(self, kind: str, inputs: Mapping[str, Any]) -> RunManager:
        """
        Start a run: allocate its id and notify observers in registration order.

        Fail-closed: if any observer raises, no RunManager is returned and the
        run id is discarded.

        Raises:
            ObserverError: If an observer hook raised
        """
        run_id = uuid4()
        observers = self.observers

        for observer in observers:
            try:
                observer.on_chain_start(kind, inputs, run_id, self._parent_run_id)
            except Exception as e:
                raise ObserverError(
                    f"observer {type(observer).__name__} failed on chain start: {e}",
                    observer=observer,
                ) from e

        logger.debug(f"{RUN} start {kind} run_id={run_id} parent={self._parent_run_id}")

        return RunManager(run_id, self._parent_run_id, observers, self._inheritable)


__all__ = ["CallbackManager", "RunManager", "RunState"]
