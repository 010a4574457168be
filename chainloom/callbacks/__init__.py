# chainloom/callbacks/__init__.py
"""Run tracking: observers and the managers that notify them."""

from .base import BaseObserver, Observer
from .console import ConsoleObserver, LoggingObserver
from .manager import CallbackManager, RunManager, RunState

__all__ = [
    "Observer",
    "BaseObserver",
    "ConsoleObserver",
    "LoggingObserver",
    "CallbackManager",
    "RunManager",
    "RunState",
]
