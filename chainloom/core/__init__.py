# chainloom/core/__init__.py
"""
Core building blocks shared by every chain.

Public API:
    - ChainValues: Input/output mapping
    - Document: Immutable retrieved text + metadata
    - RunContext: Shared cancellation signal
    - RetryPolicy / retry_call: Retry wrapper
    - Exceptions: Standard error hierarchy
"""

from .context import RunContext
from .document import Document, is_document_sequence
from .exceptions import (
    BackendError,
    ChainCancelledError,
    ChainError,
    ChainloomError,
    ConfigurationError,
    EmptyInputCollectionError,
    ErrorKind,
    InputTypeMismatchError,
    MissingInputKeyError,
    MissingOutputKeyError,
    MultipleInputsError,
    MultipleOutputsError,
    ObserverError,
    RunStateError,
    TypeMismatchError,
    WrongOutputTypeError,
)
from .retry import RetryPolicy, retry_call, retry_on_kinds
from .values import ChainValues, as_chain_values

__all__ = [
    "ChainValues",
    "as_chain_values",
    "Document",
    "is_document_sequence",
    "RunContext",
    "RetryPolicy",
    "retry_call",
    "retry_on_kinds",
    "ChainloomError",
    "ChainError",
    "MissingInputKeyError",
    "InputTypeMismatchError",
    "TypeMismatchError",
    "EmptyInputCollectionError",
    "MissingOutputKeyError",
    "MultipleInputsError",
    "MultipleOutputsError",
    "WrongOutputTypeError",
    "ObserverError",
    "RunStateError",
    "ChainCancelledError",
    "ErrorKind",
    "BackendError",
    "ConfigurationError",
]
