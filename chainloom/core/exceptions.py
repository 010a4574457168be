# chainloom/core/exceptions.py
"""
All exceptions for chainloom.

Hierarchy:
    ChainloomError
    ├── ChainError - Contract violations (never retried)
    │   ├── MissingInputKeyError - Declared input key absent
    │   ├── InputTypeMismatchError - Input present but of the wrong type
    │   ├── EmptyInputCollectionError - Required collection is empty
    │   ├── MissingOutputKeyError - Unit returned fewer keys than declared
    │   ├── MultipleInputsError - simple_call on a multi-input chain
    │   ├── MultipleOutputsError - simple_call on a multi-output chain
    │   └── WrongOutputTypeError - simple_call output is not text
    ├── ObserverError - An observer hook failed
    ├── RunStateError - Run notified twice or out of order
    ├── ChainCancelledError - The shared run context was cancelled
    ├── BackendError - Generation backend failure, classified by ErrorKind
    └── ConfigurationError - Invalid configuration
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ChainloomError(Exception):
    """
    Base exception for all chainloom errors.

    Examples:
        >>> try:
        ...     outputs = call(chain, {"question": "..."})
        ... except ChainloomError as e:
        ...     print(f"Chain failed: {e}")
    """

    pass


# =============================================================================
# Contract Violations
# =============================================================================


class ChainError(ChainloomError):
    """A chain was invoked with, or produced, values that break its contract."""

    pass


class MissingInputKeyError(ChainError, KeyError):
    """A declared input key is absent from the input mapping."""

    def __init__(self, key: str, chain: Optional[str] = None):
        self.key = key
        self.chain = chain
        where = f" for {chain} chain" if chain else ""
        super().__init__(f"no value for input key {key!r}{where}")

    def __str__(self) -> str:
        # KeyError repr-quotes its message otherwise
        return self.args[0]


class InputTypeMismatchError(ChainError, TypeError):
    """A key is present but its value has the wrong semantic type."""

    pass


# Accessor-level alias: ChainValues.get_string raises this on non-text values.
TypeMismatchError = InputTypeMismatchError


class EmptyInputCollectionError(ChainError, ValueError):
    """A collection input that must be non-empty has no elements."""

    pass


class MissingOutputKeyError(ChainError):
    """A chain returned a mapping without one of its declared output keys."""

    pass


class MultipleInputsError(ChainError):
    """simple_call requires a chain with exactly one input key."""

    def __init__(self, message: str = "chain with more than one expected input"):
        super().__init__(message)


class MultipleOutputsError(ChainError):
    """simple_call requires a chain with exactly one output key."""

    def __init__(self, message: str = "chain with more than one expected output"):
        super().__init__(message)


class WrongOutputTypeError(ChainError):
    """simple_call requires the sole output value to be text."""

    def __init__(self, message: str = "chain with non string return type"):
        super().__init__(message)


# =============================================================================
# Run Tracking
# =============================================================================


class ObserverError(ChainloomError):
    """
    An observer hook raised.

    Start failures are fail-closed: the chain never executes.
    """

    def __init__(self, message: str, observer: object = None):
        self.observer = observer
        super().__init__(message)


class RunStateError(ChainloomError):
    """A run was ended or failed more than once."""

    pass


class ChainCancelledError(ChainloomError):
    """The shared run context was cancelled before or during execution."""

    def __init__(self, message: str = "run context cancelled"):
        super().__init__(message)


# =============================================================================
# Backend Errors
# =============================================================================


class ErrorKind(str, Enum):
    """Classification of a backend failure, reported by the backend itself."""

    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    AUTHENTICATION = "authentication"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    UNKNOWN = "unknown"


class BackendError(ChainloomError):
    """
    Structured generation backend error.

    Attributes:
        message: Human-readable error message
        kind: Backend-reported classification, used by retry predicates
        status_code: HTTP status code (if available)
        provider: Backend name (e.g., "cohere", "ollama")
        details: Additional error details from the response
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        *,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.provider = provider
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        if self.details:
            parts.append(f"- {self.details}")

        return " ".join(parts)


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(ChainloomError):
    """
    Invalid configuration.

    Raised at construction time, for example:
    - Unknown backend provider
    - Missing credentials
    - Option combinations that cannot work together
    """

    pass


__all__ = [
    "ChainloomError",
    # Contract
    "ChainError",
    "MissingInputKeyError",
    "InputTypeMismatchError",
    "TypeMismatchError",
    "EmptyInputCollectionError",
    "MissingOutputKeyError",
    "MultipleInputsError",
    "MultipleOutputsError",
    "WrongOutputTypeError",
    # Run tracking
    "ObserverError",
    "RunStateError",
    "ChainCancelledError",
    # Backend
    "ErrorKind",
    "BackendError",
    # Config
    "ConfigurationError",
]
