# chainloom/core/retry.py
"""
Retry wrapper for flaky collaborator calls.

A pure combinator: it knows nothing about chains, memory or run tracking.
Callers supply the retryable-error predicate, usually built from the
ErrorKind classification their backend reports.

Usage:
    from chainloom.core.retry import RetryPolicy, retry_on_kinds

    policy = RetryPolicy(max_attempts=3, delay=1.0)
    result = policy.run(
        lambda: client.generate(payload),
        retry_if=retry_on_kinds(ErrorKind.RATE_LIMIT, ErrorKind.SERVER),
    )
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from chainloom.core.context import RunContext
from chainloom.core.exceptions import BackendError, ChainCancelledError, ErrorKind
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import RETRY

logger = get_logger(__name__)

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]


def retry_call(
    operation: Callable[[], T],
    *,
    max_attempts: int,
    delay: float,
    retry_if: RetryPredicate,
    context: Optional[RunContext] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Invoke ``operation`` until it succeeds, the budget runs out, or the
    predicate rejects the error.

    Args:
        operation: Zero-argument callable to invoke
        max_attempts: Total attempts including the first one (>= 1)
        delay: Fixed delay in seconds between attempts
        retry_if: Returns True if an error should be retried
        context: Optional run context; cancellation stops further attempts
        sleep: Sleep function (used only when no context is given)

    Returns:
        The operation's result

    Raises:
        The last error raised by ``operation`` once retries stop, or
        ChainCancelledError if the context is cancelled between attempts.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    attempt = 0
    while True:
        attempt += 1
        if context is not None:
            context.raise_if_cancelled()

        try:
            return operation()
        except ChainCancelledError:
            raise
        except Exception as e:
            if attempt >= max_attempts or not retry_if(e):
                raise

            logger.warning(
                f"{RETRY} Attempt {attempt}/{max_attempts} failed, retrying in {delay}s: {e}"
            )

        if delay > 0:
            if context is not None:
                if context.wait(delay):
                    context.raise_if_cancelled()
            else:
                sleep(delay)


def retry_on_kinds(*kinds: ErrorKind) -> RetryPredicate:
    """Predicate that retries BackendErrors whose kind is one of ``kinds``."""
    allowed = frozenset(kinds)

    def predicate(error: BaseException) -> bool:
        return isinstance(error, BackendError) and error.kind in allowed

    return predicate


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempt budget plus fixed inter-attempt delay.

    | option       | default | effect                                   |
    |--------------|---------|------------------------------------------|
    | max_attempts | 3       | total attempts, including the first one  |
    | delay        | 1.0     | seconds to wait between attempts         |
    """

    max_attempts: int = 3
    delay: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    def run(
        self,
        operation: Callable[[], T],
        retry_if: RetryPredicate,
        context: Optional[RunContext] = None,
    ) -> T:
        return retry_call(
            operation,
            max_attempts=self.max_attempts,
            delay=self.delay,
            retry_if=retry_if,
            context=context,
        )


__all__ = ["RetryPolicy", "RetryPredicate", "retry_call", "retry_on_kinds"]
