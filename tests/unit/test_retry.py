# tests/unit/test_retry.py
"""
Tests for chainloom.core.retry.

Tests cover:
1. retry_call - attempt counting, predicate handling, exhaustion
2. retry_on_kinds - ErrorKind based predicates
3. RetryPolicy - validation and delegation
"""

from __future__ import annotations

import pytest

from chainloom.core.context import RunContext
from chainloom.core.exceptions import BackendError, ChainCancelledError, ErrorKind
from chainloom.core.retry import RetryPolicy, retry_call, retry_on_kinds


class StatusError(Exception):
    def __init__(self, code: int):
        super().__init__(f"status {code}")
        self.code = code


def is_429(error: BaseException) -> bool:
    return isinstance(error, StatusError) and error.code == 429


class FlakyOperation:
    """Raises the queued errors in order, then returns "ok"."""

    def __init__(self, *errors: Exception):
        self.errors = list(errors)
        self.attempts = 0

    def __call__(self) -> str:
        self.attempts += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


class TestRetryCall:
    """Tests for the retry combinator."""

    def test_retryable_error_then_success(self):
        op = FlakyOperation(StatusError(429))
        result = retry_call(op, max_attempts=2, delay=0, retry_if=is_429)

        assert result == "ok"
        assert op.attempts == 2

    def test_non_retryable_error_fails_after_one_attempt(self):
        op = FlakyOperation(StatusError(401))
        with pytest.raises(StatusError) as exc_info:
            retry_call(op, max_attempts=2, delay=0, retry_if=is_429)

        assert exc_info.value.code == 401
        assert op.attempts == 1

    def test_exhausted_budget_raises_last_error(self):
        op = FlakyOperation(StatusError(429), StatusError(429), StatusError(429))
        with pytest.raises(StatusError):
            retry_call(op, max_attempts=3, delay=0, retry_if=is_429)
        assert op.attempts == 3

    def test_delay_between_attempts(self):
        sleeps = []
        op = FlakyOperation(StatusError(429), StatusError(429))
        retry_call(op, max_attempts=3, delay=0.5, retry_if=is_429, sleep=sleeps.append)

        assert sleeps == [0.5, 0.5]

    def test_cancelled_context_stops_before_first_attempt(self):
        ctx = RunContext()
        ctx.cancel()
        op = FlakyOperation()

        with pytest.raises(ChainCancelledError):
            retry_call(op, max_attempts=3, delay=0, retry_if=is_429, context=ctx)
        assert op.attempts == 0

    def test_cancellation_is_never_retried(self):
        op = FlakyOperation(ChainCancelledError())
        with pytest.raises(ChainCancelledError):
            retry_call(op, max_attempts=3, delay=0, retry_if=lambda e: True)
        assert op.attempts == 1

    def test_invalid_attempt_budget(self):
        with pytest.raises(ValueError):
            retry_call(FlakyOperation(), max_attempts=0, delay=0, retry_if=is_429)


class TestRetryOnKinds:
    """Tests for ErrorKind predicates."""

    def test_matches_listed_kinds(self):
        predicate = retry_on_kinds(ErrorKind.RATE_LIMIT, ErrorKind.SERVER)

        assert predicate(BackendError("slow down", ErrorKind.RATE_LIMIT))
        assert predicate(BackendError("oops", ErrorKind.SERVER))
        assert not predicate(BackendError("bad key", ErrorKind.AUTHENTICATION))
        assert not predicate(ValueError("not a backend error"))

    def test_backend_errors_retried_by_kind(self):
        op = FlakyOperation(BackendError("busy", ErrorKind.SERVER))
        result = retry_call(
            op,
            max_attempts=2,
            delay=0,
            retry_if=retry_on_kinds(ErrorKind.SERVER),
        )
        assert result == "ok"
        assert op.attempts == 2


class TestRetryPolicy:
    """Tests for the RetryPolicy record."""

    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.delay == 1.0

    def test_rejects_invalid_values(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValueError):
            RetryPolicy(delay=-1)

    def test_run(self):
        op = FlakyOperation(StatusError(429))
        assert RetryPolicy(max_attempts=2, delay=0).run(op, retry_if=is_429) == "ok"
        assert op.attempts == 2
