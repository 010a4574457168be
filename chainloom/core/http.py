# chainloom/core/http.py
"""
Centralized HTTP client factory for generation backends.

Usage:
    from chainloom.core.http import create_api_client, raise_for_status

    client = create_api_client(
        base_url="https://api.cohere.ai/v1",
        api_key="your-key",
        timeout_type="generate",
    )
    response = client.post("/generate", json=payload)
    raise_for_status(response, provider="cohere", endpoint="/generate")

Every httpx failure is converted to a BackendError carrying an ErrorKind,
so retry predicates never have to inspect provider-specific error types.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from chainloom.core.exceptions import BackendError, ErrorKind
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import MODEL

logger = get_logger(__name__)


# =============================================================================
# Default Configuration
# =============================================================================

DEFAULT_TIMEOUTS = {
    "default": 30.0,
    "generate": 120.0,  # LLM generation can be slow
    "chat": 120.0,
}

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


# =============================================================================
# Client Factory
# =============================================================================


def create_api_client(
    base_url: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    timeout_type: str = "default",
    headers: Optional[Dict[str, str]] = None,
    auth_header: str = "Authorization",
    auth_scheme: str = "Bearer",
    **kwargs: Any,
) -> httpx.Client:
    """
    Create a configured HTTP client for API calls.

    Args:
        base_url: Base URL for the API (e.g., "https://api.cohere.ai/v1")
        api_key: API key for authentication (optional)
        timeout: Request timeout in seconds (or use timeout_type)
        timeout_type: Preset timeout type ("default", "generate", "chat")
        headers: Additional headers to include
        auth_header: Header name for authentication
        auth_scheme: Authentication scheme
        **kwargs: Passed through to httpx.Client (e.g. transport=)

    Returns:
        Configured httpx.Client instance
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUTS.get(timeout_type, DEFAULT_TIMEOUTS["default"])

    final_headers = dict(DEFAULT_HEADERS)

    if api_key:
        final_headers[auth_header] = f"{auth_scheme} {api_key}"

    if headers:
        final_headers.update(headers)

    client = httpx.Client(
        base_url=base_url,
        headers=final_headers,
        timeout=timeout,
        **kwargs,
    )

    logger.debug(f"{MODEL} Created HTTP client for {base_url} (timeout={timeout}s)")

    return client


# =============================================================================
# Error Classification
# =============================================================================


def classify_status(status_code: int) -> ErrorKind:
    """Map an HTTP status code to an ErrorKind."""
    if status_code == 429:
        return ErrorKind.RATE_LIMIT
    if status_code in (401, 403):
        return ErrorKind.AUTHENTICATION
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code == 408:
        return ErrorKind.TIMEOUT
    if status_code >= 500:
        return ErrorKind.SERVER
    if status_code >= 400:
        return ErrorKind.INVALID_REQUEST
    return ErrorKind.UNKNOWN


def _response_details(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] if response.text else None

    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
        if isinstance(message, dict):
            message = message.get("message")
        if message:
            return str(message)
    return None


def handle_api_error(
    exc: Exception,
    provider: str = "unknown",
    endpoint: str = "",
) -> BackendError:
    """
    Convert an httpx exception to a classified BackendError.

    Args:
        exc: The original exception
        provider: Name of the backend
        endpoint: The endpoint that was called

    Returns:
        BackendError whose kind drives retry decisions
    """
    if isinstance(exc, BackendError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        kind = classify_status(status_code)
        messages = {
            ErrorKind.RATE_LIMIT: f"{provider} rate limit exceeded",
            ErrorKind.AUTHENTICATION: f"{provider} authentication failed",
            ErrorKind.NOT_FOUND: f"{provider} resource not found",
            ErrorKind.SERVER: f"{provider} server error",
        }
        return BackendError(
            messages.get(kind, f"{provider} API request failed"),
            kind,
            status_code=status_code,
            provider=provider,
            details=_response_details(exc.response),
        )

    if isinstance(exc, httpx.TimeoutException):
        return BackendError(
            f"{provider} request timed out",
            ErrorKind.TIMEOUT,
            provider=provider,
            details=f"endpoint {endpoint}" if endpoint else None,
        )

    if isinstance(exc, httpx.TransportError):
        return BackendError(
            f"Failed to connect to {provider}",
            ErrorKind.CONNECTION,
            provider=provider,
            details=str(exc),
        )

    return BackendError(
        f"{provider} request failed: {exc}",
        ErrorKind.UNKNOWN,
        provider=provider,
    )


def raise_for_status(
    response: httpx.Response,
    provider: str = "unknown",
    endpoint: str = "",
) -> None:
    """
    Check response status and raise a classified BackendError if failed.

    Raises:
        BackendError: If the response indicates an error
    """
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise handle_api_error(exc, provider=provider, endpoint=endpoint) from exc


def post_json(
    client: httpx.Client,
    endpoint: str,
    payload: Dict[str, Any],
    provider: str,
) -> Dict[str, Any]:
    """POST a JSON payload and return the decoded body, classifying failures."""
    try:
        response = client.post(endpoint, json=payload)
    except httpx.HTTPError as exc:
        raise handle_api_error(exc, provider=provider, endpoint=endpoint) from exc

    raise_for_status(response, provider=provider, endpoint=endpoint)

    try:
        data = response.json()
    except ValueError as exc:
        raise BackendError(
            f"{provider} returned a non-JSON response",
            ErrorKind.UNKNOWN,
            status_code=response.status_code,
            provider=provider,
        ) from exc

    if not isinstance(data, dict):
        raise BackendError(
            f"{provider} returned a JSON {type(data).__name__}, expected an object",
            ErrorKind.UNKNOWN,
            status_code=response.status_code,
            provider=provider,
        )
    return data



__all__ = [
    "DEFAULT_TIMEOUTS",
    "create_api_client",
    "classify_status",
    "handle_api_error",
    "raise_for_status",
    "post_json",
]
