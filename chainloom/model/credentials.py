# chainloom/model/credentials.py
"""
Credential resolution for hosted backends.

Resolution order:
  1. Explicit api_key argument
  2. Provider-specific env var
  3. Generic fallback env var
"""

from __future__ import annotations

import os
from typing import Optional

from chainloom.core.exceptions import ConfigurationError
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import MODEL

logger = get_logger(__name__)

GENERIC_API_KEY_ENV = "CHAINLOOM_API_KEY"

PROVIDER_ENV_MAP: dict[str, list[str]] = {
    "cohere": ["COHERE_API_KEY", "CO_API_KEY"],
}


class CredentialError(ConfigurationError):
    """Raised when credentials cannot be resolved."""

    pass


def resolve_api_key(*, provider: str, api_key: Optional[str] = None) -> str:
    """
    Resolve the API key for ``provider``.

    Raises:
        CredentialError: If no API key could be resolved
    """
    if api_key:
        logger.debug(f"{MODEL} Using explicit API key for provider '{provider}'")
        return api_key

    env_vars = PROVIDER_ENV_MAP.get(provider, [])
    for env_name in env_vars:
        value = os.getenv(env_name)
        if value:
            logger.debug(f"{MODEL} Using API key from env '{env_name}' for provider '{provider}'")
            return value

    fallback = os.getenv(GENERIC_API_KEY_ENV)
    if fallback:
        logger.debug(f"{MODEL} Using API key from env '{GENERIC_API_KEY_ENV}' for provider '{provider}'")
        return fallback

    expected = ", ".join(env_vars + [GENERIC_API_KEY_ENV])
    raise CredentialError(
        f"API key for provider '{provider}' not found. "
        f"Set one of: {expected}, or pass api_key."
    )


__all__ = ["CredentialError", "resolve_api_key", "GENERIC_API_KEY_ENV"]
