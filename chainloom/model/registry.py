# chainloom/model/registry.py
"""
Backend registry.

Maps a provider name from configuration to a backend factory.

Design principle: NO SILENT FALLBACK
- If the config says "cohere", you get cohere or an error
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from chainloom.core.exceptions import ConfigurationError
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import MODEL

logger = get_logger(__name__)


def _cohere(**kwargs: Any) -> Any:
    from chainloom.model.llm.cohere import Cohere

    return Cohere(**kwargs)


def _ollama(**kwargs: Any) -> Any:
    from chainloom.model.chatmodel.ollama import Ollama

    return Ollama(**kwargs)


_FACTORIES: Dict[str, Callable[..., Any]] = {
    "cohere": _cohere,
    "ollama": _ollama,
}


class ModelConfig(BaseModel):
    """
    Backend configuration block.

    Example YAML:
        model:
          provider: cohere
          kwargs:
            temperature: 0.2
    """

    provider: str = Field(..., description="Backend name in the registry")
    kwargs: Dict[str, Any] = Field(default_factory=dict, description="Backend init kwargs")

    model_config = ConfigDict(extra="forbid")


def available_models() -> List[str]:
    """Sorted list of registered provider names."""
    return sorted(_FACTORIES)


def register_model(provider: str, factory: Callable[..., Any]) -> None:
    """Register (or replace) a backend factory."""
    _FACTORIES[provider] = factory


def get_model(provider: str, **kwargs: Any) -> Any:
    """
    Build a backend by provider name.

    Raises:
        ConfigurationError: If the provider is unknown or construction fails
    """
    factory = _FACTORIES.get(provider)
    if factory is None:
        raise ConfigurationError(
            f"Unknown model provider: {provider!r}. Available: {available_models()}"
        )

    logger.debug(f"{MODEL} Building backend '{provider}'")
    try:
        return factory(**kwargs)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to build model provider '{provider}': {e}") from e


def model_from_config(config: ModelConfig) -> Any:
    return get_model(config.provider, **config.kwargs)


__all__ = [
    "ModelConfig",
    "available_models",
    "register_model",
    "get_model",
    "model_from_config",
]
