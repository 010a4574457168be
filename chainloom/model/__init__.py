# chainloom/model/__init__.py
"""Generation backend contracts and built-in backends."""

from .base import LLM, ChatModel, Generation, ModelResult, Tokenizer, generate_prompt
from .registry import ModelConfig, available_models, get_model, model_from_config, register_model

__all__ = [
    "LLM",
    "ChatModel",
    "Generation",
    "ModelResult",
    "Tokenizer",
    "generate_prompt",
    "ModelConfig",
    "available_models",
    "get_model",
    "model_from_config",
    "register_model",
]
