# chainloom/model/chatmodel/__init__.py
from .ollama import Ollama, OllamaConfig

__all__ = ["Ollama", "OllamaConfig"]
