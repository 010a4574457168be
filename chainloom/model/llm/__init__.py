# chainloom/model/llm/__init__.py
from .cohere import Cohere, CohereConfig

__all__ = ["Cohere", "CohereConfig"]
