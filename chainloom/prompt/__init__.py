# chainloom/prompt/__init__.py
from .template import PromptTemplate, StringPromptValue, TemplateRenderer

__all__ = ["PromptTemplate", "StringPromptValue", "TemplateRenderer"]
