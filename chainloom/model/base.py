# chainloom/model/base.py
"""
Generation backend contracts.

These are documentation-only type hints. Chains call the methods and let
duck typing work; the only runtime distinction is the ``is_chat_model``
class attribute used by generate_prompt() to pick the prompt form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from chainloom.core.context import RunContext
from chainloom.prompt.template import StringPromptValue


@dataclass(frozen=True)
class Generation:
    """One candidate produced by a backend."""

    text: str
    info: Dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass
class ModelResult:
    """Candidates plus provider metadata (likelihoods, token usage, ...)."""

    generations: List[Generation]
    llm_output: Dict[str, Any] = field(default_factory=dict)


class LLM(Protocol):
    """Text-in, text-out backend."""

    is_chat_model: bool

    def generate(
        self,
        context: RunContext,
        prompt: str,
        *,
        stop: Optional[Sequence[str]] = None,
    ) -> ModelResult: ...


class ChatModel(Protocol):
    """Messages-in, text-out backend."""

    is_chat_model: bool

    def generate(
        self,
        context: RunContext,
        messages: List[Dict[str, str]],
        *,
        stop: Optional[Sequence[str]] = None,
    ) -> ModelResult: ...


class Tokenizer(Protocol):
    """Token counting collaborator."""

    def get_num_tokens(self, text: str) -> int: ...


def generate_prompt(
    context: RunContext,
    model: Any,
    prompt: StringPromptValue,
    *,
    stop: Optional[Sequence[str]] = None,
) -> ModelResult:
    """
    Send a rendered prompt to either kind of backend.

    Chat models receive the prompt as messages, text models as a string.
    """
    context.raise_if_cancelled()
    if getattr(model, "is_chat_model", False):
        return model.generate(context, prompt.to_messages(), stop=stop)
    return model.generate(context, prompt.to_string(), stop=stop)


__all__ = [
    "Generation",
    "ModelResult",
    "LLM",
    "ChatModel",
    "Tokenizer",
    "generate_prompt",
]
