# chainloom/memory/conversation_buffer.py
"""
ConversationBuffer - in-process memory of prior (human, ai) turns.

Loads the history as a single text block (or a message list) under
``memory_key`` and appends one turn per successful call.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from chainloom.core.context import RunContext
from chainloom.core.exceptions import (
    MissingInputKeyError,
    MultipleInputsError,
    MultipleOutputsError,
    TypeMismatchError,
)
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import MEMORY

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConversationMessage:
    """Single message in conversation history."""

    role: str  # "human" or "ai"
    content: str


class ConversationBufferConfig(BaseModel):
    """
    Options for ConversationBuffer.

    | option          | default   | effect                                              |
    |-----------------|-----------|-----------------------------------------------------|
    | memory_key      | "history" | key the history is loaded under                     |
    | input_key       | None      | input holding the human turn; None = the sole key   |
    | output_key      | None      | output holding the ai turn; None = the sole key     |
    | human_prefix    | "Human"   | line prefix for human turns                         |
    | ai_prefix       | "AI"      | line prefix for ai turns                            |
    | max_turns       | None      | keep only the last N turns when loading             |
    | return_messages | False     | load a list of {"role", "content"} dicts instead    |
    """

    memory_key: str = Field(default="history")
    input_key: Optional[str] = Field(default=None)
    output_key: Optional[str] = Field(default=None)
    human_prefix: str = Field(default="Human")
    ai_prefix: str = Field(default="AI")
    max_turns: Optional[int] = Field(default=None, ge=1)
    return_messages: bool = Field(default=False)

    model_config = ConfigDict(extra="forbid")


class ConversationBuffer:
    """
    Buffer memory of the whole conversation.

    Examples:
        >>> memory = ConversationBuffer(input_key="question", output_key="answer")
        >>> ctx = RunContext()
        >>> memory.save_context(ctx, {"question": "Hi"}, {"answer": "Hello!"})
        >>> memory.load_memory_variables(ctx, {})
        {'history': 'Human: Hi\\nAI: Hello!'}
    """

    def __init__(self, config: Optional[ConversationBufferConfig] = None, **kwargs: Any) -> None:
        self.config = config or ConversationBufferConfig(**kwargs)
        self._messages: List[ConversationMessage] = []
        self._lock = threading.Lock()

    @property
    def messages(self) -> List[ConversationMessage]:
        with self._lock:
            return list(self._messages)

    def memory_keys(self) -> List[str]:
        return [self.config.memory_key]

    def _recent(self) -> List[ConversationMessage]:
        with self._lock:
            messages = list(self._messages)
        if self.config.max_turns is not None:
            # 2 messages per turn (human + ai)
            messages = messages[-self.config.max_turns * 2 :]
        return messages

    def load_memory_variables(
        self, context: RunContext, inputs: Mapping[str, Any]
    ) -> Dict[str, Any]:
        context.raise_if_cancelled()
        messages = self._recent()

        if self.config.return_messages:
            roles = {"human": "user", "ai": "assistant"}
            history: Any = [{"role": roles[m.role], "content": m.content} for m in messages]
        else:
            lines = []
            for m in messages:
                prefix = self.config.human_prefix if m.role == "human" else self.config.ai_prefix
                lines.append(f"{prefix}: {m.content}")
            history = "\n".join(lines)

        logger.debug(f"{MEMORY} Loaded {len(messages)} messages")
        return {self.config.memory_key: history}

    def save_context(
        self,
        context: RunContext,
        inputs: Mapping[str, Any],
        outputs: Mapping[str, Any],
    ) -> None:
        context.raise_if_cancelled()
        human = self._pick(inputs, self.config.input_key, exclude=self.memory_keys(), side="input")
        ai = self._pick(outputs, self.config.output_key, exclude=[], side="output")

        with self._lock:
            self._messages.append(ConversationMessage(role="human", content=human))
            self._messages.append(ConversationMessage(role="ai", content=ai))

        logger.debug(f"{MEMORY} Saved turn ({len(self._messages) // 2} total)")

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    @staticmethod
    def _pick(
        values: Mapping[str, Any],
        key: Optional[str],
        exclude: List[str],
        side: str,
    ) -> str:
        if key is None:
            candidates = [k for k in values if k not in exclude]
            if not candidates:
                raise MissingInputKeyError(f"<{side}>", chain="ConversationBuffer")
            if len(candidates) > 1:
                error = MultipleInputsError if side == "input" else MultipleOutputsError
                raise error(
                    f"cannot infer {side} key from {sorted(candidates)}; set {side}_key explicitly"
                )
            key = candidates[0]

        if key not in values:
            raise MissingInputKeyError(key, chain="ConversationBuffer")

        value = values[key]
        if not isinstance(value, str):
            raise TypeMismatchError(
                f"{side} value for {key!r} is {type(value).__name__}, expected str"
            )
        return value


__all__ = ["ConversationBuffer", "ConversationBufferConfig", "ConversationMessage"]
