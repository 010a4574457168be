# chainloom/model/chatmodel/ollama.py
"""
Ollama chat backend.

Talks to a local Ollama server through ``POST /api/chat`` with streaming
disabled.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field

from chainloom.core.context import RunContext
from chainloom.core.exceptions import BackendError, ErrorKind, InputTypeMismatchError
from chainloom.core.http import create_api_client, post_json
from chainloom.core.retry import RetryPolicy, retry_on_kinds
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import MODEL
from chainloom.model.base import Generation, ModelResult

logger = get_logger(__name__)

PROVIDER = "ollama"
CHAT_ENDPOINT = "/api/chat"

_ROLE_MAP = {
    "system": "system",
    "user": "user",
    "human": "user",
    "assistant": "assistant",
    "ai": "assistant",
}


class OllamaConfig(BaseModel):
    """
    Options for the Ollama backend.

    | option            | default                  | effect                              |
    |-------------------|--------------------------|-------------------------------------|
    | model             | "llama2"                 | Ollama model tag                    |
    | temperature       | 0.7                      | sampling randomness                 |
    | max_tokens        | 256                      | tokens to predict (num_predict)     |
    | top_p             | 1.0                      | nucleus sampling mass               |
    | top_k             | None                     | top-k sampling                      |
    | presence_penalty  | 0.0                      | flat penalty for present tokens     |
    | frequency_penalty | 0.0                      | penalty proportional to frequency   |
    | max_retries       | 1                        | total attempts per generate call    |
    | retry_delay       | 1.0                      | seconds between attempts            |
    | base_url          | "http://localhost:11434" | server root                         |
    | timeout           | None                     | request timeout; None = chat preset |
    """

    model: str = Field(default="llama2")
    temperature: float = Field(default=0.7, ge=0.0)
    max_tokens: int = Field(default=256, ge=1)
    top_p: float = Field(default=1.0, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=None, ge=1)
    presence_penalty: float = Field(default=0.0)
    frequency_penalty: float = Field(default=0.0)
    max_retries: int = Field(default=1, ge=1)
    retry_delay: float = Field(default=1.0, ge=0.0)
    base_url: str = Field(default="http://localhost:11434")
    timeout: Optional[float] = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid")


def _convert_messages(messages: Sequence[Mapping[str, str]]) -> List[Dict[str, str]]:
    converted = []
    for m in messages:
        role = str(m.get("role", "user")).lower()
        if role not in _ROLE_MAP:
            raise InputTypeMismatchError(f"unknown message role: {role!r}")
        converted.append({"role": _ROLE_MAP[role], "content": str(m.get("content", ""))})
    return converted


class Ollama:
    """
    Ollama chat model.

    Example:
        chat = Ollama(model="llama3.2:1b")
        result = chat.generate(RunContext(), [{"role": "user", "content": "Hi"}])
    """

    is_chat_model = True

    is_retryable = staticmethod(retry_on_kinds(ErrorKind.SERVER, ErrorKind.CONNECTION))

    def __init__(
        self,
        *,
        config: Optional[OllamaConfig] = None,
        client: Optional[httpx.Client] = None,
        **kwargs: Any,
    ) -> None:
        self.config = config or OllamaConfig(**kwargs)
        if client is None:
            client = create_api_client(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                timeout_type="chat",
            )
        self._client = client
        self._retry = RetryPolicy(
            max_attempts=self.config.max_retries,
            delay=self.config.retry_delay,
        )

    def kind(self) -> str:
        return "chatmodel.Ollama"

    def invocation_params(self) -> Dict[str, Any]:
        return self.config.model_dump(exclude={"base_url", "timeout"})

    def _options(self, stop: Optional[Sequence[str]]) -> Dict[str, Any]:
        cfg = self.config
        options: Dict[str, Any] = {
            "temperature": cfg.temperature,
            "num_predict": cfg.max_tokens,
            "top_p": cfg.top_p,
            "presence_penalty": cfg.presence_penalty,
            "frequency_penalty": cfg.frequency_penalty,
        }
        if cfg.top_k is not None:
            options["top_k"] = cfg.top_k
        if stop:
            options["stop"] = list(stop)
        return options

    def generate(
        self,
        context: RunContext,
        messages: List[Dict[str, str]],
        *,
        stop: Optional[Sequence[str]] = None,
    ) -> ModelResult:
        payload = {
            "model": self.config.model,
            "messages": _convert_messages(messages),
            "stream": False,
            "options": self._options(stop),
        }
        logger.debug(f"{MODEL} ollama chat model={self.config.model} messages={len(messages)}")

        data = self._retry.run(
            lambda: post_json(self._client, CHAT_ENDPOINT, payload, PROVIDER),
            retry_if=self.is_retryable,
            context=context,
        )

        message = data.get("message")
        if not isinstance(message, dict) or "content" not in message:
            raise BackendError(
                f"{PROVIDER} response has no message content",
                ErrorKind.UNKNOWN,
                provider=PROVIDER,
            )

        return ModelResult(
            generations=[Generation(text=str(message["content"]))],
            llm_output={
                k: data[k] for k in ("eval_count", "prompt_eval_count", "total_duration") if k in data
            },
        )

    def close(self) -> None:
        self._client.close()


__all__ = ["Ollama", "OllamaConfig"]
