# chainloom/model/llm/cohere.py
"""
Cohere text generation backend.

Calls the Cohere ``/generate`` endpoint over httpx. Rate-limit and server
failures are retried with a fixed delay; authentication and invalid-request
failures surface immediately.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field

from chainloom.core.context import RunContext
from chainloom.core.exceptions import BackendError, ErrorKind
from chainloom.core.http import create_api_client, post_json
from chainloom.core.retry import RetryPolicy, retry_on_kinds
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import MODEL
from chainloom.model.base import Generation, ModelResult
from chainloom.model.credentials import resolve_api_key

logger = get_logger(__name__)

PROVIDER = "cohere"
GENERATE_ENDPOINT = "/generate"


class CohereConfig(BaseModel):
    """
    Options for the Cohere backend.

    | option             | default                    | effect                                     |
    |--------------------|----------------------------|--------------------------------------------|
    | model              | "command"                  | Cohere model name                          |
    | num_generations    | 1                          | candidates requested per call              |
    | max_tokens         | 256                        | tokens to predict per generation           |
    | temperature        | 0.75                       | sampling randomness                        |
    | k                  | 0                          | top-k sampling (0 disables)                |
    | p                  | 1.0                        | nucleus sampling mass                      |
    | frequency_penalty  | 0.0                        | penalty proportional to token frequency    |
    | presence_penalty   | 0.0                        | flat penalty for already-present tokens    |
    | return_likelihoods | None                       | "GENERATION", "ALL" or "NONE"              |
    | max_retries        | 3                          | total attempts per generate call           |
    | retry_delay        | 1.0                        | seconds between attempts                   |
    | base_url           | "https://api.cohere.ai/v1" | API root                                   |
    | timeout            | None                       | request timeout; None = generation preset  |
    """

    model: str = Field(default="command")
    num_generations: int = Field(default=1, ge=1)
    max_tokens: int = Field(default=256, ge=1)
    temperature: float = Field(default=0.75, ge=0.0)
    k: int = Field(default=0, ge=0)
    p: float = Field(default=1.0, ge=0.0, le=1.0)
    frequency_penalty: float = Field(default=0.0)
    presence_penalty: float = Field(default=0.0)
    return_likelihoods: Optional[Literal["GENERATION", "ALL", "NONE"]] = Field(default=None)
    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=1.0, ge=0.0)
    base_url: str = Field(default="https://api.cohere.ai/v1")
    timeout: Optional[float] = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid")


class Cohere:
    """
    Cohere LLM.

    Args:
        api_key: Cohere API key (falls back to COHERE_API_KEY)
        config: Full option record; keyword overrides build one otherwise
        client: Pre-built httpx client (tests pass one with a MockTransport)

    Example:
        llm = Cohere(temperature=0.2)
        result = llm.generate(RunContext(), "Write a haiku about rain")
        print(result.generations[0].text)
    """

    is_chat_model = False

    is_retryable = staticmethod(retry_on_kinds(ErrorKind.RATE_LIMIT, ErrorKind.SERVER))

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        config: Optional[CohereConfig] = None,
        client: Optional[httpx.Client] = None,
        **kwargs: Any,
    ) -> None:
        self.config = config or CohereConfig(**kwargs)
        if client is None:
            client = create_api_client(
                base_url=self.config.base_url,
                api_key=resolve_api_key(provider=PROVIDER, api_key=api_key),
                timeout=self.config.timeout,
                timeout_type="generate",
            )
        self._client = client
        self._retry = RetryPolicy(
            max_attempts=self.config.max_retries,
            delay=self.config.retry_delay,
        )

    def kind(self) -> str:
        return "llm.Cohere"

    def invocation_params(self) -> Dict[str, Any]:
        return self.config.model_dump(exclude={"base_url", "timeout"})

    def _payload(self, prompt: str, stop: Optional[Sequence[str]]) -> Dict[str, Any]:
        cfg = self.config
        payload: Dict[str, Any] = {
            "model": cfg.model,
            "prompt": prompt,
            "num_generations": cfg.num_generations,
            "max_tokens": cfg.max_tokens,
            "temperature": cfg.temperature,
            "k": cfg.k,
            "p": cfg.p,
            "frequency_penalty": cfg.frequency_penalty,
            "presence_penalty": cfg.presence_penalty,
        }
        if cfg.return_likelihoods:
            payload["return_likelihoods"] = cfg.return_likelihoods
        if stop:
            payload["stop_sequences"] = list(stop)
        return payload

    def generate(
        self,
        context: RunContext,
        prompt: str,
        *,
        stop: Optional[Sequence[str]] = None,
    ) -> ModelResult:
        payload = self._payload(prompt, stop)
        logger.debug(f"{MODEL} cohere generate model={self.config.model}")

        data = self._retry.run(
            lambda: post_json(self._client, GENERATE_ENDPOINT, payload, PROVIDER),
            retry_if=self.is_retryable,
            context=context,
        )

        generations = data.get("generations") or []
        if not isinstance(generations, list) or not generations:
            raise BackendError(
                f"{PROVIDER} returned no generations",
                ErrorKind.UNKNOWN,
                provider=PROVIDER,
            )

        first = generations[0]
        if not isinstance(first, dict):
            raise BackendError(
                f"{PROVIDER} returned a malformed generation: {type(first).__name__}",
                ErrorKind.UNKNOWN,
                provider=PROVIDER,
            )
        return ModelResult(
            generations=[Generation(text=str(first.get("text") or ""))],
            llm_output={
                "likelihood": first.get("likelihood"),
                "token_likelihoods": first.get("token_likelihoods"),
            },
        )

    def close(self) -> None:
        self._client.close()


__all__ = ["Cohere", "CohereConfig"]
