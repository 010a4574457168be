# chainloom/chains/llm.py
"""
LLMChain - render a prompt, call one backend, return the trimmed text.

Usage:
    chain = LLMChain(Cohere(), PromptTemplate("Summarize: {text_in}"))
    summary = simple_call(chain, "long text ...")
"""

from __future__ import annotations

from typing import Any, List, Optional

from chainloom.callbacks.base import Observer
from chainloom.chains.base import ChainCallOptions
from chainloom.chains.config import LLMChainConfig
from chainloom.core.context import RunContext
from chainloom.core.exceptions import BackendError, ErrorKind
from chainloom.core.values import ChainValues
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import CHAIN
from chainloom.memory.base import Memory
from chainloom.model.base import generate_prompt
from chainloom.prompt.template import TemplateRenderer

logger = get_logger(__name__)


class LLMChain:
    """
    Single-model chain.

    Input keys are the prompt's variables; the only output key is
    ``config.output_key``.
    """

    def __init__(
        self,
        model: Any,
        prompt: TemplateRenderer,
        *,
        config: Optional[LLMChainConfig] = None,
        **kwargs: Any,
    ) -> None:
        self.model = model
        self.prompt = prompt
        self.config = config or LLMChainConfig(**kwargs)

    def call(
        self,
        context: RunContext,
        inputs: ChainValues,
        options: ChainCallOptions,
    ) -> ChainValues:
        prompt_value = self.prompt.format_prompt(inputs)
        result = generate_prompt(context, self.model, prompt_value, stop=options.stop)

        if not result.generations:
            raise BackendError("backend returned no generations", ErrorKind.UNKNOWN)

        text = result.generations[0].text.strip()
        logger.debug(f"{CHAIN} LLM generated {len(text)} chars")
        return ChainValues({self.config.output_key: text})

    def input_keys(self) -> List[str]:
        return self.prompt.input_variables()

    def output_keys(self) -> List[str]:
        return [self.config.output_key]

    def memory(self) -> Optional[Memory]:
        return self.config.memory

    def kind(self) -> str:
        return "LLM"

    def verbose(self) -> bool:
        return self.config.verbose

    def observers(self) -> List[Observer]:
        return list(self.config.observers)


__all__ = ["LLMChain"]
