# chainloom/cli/context.py
"""
CLI context - everything a command needs to build and run its chain.

Config Loading Strategy:
    1. RunConfig defaults (cohere, "{input}" prompt)
    2. --config FILE (YAML, validated against RunConfig)
    3. Command-line flags (--provider, --stop, --verbose) override both

Usage:
    ctx = CLIContext.load(config_path, provider="ollama", verbose=True)
    with ctx.open_chain() as chain:
        answer = simple_call(chain, "Hello", options=ctx.call_options())
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator, List, Optional

from chainloom.chains.base import CallOptions
from chainloom.chains.config import RunConfig
from chainloom.chains.llm import LLMChain
from chainloom.core.config import load_config
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import CLI
from chainloom.model.registry import ModelConfig, model_from_config
from chainloom.prompt.template import PromptTemplate

logger = get_logger(__name__)


@dataclass
class CLIContext:
    """Resolved run configuration plus command-line overrides."""

    config: RunConfig
    config_path: Optional[Path] = None
    stop: Optional[List[str]] = field(default=None)

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        *,
        provider: Optional[str] = None,
        stop: Optional[List[str]] = None,
        verbose: bool = False,
    ) -> "CLIContext":
        """
        Build the context.

        Raises:
            ConfigurationError: If the config file is missing or invalid
        """
        config = load_config(config_path, RunConfig) if config_path else RunConfig()

        updates = {}
        if provider and provider != config.model.provider:
            # Provider kwargs do not carry over to a different backend
            updates["model"] = ModelConfig(provider=provider)
        if verbose:
            updates["verbose"] = True
        if updates:
            config = config.model_copy(update=updates)

        logger.debug(f"{CLI} provider={config.model.provider} config={config_path}")
        return cls(config=config, config_path=config_path, stop=list(stop) if stop else config.stop)

    @property
    def provider(self) -> str:
        return self.config.model.provider

    def build_chain(self) -> LLMChain:
        """
        Build an LLMChain over the configured backend and prompt.

        Raises:
            ConfigurationError: If the backend cannot be built
        """
        model = model_from_config(self.config.model)
        return LLMChain(model, PromptTemplate(self.config.prompt), verbose=self.config.verbose)

    @contextmanager
    def open_chain(self) -> Generator[LLMChain, None, None]:
        """
        Build the chain and close its backend client on exit.

        Usage:
            with ctx.open_chain() as chain:
                answer = simple_call(chain, "Hello", options=ctx.call_options())
        """
        chain = self.build_chain()
        try:
            yield chain
        finally:
            close = getattr(chain.model, "close", None)
            if callable(close):
                close()
                logger.debug(f"{CLI} closed {self.provider} backend")

    def call_options(self) -> CallOptions:
        return CallOptions(stop=self.stop)


__all__ = ["CLIContext"]
