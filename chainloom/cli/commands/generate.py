# chainloom/cli/commands/generate.py
"""
Single generation command.

Usage:
    chainloom generate "Tell me a joke"
    chainloom generate "Tell me a joke" --provider ollama --stop "\n\n"
    chainloom generate "Summarize: ..." --config run.yaml -v
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from chainloom.chains.execution import simple_call
from chainloom.cli.context import CLIContext
from chainloom.cli.ui import ui
from chainloom.core.exceptions import ChainloomError
from chainloom.logging.logger import configure_logging, get_logger
from chainloom.logging.tags import CLI

logger = get_logger(__name__)


def command(
    prompt: str,
    config: Optional[Path] = None,
    provider: Optional[str] = None,
    stop: Optional[List[str]] = None,
    verbose: bool = False,
) -> None:
    """Render ``prompt`` into the configured template and print the answer."""
    if verbose:
        configure_logging(logging.DEBUG)

    try:
        ctx = CLIContext.load(config, provider=provider, stop=stop, verbose=verbose)
        with ctx.open_chain() as chain:
            answer = simple_call(chain, prompt, options=ctx.call_options())
    except ChainloomError as e:
        logger.debug(f"{CLI} generate failed", exc_info=True)
        ui.error(str(e))
        raise typer.Exit(1)

    ui.answer(answer)
