# chainloom/cli/commands/batch.py
"""
Batch generation command.

Reads one input per line (blank lines skipped), runs them concurrently
and prints the answers in input order.

Usage:
    chainloom batch questions.txt
    chainloom batch questions.txt --max-concurrency 4 --config run.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from chainloom.chains.execution import batch_call
from chainloom.cli.context import CLIContext
from chainloom.cli.ui import ui
from chainloom.core.exceptions import ChainloomError, MultipleInputsError
from chainloom.logging.logger import configure_logging, get_logger
from chainloom.logging.tags import CLI

logger = get_logger(__name__)


def _read_inputs(file: Path) -> List[str]:
    if not file.is_file():
        ui.error(f"Input file not found: {file}")
        raise typer.Exit(1)
    lines = file.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def command(
    file: Path,
    config: Optional[Path] = None,
    provider: Optional[str] = None,
    stop: Optional[List[str]] = None,
    max_concurrency: Optional[int] = None,
    verbose: bool = False,
) -> None:
    """Run the configured chain over every line of ``file``."""
    if verbose:
        configure_logging(logging.DEBUG)

    inputs = _read_inputs(file)
    if not inputs:
        ui.info("No inputs found.")
        return

    try:
        ctx = CLIContext.load(config, provider=provider, stop=stop, verbose=verbose)
        with ctx.open_chain() as chain:
            keys = chain.input_keys()
            if len(keys) != 1:
                raise MultipleInputsError(f"batch prompt must have exactly one variable, got {keys}")

            results = batch_call(
                chain,
                [{keys[0]: text} for text in inputs],
                options=ctx.call_options(),
                max_concurrency=max_concurrency or ctx.config.max_concurrency,
            )
    except ChainloomError as e:
        logger.debug(f"{CLI} batch failed", exc_info=True)
        ui.error(str(e))
        raise typer.Exit(1)

    output_key = chain.output_keys()[0]
    for index, (text, outputs) in enumerate(zip(inputs, results), start=1):
        ui.answer(str(outputs[output_key]), label=f"[{index}] {text}")

    ui.success(f"{len(results)} inputs processed")
