# chainloom/cli/commands/validate_config.py
"""
Config validation command.

Usage:
    chainloom validate-config run.yaml
"""

from __future__ import annotations

from pathlib import Path

import typer

from chainloom.chains.config import RunConfig
from chainloom.cli.ui import ui
from chainloom.core.config import load_config
from chainloom.core.exceptions import ConfigurationError
from chainloom.model.registry import available_models
from chainloom.prompt.template import PromptTemplate


def command(file: Path) -> None:
    """Validate ``file`` against RunConfig and print a summary."""
    try:
        config = load_config(file, RunConfig)
    except ConfigurationError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    if config.model.provider not in available_models():
        ui.error(
            f"Unknown model provider: {config.model.provider!r}. "
            f"Available: {available_models()}"
        )
        raise typer.Exit(1)

    variables = PromptTemplate(config.prompt).input_variables()

    ui.success(f"{file} is valid")
    ui.info(f"provider: {config.model.provider}")
    ui.info(f"prompt variables: {', '.join(variables) or '(none)'}")
    if config.stop:
        ui.info(f"stop: {config.stop}")
