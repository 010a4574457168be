# chainloom/cli/cli.py
"""
chainloom CLI - Main application.

Commands:
    chainloom generate          Run one prompt through the configured backend
    chainloom batch             Run every line of a file concurrently
    chainloom validate-config   Check a YAML run config

NOTE: Commands use lazy loading - backend imports only happen when a command is invoked.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(
    name="chainloom",
    help="chainloom - composable LLM chains.",
    no_args_is_help=True,
    add_completion=False,
)


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("generate")
def generate(
    prompt: str = typer.Argument(..., help="Input text for the prompt template."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML run config."),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Backend to use."),
    stop: Optional[List[str]] = typer.Option(None, "--stop", "-s", help="Stop sequence (repeatable)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace chain runs and debug logs."),
) -> None:
    """Generate text for a single input."""
    from chainloom.cli.commands import generate as mod

    mod.command(prompt=prompt, config=config, provider=provider, stop=stop, verbose=verbose)


@app.command("batch")
def batch(
    file: Path = typer.Argument(..., help="Text file with one input per line."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML run config."),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Backend to use."),
    stop: Optional[List[str]] = typer.Option(None, "--stop", "-s", help="Stop sequence (repeatable)."),
    max_concurrency: Optional[int] = typer.Option(
        None, "--max-concurrency", "-n", min=1, help="Parallel workers."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace chain runs and debug logs."),
) -> None:
    """Generate text for every line of a file."""
    from chainloom.cli.commands import batch as mod

    mod.command(
        file=file,
        config=config,
        provider=provider,
        stop=stop,
        max_concurrency=max_concurrency,
        verbose=verbose,
    )


@app.command("validate-config")
def validate_config(
    file: Path = typer.Argument(..., help="YAML run config to check."),
) -> None:
    """Validate a YAML run config."""
    from chainloom.cli.commands import validate_config as mod

    mod.command(file=file)


if __name__ == "__main__":
    app()
