# chainloom/cli/commands/__init__.py
"""Command implementations, imported lazily by chainloom.cli.cli."""
