"""CLI commands for GridTrader.

This package provides the command-line interface for running a
grid-wagering room and inspecting how cells are priced.
"""

from gridtrader.cli.main import cli, main

__all__ = ["cli", "main"]
