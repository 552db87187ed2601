"""Shared rich console and log routing for the CLI commands."""

import logging

from rich.console import Console

# Console for rich output
console = Console()


def setup_logging(verbose: bool) -> None:
    """Route engine logs through rich."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
