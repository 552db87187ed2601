"""Main CLI entry point for GridTrader.

Command modules keep their engine imports inside the command bodies, so
registering them here stays cheap.
"""

import click

from gridtrader.cli.pricing import grid, odds
from gridtrader.cli.room import run, simulate

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="gridtrader")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """GridTrader - wager on where a synthetic price lands.

    Runs a room with a one-second random-walk price and a ladder of
    price/time cells priced by a Gaussian model.

    \b
    Quick Start:
      gridtrader run --autoplay     # Live room with a demo player
      gridtrader simulate --ticks 600
      gridtrader odds 100 100 101   # Price a single cell
    """
    ctx.ensure_object(dict)


for command in (run, simulate, grid, odds):
    cli.add_command(command)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
