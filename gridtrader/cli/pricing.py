"""Pricing commands for GridTrader CLI.

Shows how the model prices a single interval or a whole batch.
"""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from gridtrader.cli.console import console


def _get_config(config_path: Optional[Path]):
    """Load configuration, exiting with a readable error if it is invalid."""
    from pydantic import ValidationError
    from gridtrader.config import load_config

    try:
        return load_config(config_path)
    except (ValidationError, ValueError) as e:
        console.print(Panel(
            f"[red]Invalid configuration:[/red]\n\n{str(e)}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)


def _pricing_model(config):
    from gridtrader.market import PricingModel

    return PricingModel(
        sigma=config.sigma,
        house_edge=config.house_edge,
        seconds_per_year=config.seconds_per_year,
    )


@click.command()
@click.option("--price", type=float, default=None, help="Current price (default: config start price).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default ~/.config/gridtrader/config.toml).",
)
def grid(price: Optional[float], config_path: Optional[Path]) -> None:
    """Print one generated batch of cells with their odds.

    \b
    Examples:
      gridtrader grid
      gridtrader grid --price 101.37
    """
    from gridtrader.market import GridGenerator

    config = _get_config(config_path)
    spot = config.start_price if price is None else price

    generator = GridGenerator(
        _pricing_model(config),
        price_height=config.cell_price_height,
        layers=config.layers,
        duration=config.cell_duration,
        generation_interval=config.generation_interval,
    )
    cells = generator.generate(spot, 0)

    table = Table(
        title=f"Grid at {spot:.4f} ({config.cell_duration}s cells)",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Low", justify="right")
    table.add_column("High", justify="right")
    table.add_column("Probability", justify="right")
    table.add_column("Odds", justify="right")

    for cell in cells:
        style = "bold yellow" if cell.contains(spot) else ""
        table.add_row(
            f"{cell.low_price:.2f}",
            f"{cell.high_price:.2f}",
            f"{cell.probability:.2%}",
            f"{cell.odds:.2f}x",
            style=style,
        )

    console.print(table)


@click.command()
@click.argument("price", type=float)
@click.argument("low", type=float)
@click.argument("high", type=float)
@click.option("--duration", type=int, default=None, help="Seconds to maturity (default: cell duration).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default ~/.config/gridtrader/config.toml).",
)
def odds(price: float, low: float, high: float, duration: Optional[int], config_path: Optional[Path]) -> None:
    """Price the interval [LOW, HIGH) for a current PRICE.

    \b
    Examples:
      gridtrader odds 100 100 101
      gridtrader odds 100 102 103 --duration 60
    """
    if high <= low:
        raise click.BadParameter("HIGH must be greater than LOW", param_hint="HIGH")

    config = _get_config(config_path)
    seconds = config.cell_duration if duration is None else duration

    probability, multiplier = _pricing_model(config).price_interval(price, low, high, seconds)

    console.print(Panel(
        f"[bold]Interval:[/bold]    [{low:g}, {high:g})\n"
        f"[bold]Price:[/bold]       {price:g}\n"
        f"[bold]Maturity:[/bold]    {seconds}s\n\n"
        f"[bold]Probability:[/bold] {probability:.4%}\n"
        f"[bold]Odds:[/bold]        [green]{multiplier:.2f}x[/green]",
        title="[bold cyan]Cell Pricing[/bold cyan]",
        border_style="cyan",
    ))
