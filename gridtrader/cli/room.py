"""Room commands for GridTrader CLI.

Runs a room live in the terminal, or fast and headless for a summary.
"""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from gridtrader.cli.console import console, setup_logging

DEMO_PLAYER = "demo"


def _get_config(config_path: Optional[Path], seed: Optional[int]):
    """Load configuration, exiting with a readable error if it is invalid."""
    from pydantic import ValidationError
    from gridtrader.config import load_config

    try:
        config = load_config(config_path)
    except (ValidationError, ValueError) as e:
        console.print(Panel(
            f"[red]Invalid configuration:[/red]\n\n{str(e)}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    if seed is not None:
        config = config.model_copy(update={"seed": seed})
    return config


def autoplay_bet(scheduler, player_id: str, report):
    """Stake the minimum on the opening cell containing the current price.

    Only acts on ticks where a column of cells starts.

    Returns:
        The placement response event, or None if nothing was placed.
    """
    candle = report.candle
    target = next(
        (
            c for c in scheduler.state.grid.open_cells()
            if c.start_time == candle.time and c.contains(candle.close)
        ),
        None,
    )
    if target is None:
        return None
    return scheduler.place_bet(player_id, target.id, scheduler.config.minimum_bet)


def _status_table(scheduler, player_id: Optional[str]) -> Table:
    """Generate the live room table."""
    table = Table(
        title="GridTrader Room (Ctrl+C to stop)",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Time", justify="right")
    table.add_column("Open", justify="right", style="dim")
    table.add_column("High", justify="right", style="green")
    table.add_column("Low", justify="right", style="red")
    table.add_column("Close", justify="right", style="bold")
    table.add_column("Cells", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Open Bets", justify="right")

    candle = scheduler.state.price.latest()
    player = scheduler.state.ledger.get(player_id) if player_id else None

    if candle is None:
        table.add_row("-", "-", "-", "-", "-", str(len(scheduler.state.grid)), "-", "-")
        return table

    color = "green" if candle.close >= candle.open else "red"
    table.add_row(
        str(candle.time),
        f"{candle.open:.4f}",
        f"{candle.high:.4f}",
        f"{candle.low:.4f}",
        f"[{color}]{candle.close:.4f}[/{color}]",
        str(len(scheduler.state.grid)),
        f"{player.balance:,.2f}" if player else "-",
        str(len(player.pending_bets())) if player else "-",
    )
    return table


@click.command()
@click.option("--ticks", type=int, default=None, help="Stop after this many ticks.")
@click.option("--fast", is_flag=True, help="Do not wait between ticks.")
@click.option("--seed", type=int, default=None, help="Random seed for the price process.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default ~/.config/gridtrader/config.toml).",
)
@click.option("--autoplay", is_flag=True, help="Join a demo player that bets every batch.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs.")
def run(
    ticks: Optional[int],
    fast: bool,
    seed: Optional[int],
    config_path: Optional[Path],
    autoplay: bool,
    verbose: bool,
) -> None:
    """Run a room with a live price table.

    Press Ctrl+C to stop.

    \b
    Examples:
      gridtrader run
      gridtrader run --autoplay --seed 7
      gridtrader run --ticks 120 --fast
    """
    from rich.live import Live

    from gridtrader.engine import TickScheduler
    from gridtrader.publisher import ConsolePublisher

    setup_logging(verbose)
    config = _get_config(config_path, seed)

    scheduler = TickScheduler.from_config(config, publisher=ConsolePublisher(console=console))
    player_id = DEMO_PLAYER if autoplay else None
    if player_id:
        scheduler.join(player_id)

    try:
        with Live(_status_table(scheduler, player_id), refresh_per_second=4, console=console) as live_display:

            def on_tick(report) -> None:
                if player_id:
                    autoplay_bet(scheduler, player_id, report)
                live_display.update(_status_table(scheduler, player_id))

            scheduler.run(max_ticks=ticks, realtime=not fast, on_tick=on_tick)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped room.[/dim]")


@click.command()
@click.option("--ticks", type=int, default=600, show_default=True, help="Ticks to simulate.")
@click.option("--seed", type=int, default=None, help="Random seed for the price process.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default ~/.config/gridtrader/config.toml).",
)
@click.option(
    "--export",
    "export_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write the candle history to this CSV file.",
)
def simulate(
    ticks: int,
    seed: Optional[int],
    config_path: Optional[Path],
    export_path: Optional[Path],
) -> None:
    """Simulate a room headless with an autoplaying demo player.

    \b
    Examples:
      gridtrader simulate
      gridtrader simulate --ticks 3600 --seed 1 --export history.csv
    """
    from gridtrader.engine import TickScheduler

    config = _get_config(config_path, seed)
    scheduler = TickScheduler.from_config(config)
    scheduler.join(DEMO_PLAYER)

    stats = {"placed": 0, "rejected": 0, "won": 0, "lost": 0, "payout": 0.0}

    def on_tick(report) -> None:
        response = autoplay_bet(scheduler, DEMO_PLAYER, report)
        if response is not None:
            stats["placed" if response.type == "bet_placed" else "rejected"] += 1
        for bet in report.settlement.resolved:
            if bet.owner_id == DEMO_PLAYER:
                stats[bet.status] += 1
                stats["payout"] += bet.payout

    scheduler.run(max_ticks=ticks, realtime=False, on_tick=on_tick)

    player = scheduler.state.ledger.get(DEMO_PLAYER)
    net = player.balance - config.starting_balance
    net_color = "green" if net >= 0 else "red"

    table = Table(title="Simulation Summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Ticks", str(ticks))
    table.add_row("Final Price", f"{scheduler.state.price.current_price:.4f}")
    table.add_row("Bets Placed", str(stats["placed"]))
    table.add_row("Bets Rejected", str(stats["rejected"]))
    table.add_row("Won / Lost", f"{stats['won']} / {stats['lost']}")
    table.add_row("Total Payout", f"{stats['payout']:,.2f}")
    table.add_row("Pending", str(len(player.pending_bets())))
    table.add_row("Final Balance", f"{player.balance:,.2f}")
    table.add_row("Net", f"[{net_color}]{net:+,.2f}[/{net_color}]")
    console.print(table)

    if export_path is not None:
        from gridtrader.market.history import export_history

        rows = export_history(scheduler.state.price.history(), export_path)
        console.print(f"[green]Exported {rows} candles to {export_path}[/green]")
