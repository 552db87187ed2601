"""Candle history export."""

from pathlib import Path
from typing import Iterable

import pandas as pd

from gridtrader.models import Candle


def history_frame(candles: Iterable[Candle]) -> pd.DataFrame:
    """Build an OHLC DataFrame indexed by UTC timestamp.

    Args:
        candles: Candles, oldest first.

    Returns:
        DataFrame with open/high/low/close columns.
    """
    df = pd.DataFrame(
        [c.model_dump() for c in candles],
        columns=["time", "open", "high", "low", "close"],
    )
    df["time"] = pd.to_datetime(df["time"], unit="s", utc=True)
    return df.set_index("time")


def export_history(candles: Iterable[Candle], path: Path) -> int:
    """Write candles to a CSV file.

    Returns:
        Number of rows written.
    """
    df = history_frame(candles)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path)
    return len(df)
