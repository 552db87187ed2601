"""Engine configuration.

All constants are fixed when an engine is built. Values can be overridden
from the ``[engine]`` table of ``~/.config/gridtrader/config.toml``.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "gridtrader" / "config.toml"


class EngineConfig(BaseModel):
    """Constants for one engine instance."""

    tick_interval: float = Field(default=1.0, gt=0, description="Wall-clock seconds per tick")
    cell_duration: int = Field(default=30, ge=1, description="Cell lifetime in seconds")
    cell_price_height: float = Field(default=1.0, gt=0, description="Cell height in price units")
    layers: int = Field(default=12, ge=1, description="Cells per generated batch")
    generation_interval: int = Field(default=30, ge=1, description="Seconds between batches")
    initial_columns: int = Field(default=16, ge=0, description="Batches pre-generated on start")
    minimum_bet: float = Field(default=10.0, gt=0, description="Smallest accepted stake")
    house_edge: float = Field(default=0.05, ge=0, lt=1, description="Discount off fair odds")
    starting_balance: float = Field(default=10000.0, ge=0, description="Balance of a new player")
    reconnect_grace: int = Field(default=60, ge=0, description="Seconds a dropped player is kept")
    bet_retention: int = Field(default=60, ge=0, description="Seconds settled bets are kept")
    volatility: float = Field(default=0.2, gt=0, description="Price process per-tick volatility")
    sigma: float = Field(default=325.0, gt=0, description="Pricing volatility per sqrt(year)")
    seconds_per_year: int = Field(default=31_536_000, gt=0, description="Annualization basis")
    start_price: float = Field(default=100.0, gt=0, description="Initial price")
    warmup_ticks: int = Field(default=3600, ge=0, description="Silent pre-roll candles")
    history_size: int = Field(default=5000, ge=1, description="Candles retained")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible runs")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ratios(self) -> "EngineConfig":
        if self.minimum_bet > self.starting_balance > 0:
            raise ValueError("minimum_bet cannot exceed starting_balance")
        return self


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """Load the engine configuration.

    Args:
        path: TOML file to read. Defaults to ``DEFAULT_CONFIG_PATH``.

    Returns:
        EngineConfig built from the file's ``[engine]`` table, or the
        defaults when the file does not exist.

    Raises:
        pydantic.ValidationError: If a configured value is invalid.
        toml.TomlDecodeError: If the file is not valid TOML.
    """
    import toml

    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return EngineConfig()

    data = toml.load(config_path)
    return EngineConfig(**data.get("engine", {}))
