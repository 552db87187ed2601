"""Tests for engine configuration loading."""

import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from gridtrader.config import EngineConfig, load_config
from gridtrader.engine import EngineState


class TestDefaults:
    def test_defaults(self):
        config = EngineConfig()
        assert config.tick_interval == 1.0
        assert config.cell_duration == 30
        assert config.cell_price_height == 1.0
        assert config.layers == 12
        assert config.generation_interval == config.cell_duration
        assert config.initial_columns == 16
        assert config.minimum_bet == 10
        assert config.house_edge == 0.05
        assert config.starting_balance == 10000
        assert config.reconnect_grace == 60
        assert config.bet_retention == 60
        assert config.volatility == 0.2
        assert config.seconds_per_year == 31_536_000
        assert config.warmup_ticks == 3600
        assert config.history_size == 5000

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.layers = 3

    @pytest.mark.parametrize(
        "overrides",
        [
            {"house_edge": 1.0},
            {"layers": 0},
            {"tick_interval": 0},
            {"minimum_bet": 20000},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            EngineConfig(**overrides)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_config(Path(tmpdir) / "absent.toml") == EngineConfig()

    def test_engine_table_overrides(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.toml"
            path.write_text("[engine]\nstarting_balance = 500\nlayers = 6\nseed = 3\n")

            config = load_config(path)

            assert config.starting_balance == 500
            assert config.layers == 6
            assert config.seed == 3
            assert config.minimum_bet == 10

    def test_invalid_value_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.toml"
            path.write_text("[engine]\nlayers = -1\n")
            with pytest.raises(ValidationError):
                load_config(path)


class TestEngineState:
    def test_state_follows_config(self):
        config = EngineConfig(warmup_ticks=10, layers=4, starting_balance=50, minimum_bet=5, seed=1)
        state = EngineState.from_config(config, start_time=0)

        assert len(state.price.history()) == 10
        assert state.grid.layers == 4
        assert state.ledger.starting_balance == 50
        assert state.ledger.minimum_bet == 5

    def test_seed_reproduces_prices(self):
        config = EngineConfig(warmup_ticks=30, seed=42)
        a = EngineState.from_config(config, start_time=0)
        b = EngineState.from_config(config, start_time=0)
        assert a.price.history() == b.price.history()
