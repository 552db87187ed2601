"""GridTrader - a synthetic price/time grid wagering engine."""
