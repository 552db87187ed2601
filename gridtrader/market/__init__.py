"""Synthetic market: price process, pricing model and prediction grid."""

from gridtrader.market.grid import GridGenerator
from gridtrader.market.price_process import PriceProcess
from gridtrader.market.pricing import PricingModel, norm_cdf

__all__ = [
    "GridGenerator",
    "PriceProcess",
    "PricingModel",
    "norm_cdf",
]
