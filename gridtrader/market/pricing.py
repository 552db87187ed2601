"""Probability and odds model for prediction cells.

The price is modelled as an arithmetic (additive) Gaussian diffusion with
zero drift and a fixed absolute volatility, so the chance of closing inside
``[low, high)`` after ``T`` years is a difference of two normal CDFs.
"""

import math


# Zelen & Severo (Abramowitz & Stegun 26.2.17), |error| < 7.5e-8
_P = 0.2316419
_B1 = 0.319381530
_B2 = -0.356563782
_B3 = 1.781477937
_B4 = -1.821255978
_B5 = 1.330274429
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def norm_cdf(x: float) -> float:
    """Standard normal cumulative distribution function.

    Args:
        x: Point to evaluate.

    Returns:
        P(Z <= x) for a standard normal Z.
    """
    t = 1.0 / (1.0 + _P * abs(x))
    density = _INV_SQRT_2PI * math.exp(-x * x / 2.0)
    tail = density * t * (_B1 + t * (_B2 + t * (_B3 + t * (_B4 + t * _B5))))
    return 1.0 - tail if x > 0 else tail


class PricingModel:
    """Prices price intervals for a fixed maturity.

    Pure: results depend only on the arguments and the constants fixed at
    construction.
    """

    def __init__(
        self,
        sigma: float = 325.0,
        house_edge: float = 0.05,
        seconds_per_year: int = 31_536_000,
        min_probability: float = 0.01,
        max_probability: float = 0.99,
        max_odds: float = 99.0,
        min_odds: float = 1.01,
    ):
        """Initialize the pricing model.

        Args:
            sigma: Absolute volatility in price units per sqrt(year).
            house_edge: Fraction shaved off fair odds.
            seconds_per_year: Annualization basis.
            min_probability: At or below this, odds are capped at max_odds.
            max_probability: At or above this, odds are floored at min_odds.
            max_odds: Odds cap for unlikely cells.
            min_odds: Odds floor for near-certain cells.
        """
        if sigma <= 0:
            raise ValueError("sigma must be positive")
        if not 0 <= house_edge < 1:
            raise ValueError("house_edge must be in [0, 1)")
        self.sigma = sigma
        self.house_edge = house_edge
        self.seconds_per_year = seconds_per_year
        self.min_probability = min_probability
        self.max_probability = max_probability
        self.max_odds = max_odds
        self.min_odds = min_odds

    def time_to_maturity(self, duration_seconds: float) -> float:
        """Convert a duration in seconds to years."""
        return duration_seconds / self.seconds_per_year

    def probability(self, spot: float, low: float, high: float, years: float) -> float:
        """Probability that the price ends in [low, high) after ``years``.

        Args:
            spot: Current price.
            low: Lower bound of the interval.
            high: Upper bound of the interval.
            years: Time to maturity in years.

        Returns:
            Probability in [0, 1]. Zero if the maturity is not in the future.
        """
        if years <= 0:
            return 0.0

        std_dev = self.sigma * math.sqrt(years)
        z_high = (high - spot) / std_dev
        z_low = (low - spot) / std_dev

        prob = norm_cdf(z_high) - norm_cdf(z_low)
        return min(1.0, max(0.0, prob))

    def odds(self, probability: float) -> float:
        """Payout multiplier offered for a win probability.

        Fair odds ``1 / p`` are discounted by the house edge and rounded to
        two decimals, then kept within [min_odds, max_odds].
        """
        if probability <= self.min_probability:
            return self.max_odds
        if probability >= self.max_probability:
            return self.min_odds
        odds = round((1.0 / probability) * (1.0 - self.house_edge), 2)
        return min(self.max_odds, max(self.min_odds, odds))

    def price_interval(
        self,
        spot: float,
        low: float,
        high: float,
        duration_seconds: float,
    ) -> tuple[float, float]:
        """Return ``(probability, odds)`` for an interval maturing in ``duration_seconds``."""
        p = self.probability(spot, low, high, self.time_to_maturity(duration_seconds))
        return p, self.odds(p)
