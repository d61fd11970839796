"""
Price model: next price from current price and volatility.

Gaussian noise plus a small positive drift, clamped so a price never drops
below 1.0 nor gains more than 25% in one tick. The random source is passed in
explicitly; there is no module-level generator.
"""

from __future__ import annotations

import time
from typing import Protocol

import numpy as np

DRIFT = 0.0005
MAX_TICK_GAIN = 1.25
PRICE_FLOOR = 1.0


class RandomSource(Protocol):
    """Anything that draws from a normal distribution (e.g. numpy.random.Generator)."""

    def normal(self, loc: float, scale: float) -> float:
        ...


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Seeded generator. Time-derived seed when none is given."""
    if seed is None:
        seed = time.time_ns()
    return np.random.default_rng(seed)


def next_price(current_price: float, volatility: float, rng: RandomSource) -> float:
    """
    One step of the price walk.

    Parameters
    ----------
    current_price : float
        Current price, positive.
    volatility : float
        Standard deviation of the per-tick relative change, non-negative.
    rng : RandomSource
        Consumed exactly once.

    Returns
    -------
    float
        max(1.0, min(current * (1 + drift + noise), current * 1.25)).
        Prices below 0.8 therefore come back as the 1.0 floor.
    """
    noise = float(rng.normal(0.0, volatility))
    candidate = current_price * (1.0 + DRIFT + noise)
    return max(PRICE_FLOOR, min(candidate, current_price * MAX_TICK_GAIN))
