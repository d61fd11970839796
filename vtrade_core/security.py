"""
Security: a tradable instrument with a current price.

Only one kind exists (Stock). The kind tag keeps the set closed without a
class hierarchy; add a member and a branch in update_price to extend it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from vtrade_core.price_model import RandomSource, next_price


class SecurityKind(Enum):
    STOCK = "stock"


@dataclass
class Stock:
    """
    Symbol and volatility are fixed at creation; price is mutated only by
    update_price (i.e. by Market.tick).
    """

    symbol: str
    name: str
    price: float
    volatility: float
    kind: SecurityKind = field(default=SecurityKind.STOCK, init=False)

    def __post_init__(self) -> None:
        self.symbol = self.symbol.strip().upper()
        if not self.symbol:
            raise ValueError("symbol must be non-empty")
        if not (self.price > 0 and math.isfinite(self.price)):
            raise ValueError(f"price must be positive, got {self.price!r}")
        if not (self.volatility >= 0 and math.isfinite(self.volatility)):
            raise ValueError(f"volatility must be non-negative, got {self.volatility!r}")

    def update_price(self, rng: RandomSource) -> float:
        """Advance one tick. Returns the new price."""
        self.price = next_price(self.price, self.volatility, rng)
        return self.price


Security = Stock
