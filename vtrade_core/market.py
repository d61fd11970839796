"""
Market: registry of tradable securities keyed by symbol.

Owns every Security and its current price. Prices move only through tick().
"""

from __future__ import annotations

import logging

import pandas as pd

from vtrade_core.price_model import RandomSource
from vtrade_core.security import Security

logger = logging.getLogger(__name__)

SNAPSHOT_COLUMNS = ["symbol", "name", "price", "volatility"]


class Market:
    """
    Symbol -> Security. Symbols are stored upper-case (Stock normalizes them);
    lookups are exact, so callers upper-case user input before calling get().
    """

    def __init__(self, securities: list[Security] | None = None) -> None:
        self._securities: dict[str, Security] = {}
        for sec in securities or ():
            self.register(sec)

    def register(self, security: Security) -> None:
        """Add a security. A duplicate symbol replaces the earlier entry."""
        if security.symbol in self._securities:
            logger.warning("Market: symbol %s already registered; replacing it", security.symbol)
        self._securities[security.symbol] = security

    def get(self, symbol: str) -> Security | None:
        return self._securities.get(symbol)

    def price(self, symbol: str) -> float | None:
        """Current price for symbol, None if not listed."""
        sec = self._securities.get(symbol)
        return sec.price if sec is not None else None

    def symbols(self) -> list[str]:
        return sorted(self._securities)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._securities

    def __len__(self) -> int:
        return len(self._securities)

    def tick(self, rng: RandomSource, times: int = 1) -> None:
        """
        Advance every security `times` steps. Each step draws once per
        security, in registration order.
        """
        if times < 0:
            raise ValueError(f"times must be non-negative, got {times}")
        for _ in range(times):
            for sec in self._securities.values():
                sec.update_price(rng)
        logger.debug("Market: advanced %d securities by %d tick(s)", len(self._securities), times)

    def list(self) -> list[Security]:
        """Securities sorted by symbol. Read-only view for display."""
        return [self._securities[s] for s in sorted(self._securities)]

    def snapshot(self) -> pd.DataFrame:
        """Current prices as a DataFrame (one row per symbol, sorted)."""
        rows = [
            {"symbol": s.symbol, "name": s.name, "price": s.price, "volatility": s.volatility}
            for s in self.list()
        ]
        return pd.DataFrame(rows) if rows else pd.DataFrame(columns=SNAPSHOT_COLUMNS)
