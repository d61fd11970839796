"""
Portfolio: per-symbol holdings with weighted-average cost.

No cash here; the Account owns cash and realized P/L. A holding that is sold
down to zero is removed, so a later buy starts a fresh average cost.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from vtrade_core.types import ErrorKind, Side, TradeResult, valid_quantity

if TYPE_CHECKING:
    from vtrade_core.market import Market

FRAME_COLUMNS = ["symbol", "quantity", "avg_cost", "price", "market_value", "unrealized_pnl"]


@dataclass
class Holding:
    """Position in one symbol. avg_cost is meaningful only while quantity > 0."""

    symbol: str
    quantity: int
    avg_cost: float

    def cost_basis(self) -> float:
        return self.avg_cost * self.quantity


class Portfolio:
    """
    Symbol -> Holding. Every key equals its holding's symbol and every
    quantity is positive.
    """

    def __init__(self) -> None:
        self._holdings: dict[str, Holding] = {}

    def has(self, symbol: str) -> bool:
        return symbol in self._holdings

    def holding(self, symbol: str) -> Holding | None:
        return self._holdings.get(symbol)

    def holdings(self) -> list[Holding]:
        """Holdings sorted by symbol."""
        return [self._holdings[s] for s in sorted(self._holdings)]

    def quantity(self, symbol: str) -> int:
        """Shares held in symbol. 0 if not present."""
        h = self._holdings.get(symbol)
        return h.quantity if h is not None else 0

    def __len__(self) -> int:
        return len(self._holdings)

    def clear(self) -> None:
        self._holdings.clear()

    def buy(self, symbol: str, quantity: int, price: float) -> None:
        """Add shares at price; recompute the average cost."""
        if not valid_quantity(quantity):
            raise ValueError(f"quantity must be a positive integer, got {quantity!r}")
        if not price > 0:
            raise ValueError(f"price must be positive, got {price}")
        h = self._holdings.get(symbol)
        if h is None:
            self._holdings[symbol] = Holding(symbol=symbol, quantity=quantity, avg_cost=price)
            return
        total_cost = h.avg_cost * h.quantity + price * quantity
        h.quantity += quantity
        h.avg_cost = total_cost / h.quantity

    def sell(self, symbol: str, quantity: int, price: float) -> TradeResult:
        """
        Remove shares at price. On success realized_pnl is
        (price - avg_cost) * quantity; on failure nothing changes.
        """
        if not valid_quantity(quantity):
            return TradeResult.failure(
                ErrorKind.INVALID_QUANTITY,
                "Quantity must be a positive whole number",
                side=Side.SELL,
                symbol=symbol,
                quantity=quantity,
            )
        h = self._holdings.get(symbol)
        held = h.quantity if h is not None else 0
        if h is None or held < quantity:
            return TradeResult.failure(
                ErrorKind.INSUFFICIENT_POSITION,
                f"Not enough shares to sell: held {held}, requested {quantity}",
                side=Side.SELL,
                symbol=symbol,
                quantity=quantity,
            )
        profit = (price - h.avg_cost) * quantity
        h.quantity -= quantity
        if h.quantity == 0:
            del self._holdings[symbol]
        return TradeResult.success(
            side=Side.SELL,
            symbol=symbol,
            quantity=quantity,
            price=price,
            realized_pnl=profit,
        )

    def market_value(self, market: Market) -> float:
        """Sum of price * quantity. Symbols missing from the market count as 0."""
        total = 0.0
        for sym, h in self._holdings.items():
            price = market.price(sym)
            if price is not None:
                total += price * h.quantity
        return total

    def unrealized_pnl(self, market: Market) -> float:
        """Sum of (price - avg_cost) * quantity, skipping unlisted symbols."""
        pnl = 0.0
        for sym, h in self._holdings.items():
            price = market.price(sym)
            if price is None:
                continue
            pnl += (price - h.avg_cost) * h.quantity
        return pnl

    def to_frame(self, market: Market) -> pd.DataFrame:
        """One row per holding, sorted by symbol. Unlisted symbols get NaN price."""
        rows = []
        for h in self.holdings():
            price = market.price(h.symbol)
            if price is None:
                price = float("nan")
            rows.append(
                {
                    "symbol": h.symbol,
                    "quantity": h.quantity,
                    "avg_cost": h.avg_cost,
                    "price": price,
                    "market_value": price * h.quantity,
                    "unrealized_pnl": (price - h.avg_cost) * h.quantity,
                }
            )
        return pd.DataFrame(rows) if rows else pd.DataFrame(columns=FRAME_COLUMNS)
