"""
Account: cash ledger, realized P/L and one owned Portfolio.

Every operation is a single state transition: it either applies fully and
returns an OK TradeResult, or changes nothing and returns a rejection.
"""

from __future__ import annotations

import logging
import math

from vtrade_core.market import Market
from vtrade_core.persistence import AccountRecord, HoldingRecord
from vtrade_core.portfolio import Portfolio
from vtrade_core.types import ErrorKind, Side, TradeResult, valid_quantity

logger = logging.getLogger(__name__)

# Tolerance for float rounding when cost is compared to cash.
FUNDS_EPSILON = 1e-9


class Account:
    """
    Single-user account. Reads prices from a Market passed per call; does not
    hold a reference to it.
    """

    def __init__(
        self,
        name: str,
        cash: float = 0.0,
        realized_pnl: float = 0.0,
        portfolio: Portfolio | None = None,
    ) -> None:
        if cash < 0:
            raise ValueError(f"cash must be non-negative, got {cash}")
        self._name = name
        self._cash = float(cash)
        self._realized_pnl = float(realized_pnl)
        self._portfolio = portfolio if portfolio is not None else Portfolio()
        self._trade_log: list[TradeResult] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def cash(self) -> float:
        return self._cash

    balance = cash

    @property
    def realized_pnl(self) -> float:
        return self._realized_pnl

    @property
    def portfolio(self) -> Portfolio:
        return self._portfolio

    def trade_log(self) -> list[TradeResult]:
        """All attempted operations in order, rejections included."""
        return list(self._trade_log)

    def _record(self, result: TradeResult) -> TradeResult:
        self._trade_log.append(result)
        if result.ok:
            logger.info(
                "Account %s: %s %s %s @ %s (cash %.2f)",
                self._name,
                result.side.value if result.side else "-",
                result.quantity,
                result.symbol or "",
                result.price,
                self._cash,
            )
        else:
            logger.warning("Account %s: rejected (%s): %s", self._name, result.error.value, result.message)
        return result

    def add_funds(self, amount: float) -> TradeResult:
        if not (amount > 0 and math.isfinite(amount)):
            return self._record(
                TradeResult.failure(ErrorKind.INVALID_AMOUNT, "Amount must be positive", side=Side.DEPOSIT)
            )
        self._cash += amount
        return self._record(TradeResult.success(side=Side.DEPOSIT, cash_delta=amount))

    def buy(self, market: Market, symbol: str, quantity: int) -> TradeResult:
        """Buy at the market's current price if cash covers the cost."""
        if not valid_quantity(quantity):
            return self._record(
                TradeResult.failure(
                    ErrorKind.INVALID_QUANTITY,
                    "Quantity must be a positive whole number",
                    side=Side.BUY,
                    symbol=symbol,
                    quantity=quantity,
                )
            )
        price = market.price(symbol)
        if price is None:
            return self._record(
                TradeResult.failure(
                    ErrorKind.UNKNOWN_SYMBOL,
                    f"Symbol not found: {symbol}",
                    side=Side.BUY,
                    symbol=symbol,
                    quantity=quantity,
                )
            )
        cost = price * quantity
        if cost > self._cash + FUNDS_EPSILON:
            return self._record(
                TradeResult.failure(
                    ErrorKind.INSUFFICIENT_FUNDS,
                    f"Insufficient balance: cost {cost:.2f} exceeds cash {self._cash:.2f}",
                    side=Side.BUY,
                    symbol=symbol,
                    quantity=quantity,
                    price=price,
                )
            )
        self._cash -= cost
        self._portfolio.buy(symbol, quantity, price)
        return self._record(
            TradeResult.success(side=Side.BUY, symbol=symbol, quantity=quantity, price=price, cash_delta=-cost)
        )

    def sell(self, market: Market, symbol: str, quantity: int) -> TradeResult:
        """Sell at the market's current price; proceeds to cash, profit to realized P/L."""
        if not valid_quantity(quantity):
            return self._record(
                TradeResult.failure(
                    ErrorKind.INVALID_QUANTITY,
                    "Quantity must be a positive whole number",
                    side=Side.SELL,
                    symbol=symbol,
                    quantity=quantity,
                )
            )
        # Read once: the same price feeds both the P/L and the cash credit.
        price = market.price(symbol)
        if price is None:
            return self._record(
                TradeResult.failure(
                    ErrorKind.UNKNOWN_SYMBOL,
                    f"Symbol not found: {symbol}",
                    side=Side.SELL,
                    symbol=symbol,
                    quantity=quantity,
                )
            )
        result = self._portfolio.sell(symbol, quantity, price)
        if not result.ok:
            return self._record(result)
        proceeds = price * quantity
        self._cash += proceeds
        self._realized_pnl += result.realized_pnl
        return self._record(
            TradeResult.success(
                side=Side.SELL,
                symbol=symbol,
                quantity=quantity,
                price=price,
                cash_delta=proceeds,
                realized_pnl=result.realized_pnl,
            )
        )

    def market_value(self, market: Market) -> float:
        return self._portfolio.market_value(market)

    def unrealized_pnl(self, market: Market) -> float:
        return self._portfolio.unrealized_pnl(market)

    def total_equity(self, market: Market) -> float:
        """Cash plus holdings at current prices."""
        return self._cash + self._portfolio.market_value(market)

    # --- Persistence ---

    def to_record(self) -> AccountRecord:
        """Snapshot for the persistence store."""
        return AccountRecord(
            cash=self._cash,
            realized_pnl=self._realized_pnl,
            holdings=[
                HoldingRecord(symbol=h.symbol, quantity=h.quantity, avg_cost=h.avg_cost)
                for h in self._portfolio.holdings()
            ],
        )

    def restore(self, record: AccountRecord) -> None:
        """
        Replace cash, realized P/L and holdings with the record's values.
        Holdings are replayed through Portfolio.buy, so repeated symbols merge.
        Negative cash raises ValueError, as in __init__.
        """
        if record.cash < 0:
            raise ValueError(f"cash must be non-negative, got {record.cash}")
        self._cash = record.cash
        self._realized_pnl = record.realized_pnl
        self._portfolio.clear()
        for h in record.holdings:
            self._portfolio.buy(h.symbol, h.quantity, h.avg_cost)
        logger.info(
            "Account %s: restored cash %.2f, realized P/L %.2f, %d holding(s)",
            self._name,
            self._cash,
            self._realized_pnl,
            len(self._portfolio),
        )
