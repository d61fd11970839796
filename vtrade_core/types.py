"""
Outcome types for account operations: side, error kind, trade result.

Business failures are returned as values, never raised. A caller (e.g. an
interactive shell) inspects TradeResult.status and decides what to show.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Side(Enum):
    BUY = "buy"
    SELL = "sell"
    DEPOSIT = "deposit"


class ErrorKind(Enum):
    """Why an operation was rejected. All are local and recoverable."""

    INVALID_AMOUNT = "invalid_amount"
    INVALID_QUANTITY = "invalid_quantity"
    UNKNOWN_SYMBOL = "unknown_symbol"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_POSITION = "insufficient_position"
    PERSISTENCE_UNAVAILABLE = "persistence_unavailable"


class ResultKind(Enum):
    OK = "ok"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TradeResult:
    """
    Result of an account or store operation. Immutable.

    On OK: price/quantity/cash_delta describe what happened; realized_pnl is
    set for sells. On REJECTED: error and message say why; state is unchanged.
    """

    status: ResultKind
    side: Side | None = None
    symbol: str | None = None
    quantity: int = 0
    price: float | None = None
    cash_delta: float = 0.0
    realized_pnl: float = 0.0
    error: ErrorKind | None = None
    message: str | None = None
    timestamp: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.status == ResultKind.OK

    @classmethod
    def success(cls, **fields) -> TradeResult:
        fields.setdefault("timestamp", datetime.now())
        return cls(status=ResultKind.OK, **fields)

    @classmethod
    def failure(cls, error: ErrorKind, message: str, **fields) -> TradeResult:
        fields.setdefault("timestamp", datetime.now())
        return cls(status=ResultKind.REJECTED, error=error, message=message, **fields)


def valid_quantity(quantity: object) -> bool:
    """Share counts are positive integers; bools and floats are rejected."""
    return isinstance(quantity, numbers.Integral) and not isinstance(quantity, bool) and quantity > 0
