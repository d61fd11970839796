"""Default demo securities."""

from __future__ import annotations

from vtrade_core.market import Market
from vtrade_core.security import Stock

# (symbol, name, starting price, per-tick volatility)
DEFAULT_SECURITIES: list[tuple[str, str, float, float]] = [
    ("AAPL", "Apple Inc.", 185.00, 0.010),
    ("GOOG", "Alphabet Inc.", 2850.00, 0.012),
    ("TSLA", "Tesla Inc.", 240.00, 0.020),
    ("INFY", "Infosys Ltd.", 20.50, 0.015),
    ("RELI", "Reliance Ind.", 28.00, 0.013),
    ("NVDA", "NVIDIA Corp.", 950.00, 0.018),
    ("TCS", "Tata Consultancy", 40.00, 0.010),
    ("HDFB", "HDFC Bank", 18.50, 0.011),
]


def build_default_market() -> Market:
    """Fresh Market with the demo securities at their starting prices."""
    return Market([Stock(sym, name, price, vol) for sym, name, price, vol in DEFAULT_SECURITIES])
