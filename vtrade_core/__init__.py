"""
vtrade-core: single-user virtual trading simulator core.

Price walk, position accounting with average cost, cash ledger and a
plain-text save record. No menu, prompts or display formatting.
"""

__version__ = "0.1.0"

from vtrade_core.types import ErrorKind, ResultKind, Side, TradeResult
from vtrade_core.price_model import make_rng, next_price
from vtrade_core.security import Security, SecurityKind, Stock
from vtrade_core.market import Market
from vtrade_core.portfolio import Holding, Portfolio
from vtrade_core.persistence import AccountRecord, HoldingRecord, PersistenceStore
from vtrade_core.account import Account
from vtrade_core.config import SimulatorConfig
from vtrade_core.session import Dashboard, Session

__all__ = [
    "Account",
    "AccountRecord",
    "Dashboard",
    "ErrorKind",
    "Holding",
    "HoldingRecord",
    "Market",
    "PersistenceStore",
    "Portfolio",
    "ResultKind",
    "Security",
    "SecurityKind",
    "Session",
    "Side",
    "SimulatorConfig",
    "Stock",
    "TradeResult",
    "make_rng",
    "next_price",
]
