"""
Session: wires Market, Account, random source and store for one run.

This is the surface an interactive shell calls into. It holds no display
logic; dashboard() returns numbers, not text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from vtrade_core.account import Account
from vtrade_core.config import SimulatorConfig
from vtrade_core.market import Market
from vtrade_core.persistence import PersistenceStore
from vtrade_core.price_model import RandomSource, make_rng
from vtrade_core.seed import build_default_market
from vtrade_core.types import TradeResult

logger = logging.getLogger(__name__)

EMPTY_CASH_EPSILON = 1e-9


@dataclass(frozen=True)
class Dashboard:
    """Account summary at current market prices."""

    cash: float
    market_value: float
    unrealized_pnl: float
    realized_pnl: float
    total_equity: float


class Session:
    """
    One simulator run. Defaults come from config; market, rng and store can
    be injected (e.g. a seeded rng and a tmp_path store in tests).
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        *,
        market: Market | None = None,
        rng: RandomSource | None = None,
        store: PersistenceStore | None = None,
        name: str = "Player",
    ) -> None:
        self.config = config or SimulatorConfig()
        self.market = market if market is not None else build_default_market()
        self.rng = rng if rng is not None else make_rng(self.config.seed)
        self.store = store if store is not None else PersistenceStore(self.config.save_file)
        self.account = Account(name)

    def start(self) -> bool:
        """
        Load saved state. If the account is still empty afterwards, credit the
        configured demo funds. Returns True when demo funds were credited.
        """
        record = self.store.load()
        if record is not None:
            self.account.restore(record)
        empty = self.account.cash <= EMPTY_CASH_EPSILON and len(self.account.portfolio) == 0
        if not empty or self.config.demo_funds <= 0:
            return False
        logger.info("Starting %s with demo funds %.2f", self.account.name, self.config.demo_funds)
        return self.account.add_funds(self.config.demo_funds).ok

    def step(self) -> None:
        """Advance the market one simulation step."""
        self.market.tick(self.rng, self.config.ticks_per_step)

    def add_funds(self, amount: float) -> TradeResult:
        return self.account.add_funds(amount)

    def buy(self, symbol: str, quantity: int) -> TradeResult:
        return self.account.buy(self.market, symbol, quantity)

    def sell(self, symbol: str, quantity: int) -> TradeResult:
        return self.account.sell(self.market, symbol, quantity)

    def save(self) -> TradeResult:
        return self.store.save(self.account.to_record())

    def dashboard(self) -> Dashboard:
        return Dashboard(
            cash=self.account.cash,
            market_value=self.account.market_value(self.market),
            unrealized_pnl=self.account.unrealized_pnl(self.market),
            realized_pnl=self.account.realized_pnl,
            total_equity=self.account.total_equity(self.market),
        )
