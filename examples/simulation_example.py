"""
Scripted simulation: seed market, trade, tick, save, reload.

Shows the calls an interactive shell would make: Session.start, step,
buy/sell, dashboard, save. Settings come from VTRADE_* environment variables.
"""

from __future__ import annotations

import logging

from vtrade_core import Session, SimulatorConfig
from vtrade_core.persistence import PersistenceStore


def print_dashboard(session: Session) -> None:
    d = session.dashboard()
    print(f"Cash balance:   {d.cash:,.2f}")
    print(f"Market value:   {d.market_value:,.2f}")
    print(f"Unrealized P/L: {d.unrealized_pnl:,.2f}")
    print(f"Realized P/L:   {d.realized_pnl:,.2f}")
    print(f"Total equity:   {d.total_equity:,.2f}")


def main() -> None:
    config = SimulatorConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    session = Session(config, name="Demo")
    if session.start():
        print(f"Starting with demo funds: {config.demo_funds:,.2f}")

    print("--- Market ---")
    print(session.market.snapshot().to_string(index=False))

    for symbol, qty in [("AAPL", 10), ("NVDA", 2), ("ZZZZ", 1)]:
        result = session.buy(symbol, qty)
        status = "ok" if result.ok else f"error: {result.message}"
        print(f"BUY {qty} {symbol}: {status}")

    for _ in range(20):
        session.step()

    result = session.sell("AAPL", 5)
    if result.ok:
        print(f"SELL 5 AAPL @ {result.price:.2f}, realized {result.realized_pnl:,.2f}")

    print("--- Portfolio ---")
    print(session.account.portfolio.to_frame(session.market).to_string(index=False))
    print("--- Dashboard ---")
    print_dashboard(session)

    saved = session.save()
    print(f"Save to {session.store.path}: {'ok' if saved.ok else saved.message}")

    reloaded = PersistenceStore(session.store.path).load()
    if reloaded is not None:
        print(f"Reloaded: cash={reloaded.cash:.2f}, holdings={len(reloaded.holdings)}")


if __name__ == "__main__":
    main()
