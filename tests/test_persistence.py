"""
Tests for persistence: record format, lenient parsing, PersistenceStore.
"""

import os
import stat

import pytest

from vtrade_core import Account, ErrorKind, Market, PersistenceStore, Stock
from vtrade_core.persistence import AccountRecord, HoldingRecord, format_record, parse_record


def _record() -> AccountRecord:
    return AccountRecord(
        cash=8150.0,
        realized_pnl=-12.34567891,
        holdings=[
            HoldingRecord("TSLA", 3, 241.12345678),
            HoldingRecord("AAPL", 10, 185.0),
        ],
    )


# --- format ---


def test_format_record():
    text = format_record(_record())
    assert text == (
        "8150.00000000 -12.34567891\n"
        "2\n"
        "AAPL,10,185.00000000\n"
        "TSLA,3,241.12345678\n"
    )


def test_format_empty_record():
    assert format_record(AccountRecord()) == "0.00000000 0.00000000\n0\n"


# --- parse ---


def test_parse_round_trip():
    rec = parse_record(format_record(_record()))
    assert rec.cash == 8150.0
    assert rec.realized_pnl == -12.34567891
    assert rec.holdings == [HoldingRecord("AAPL", 10, 185.0), HoldingRecord("TSLA", 3, 241.12345678)]


def test_parse_tolerates_whitespace():
    rec = parse_record("  100.5   2.25 \n 1 \n  AAPL ,  4 , 12.5  \n")
    assert rec.cash == 100.5
    assert rec.realized_pnl == 2.25
    assert rec.holdings == [HoldingRecord("AAPL", 4, 12.5)]


def test_parse_short_count_truncates():
    rec = parse_record("10 0\n5\nAAPL,1,2.0\nTSLA,2,3.0\n")
    assert [h.symbol for h in rec.holdings] == ["AAPL", "TSLA"]


def test_parse_count_limits_lines_read():
    rec = parse_record("10 0\n1\nAAPL,1,2.0\nTSLA,2,3.0\n")
    assert [h.symbol for h in rec.holdings] == ["AAPL"]


def test_parse_skips_malformed_holding_lines():
    text = "10 0\n5\nAAPL,1\nTSLA,x,3.0\nNVDA,2,950.0,extra\nGOOG,-1,5.0\nINFY,7,20.5\n"
    rec = parse_record(text)
    assert rec.holdings == [HoldingRecord("INFY", 7, 20.5)]


def test_parse_quoted_field_with_comma():
    rec = parse_record('1 0\n1\n"AB,C",2,3.5\n')
    assert rec.holdings == [HoldingRecord("AB,C", 2, 3.5)]


def test_parse_keeps_header_when_count_missing():
    rec = parse_record("250.0 10.0\n")
    assert rec.cash == 250.0
    assert rec.realized_pnl == 10.0
    assert rec.holdings == []


def test_parse_bad_count_reads_remaining_lines():
    rec = parse_record("250.0 10.0\nabc\nAAPL,1,2.0\n")
    assert rec.cash == 250.0
    assert rec.holdings == [HoldingRecord("AAPL", 1, 2.0)]


@pytest.mark.parametrize("text", ["", "garbage\n", "100\n0\n", "abc def\n1\nAAPL,1,1\n", "nan 0\n0\n"])
def test_parse_bad_header_returns_none(text):
    assert parse_record(text) is None


# --- PersistenceStore ---


def test_store_save_then_load_round_trip(tmp_path):
    store = PersistenceStore(tmp_path / "portfolio.sav")
    assert not store.exists()
    result = store.save(_record())
    assert result.ok
    assert store.exists()
    loaded = store.load()
    assert loaded.cash == 8150.0
    assert loaded.realized_pnl == -12.34567891
    assert sorted(loaded.holdings, key=lambda h: h.symbol) == sorted(_record().holdings, key=lambda h: h.symbol)


def test_account_round_trip_through_store(tmp_path):
    market = Market([Stock("AAPL", "Apple Inc.", 185.0, 0.01), Stock("TSLA", "Tesla Inc.", 240.0, 0.02)])
    acct = Account("Player", cash=10_000.0)
    acct.buy(market, "AAPL", 10)
    acct.buy(market, "TSLA", 3)
    market.get("AAPL").price = 200.0
    acct.sell(market, "AAPL", 5)

    store = PersistenceStore(tmp_path / "portfolio.sav")
    assert store.save(acct.to_record()).ok
    restored = Account("Player")
    restored.restore(store.load())

    assert restored.cash == pytest.approx(acct.cash, abs=1e-8)
    assert restored.realized_pnl == pytest.approx(75.0, abs=1e-8)
    assert restored.portfolio.quantity("AAPL") == 5
    assert restored.portfolio.holding("AAPL").avg_cost == pytest.approx(185.0, abs=1e-8)
    assert restored.portfolio.quantity("TSLA") == 3


def test_store_load_missing_file(tmp_path):
    assert PersistenceStore(tmp_path / "nope.sav").load() is None


def test_store_load_unreadable_file(tmp_path):
    path = tmp_path / "portfolio.sav"
    path.write_bytes(b"\xff\xfe\x00garbage")
    assert PersistenceStore(path).load() is None


def test_store_load_garbage_header(tmp_path):
    path = tmp_path / "portfolio.sav"
    path.write_text("not a record\n")
    assert PersistenceStore(path).load() is None


def test_store_save_to_missing_directory_fails(tmp_path):
    store = PersistenceStore(tmp_path / "missing" / "portfolio.sav")
    result = store.save(_record())
    assert not result.ok
    assert result.error == ErrorKind.PERSISTENCE_UNAVAILABLE
    assert result.message


def test_store_failed_replace_keeps_previous_file(tmp_path, monkeypatch):
    path = tmp_path / "portfolio.sav"
    store = PersistenceStore(path)
    store.save(AccountRecord(cash=1.0))
    previous = path.read_text()

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("vtrade_core.persistence.os.replace", boom)
    result = store.save(_record())
    assert result.error == ErrorKind.PERSISTENCE_UNAVAILABLE
    assert path.read_text() == previous
    assert [p.name for p in tmp_path.iterdir()] == ["portfolio.sav"]


# --- quoting, negative cash, file handling ---


def test_symbol_with_comma_round_trips():
    market = Market([Stock("BRK,B", "Berkshire Hathaway B", 100.0, 0.01)])
    acct = Account("Player", cash=1000.0)
    assert acct.buy(market, "BRK,B", 2).ok
    text = format_record(acct.to_record())
    assert '"BRK,B",2,100.00000000' in text
    rec = parse_record(text)
    assert rec.cash == 800.0
    assert rec.holdings == [HoldingRecord("BRK,B", 2, 100.0)]


def test_symbol_with_quote_round_trips():
    rec = AccountRecord(cash=1.0, holdings=[HoldingRecord('A"B', 1, 2.0)])
    assert parse_record(format_record(rec)).holdings == rec.holdings


def test_parse_negative_cash_header_returns_none():
    assert parse_record("-5.0 0.0\n0\n") is None


def test_store_save_uses_umask_mode_for_new_file(tmp_path):
    umask = os.umask(0)
    os.umask(umask)
    path = tmp_path / "portfolio.sav"
    assert PersistenceStore(path).save(_record()).ok
    assert stat.S_IMODE(path.stat().st_mode) == 0o666 & ~umask


def test_store_save_keeps_existing_mode(tmp_path):
    path = tmp_path / "portfolio.sav"
    path.write_text("0 0\n0\n")
    os.chmod(path, 0o640)
    assert PersistenceStore(path).save(_record()).ok
    assert stat.S_IMODE(path.stat().st_mode) == 0o640


def test_store_removes_temp_file_on_unexpected_error(tmp_path, monkeypatch):
    def boom(fd):
        raise RuntimeError("interrupted")

    monkeypatch.setattr("vtrade_core.persistence.os.fsync", boom)
    with pytest.raises(RuntimeError):
        PersistenceStore(tmp_path / "portfolio.sav").save(_record())
    assert list(tmp_path.iterdir()) == []
