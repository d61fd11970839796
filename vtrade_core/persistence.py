"""
Persist account state as a small plain-text record.

Format (numbers fixed-point, 8 decimals)::

    <cash> <realized_pnl>
    <holding_count>
    <symbol>,<quantity>,<avg_cost>
    ...

Parsing is lenient: a short holding list stops at end of input, malformed
holding lines are skipped, and a readable header is kept even if the rest of
the record is damaged. Saves go through a temp file and os.replace so a failed
write never clobbers the previous record.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from vtrade_core.types import ErrorKind, TradeResult

logger = logging.getLogger(__name__)

DECIMALS = 8
DEFAULT_SAVE_FILE = "portfolio.sav"


@dataclass(frozen=True)
class HoldingRecord:
    symbol: str
    quantity: int
    avg_cost: float


@dataclass
class AccountRecord:
    """Persisted account state: one entry per non-empty holding."""

    cash: float = 0.0
    realized_pnl: float = 0.0
    holdings: list[HoldingRecord] = field(default_factory=list)


def _fmt(value: float) -> str:
    return f"{value:.{DECIMALS}f}"


def format_record(record: AccountRecord) -> str:
    """
    Serialize a record. Holdings are written sorted by symbol; a symbol
    containing a comma or quote is double-quoted so the reader splits it back.
    """
    out = io.StringIO()
    out.write(f"{_fmt(record.cash)} {_fmt(record.realized_pnl)}\n{len(record.holdings)}\n")
    writer = csv.writer(out, lineterminator="\n")
    for h in sorted(record.holdings, key=lambda h: h.symbol):
        writer.writerow([h.symbol, h.quantity, _fmt(h.avg_cost)])
    return out.getvalue()


def _parse_holding(line: str) -> HoldingRecord | None:
    """One holding line, or None if it is malformed."""
    fields = next(csv.reader([line]), [])
    if len(fields) != 3:
        return None
    symbol, qty_text, cost_text = (f.strip() for f in fields)
    try:
        quantity = int(qty_text)
        avg_cost = float(cost_text)
    except ValueError:
        return None
    if not symbol or quantity <= 0 or not (avg_cost > 0 and math.isfinite(avg_cost)):
        return None
    return HoldingRecord(symbol=symbol, quantity=quantity, avg_cost=avg_cost)


def parse_record(text: str) -> AccountRecord | None:
    """
    Parse a saved record.

    Returns None when the header (cash and realized P/L) is missing or
    unreadable. Otherwise returns the header values plus whatever holdings
    could be parsed. An unreadable count line means every remaining line is
    tried as a holding.
    """
    lines = text.splitlines()
    if not lines:
        return None
    header = lines[0].split()
    if len(header) < 2:
        return None
    try:
        cash = float(header[0])
        realized = float(header[1])
    except ValueError:
        return None
    if not (math.isfinite(cash) and math.isfinite(realized)) or cash < 0:
        return None

    record = AccountRecord(cash=cash, realized_pnl=realized)
    if len(lines) < 2:
        return record

    rest = lines[2:]
    try:
        count = int(lines[1].strip())
    except ValueError:
        logger.warning("Save record: unreadable holding count %r; parsing remaining lines", lines[1])
        count = len(rest)
    for line in rest[: max(count, 0)]:
        holding = _parse_holding(line)
        if holding is None:
            logger.warning("Save record: skipping malformed holding line %r", line)
            continue
        record.holdings.append(holding)
    return record


class PersistenceStore:
    """File-backed store for one AccountRecord."""

    def __init__(self, path: str | Path = DEFAULT_SAVE_FILE) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def _file_mode(self) -> int:
        """Keep an existing record's permissions; new files get 0o666 minus umask."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def save(self, record: AccountRecord) -> TradeResult:
        """Write the record atomically. Failures come back as a rejected result."""
        payload = format_record(record)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.warning("Save to %s failed: %s", self.path, e)
            return TradeResult.failure(
                ErrorKind.PERSISTENCE_UNAVAILABLE,
                f"Failed to save to {self.path}: {e}",
            )
        finally:
            # No-op after a successful replace.
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
        logger.info("Saved account state to %s (%d holding(s))", self.path, len(record.holdings))
        return TradeResult.success()

    def load(self) -> AccountRecord | None:
        """Saved record, or None when there is no usable prior state."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No save file at %s", self.path)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read save file %s: %s", self.path, e)
            return None
        record = parse_record(text)
        if record is None:
            logger.warning("Save file %s has an unreadable header; ignoring it", self.path)
        else:
            logger.info("Loaded account state from %s", self.path)
        return record
