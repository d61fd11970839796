"""
Simulator settings from environment variables.

VTRADE_SAVE_FILE, VTRADE_DEMO_FUNDS, VTRADE_SEED, VTRADE_TICKS_PER_STEP,
VTRADE_LOG_LEVEL. Unset variables fall back to defaults; malformed values
raise ValueError (the shell decides what to do about it).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from vtrade_core.persistence import DEFAULT_SAVE_FILE

SAVE_FILE_ENV = "VTRADE_SAVE_FILE"
DEMO_FUNDS_ENV = "VTRADE_DEMO_FUNDS"
SEED_ENV = "VTRADE_SEED"
TICKS_PER_STEP_ENV = "VTRADE_TICKS_PER_STEP"
LOG_LEVEL_ENV = "VTRADE_LOG_LEVEL"

DEFAULT_DEMO_FUNDS = 10_000.0


@dataclass(frozen=True)
class SimulatorConfig:
    save_file: str = DEFAULT_SAVE_FILE
    demo_funds: float = DEFAULT_DEMO_FUNDS
    seed: int | None = None
    ticks_per_step: int = 1
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.demo_funds < 0:
            raise ValueError(f"demo_funds must be non-negative, got {self.demo_funds}")
        if self.ticks_per_step < 0:
            raise ValueError(f"ticks_per_step must be non-negative, got {self.ticks_per_step}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SimulatorConfig:
        env = os.environ if environ is None else environ
        seed_text = env.get(SEED_ENV, "").strip()
        return cls(
            save_file=env.get(SAVE_FILE_ENV, DEFAULT_SAVE_FILE),
            demo_funds=float(env.get(DEMO_FUNDS_ENV, DEFAULT_DEMO_FUNDS)),
            seed=int(seed_text) if seed_text else None,
            ticks_per_step=int(env.get(TICKS_PER_STEP_ENV, 1)),
            log_level=env.get(LOG_LEVEL_ENV, "INFO").upper(),
        )
