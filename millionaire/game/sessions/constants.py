from __future__ import annotations

from datetime import timedelta

from millionaire.core.config import get_settings

QUESTION_LEVELS: tuple[int, ...] = tuple(range(15))
MAX_LEVEL = QUESTION_LEVELS[-1]
LADDER_LENGTH = len(QUESTION_LEVELS)
PRIZES: tuple[int, ...] = (
    100,
    200,
    300,
    500,
    1_000,
    2_000,
    4_000,
    8_000,
    16_000,
    32_000,
    64_000,
    125_000,
    250_000,
    500_000,
    1_000_000,
)
FIREPROOF_LEVELS: tuple[int, ...] = (4, 9, 14)
GAME_TIME_LIMIT = timedelta(seconds=max(60, int(get_settings().game_time_limit_seconds)))
PRIZE_LEDGER_ENTRY_TYPE = "GAME_PRIZE"
