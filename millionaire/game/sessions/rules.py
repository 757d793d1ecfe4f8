from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from millionaire.game.sessions.constants import FIREPROOF_LEVELS, MAX_LEVEL, PRIZES
from millionaire.game.sessions.errors import NothingToCashOutError, SessionFinishedError
from millionaire.game.sessions.types import AnswerOutcome, GameSnapshot, GameStatus

StatusRule = tuple[GameStatus, Callable[[GameSnapshot, timedelta], bool]]


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def prize_for_level(level: int) -> int:
    if level < 0:
        return 0
    return PRIZES[min(level, MAX_LEVEL)]


def fireproof_prize(answered_level: int) -> int:
    reached = [level for level in FIREPROOF_LEVELS if level <= answered_level]
    if not reached:
        return 0
    return PRIZES[reached[-1]]


def normalize_answer_key(answer_key: str | None) -> str:
    if answer_key is None:
        return ""
    return str(answer_key).strip().lower()


def is_time_out(snapshot: GameSnapshot, *, now_utc: datetime, time_limit: timedelta) -> bool:
    if snapshot.finished:
        return False
    return as_utc(now_utc) - as_utc(snapshot.created_at) > time_limit


def _failed_after_time_limit(snapshot: GameSnapshot, time_limit: timedelta) -> bool:
    if not snapshot.is_failed or snapshot.finished_at is None:
        return False
    return as_utc(snapshot.finished_at) - as_utc(snapshot.created_at) >= time_limit


def _failed(snapshot: GameSnapshot, _: timedelta) -> bool:
    return snapshot.is_failed


def _ladder_cleared(snapshot: GameSnapshot, _: timedelta) -> bool:
    return snapshot.current_level > MAX_LEVEL


# Evaluated top to bottom; timeout must win over a plain failure.
FINISHED_STATUS_RULES: tuple[StatusRule, ...] = (
    (GameStatus.TIMEOUT, _failed_after_time_limit),
    (GameStatus.FAIL, _failed),
    (GameStatus.WON, _ladder_cleared),
)


def resolve_status(snapshot: GameSnapshot, *, time_limit: timedelta) -> GameStatus:
    if not snapshot.finished:
        return GameStatus.IN_PROGRESS
    for status, matches in FINISHED_STATUS_RULES:
        if matches(snapshot, time_limit):
            return status
    return GameStatus.MONEY


def _finish_failed(snapshot: GameSnapshot, *, now_utc: datetime) -> GameSnapshot:
    return replace(
        snapshot,
        is_failed=True,
        finished_at=now_utc,
        prize=fireproof_prize(snapshot.previous_level),
    )


def apply_answer(
    snapshot: GameSnapshot,
    *,
    answer_key: str | None,
    correct_answer_key: str,
    now_utc: datetime,
    time_limit: timedelta,
) -> tuple[GameSnapshot, AnswerOutcome]:
    if snapshot.finished:
        raise SessionFinishedError

    if is_time_out(snapshot, now_utc=now_utc, time_limit=time_limit):
        return _finish_failed(snapshot, now_utc=now_utc), AnswerOutcome.TIMED_OUT

    if normalize_answer_key(answer_key) != normalize_answer_key(correct_answer_key):
        failed = _finish_failed(snapshot, now_utc=now_utc)
        if _failed_after_time_limit(failed, time_limit):
            return failed, AnswerOutcome.TIMED_OUT
        return failed, AnswerOutcome.WRONG

    next_level = snapshot.current_level + 1
    if next_level > MAX_LEVEL:
        won = replace(
            snapshot,
            current_level=next_level,
            finished_at=now_utc,
            prize=PRIZES[MAX_LEVEL],
        )
        return won, AnswerOutcome.WON
    return replace(snapshot, current_level=next_level), AnswerOutcome.CORRECT


def apply_take_money(
    snapshot: GameSnapshot,
    *,
    now_utc: datetime,
    time_limit: timedelta,
) -> GameSnapshot:
    if snapshot.finished:
        raise SessionFinishedError

    if is_time_out(snapshot, now_utc=now_utc, time_limit=time_limit):
        return _finish_failed(snapshot, now_utc=now_utc)

    if snapshot.current_level <= 0:
        raise NothingToCashOutError

    return replace(
        snapshot,
        finished_at=now_utc,
        prize=prize_for_level(snapshot.previous_level),
    )


def apply_time_out(
    snapshot: GameSnapshot,
    *,
    now_utc: datetime,
    time_limit: timedelta,
) -> tuple[GameSnapshot, bool]:
    if not is_time_out(snapshot, now_utc=now_utc, time_limit=time_limit):
        return snapshot, False
    return _finish_failed(snapshot, now_utc=now_utc), True
