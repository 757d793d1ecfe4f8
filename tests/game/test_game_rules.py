from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from millionaire.game.sessions.constants import FIREPROOF_LEVELS, MAX_LEVEL, PRIZES, QUESTION_LEVELS
from millionaire.game.sessions.errors import NothingToCashOutError, SessionFinishedError
from millionaire.game.sessions.rules import (
    apply_answer,
    apply_take_money,
    apply_time_out,
    as_utc,
    fireproof_prize,
    is_time_out,
    resolve_status,
)
from millionaire.game.sessions.types import AnswerOutcome, GameSnapshot, GameStatus

UTC = timezone.utc
NOW_UTC = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
TIME_LIMIT = timedelta(minutes=35)


def snapshot(
    *,
    current_level: int = 0,
    is_failed: bool = False,
    prize: int = 0,
    created_at: datetime | None = None,
    finished_at: datetime | None = None,
) -> GameSnapshot:
    return GameSnapshot(
        current_level=current_level,
        is_failed=is_failed,
        prize=prize,
        created_at=created_at or NOW_UTC - timedelta(minutes=5),
        finished_at=finished_at,
    )


def test_prize_table_covers_every_level_and_grows() -> None:
    assert len(PRIZES) == len(QUESTION_LEVELS) == 15
    assert all(lower < higher for lower, higher in zip(PRIZES, PRIZES[1:]))
    assert PRIZES[MAX_LEVEL] == 1_000_000
    assert set(FIREPROOF_LEVELS) <= set(QUESTION_LEVELS)


@pytest.mark.parametrize(
    ("answered_level", "expected"),
    [
        (-1, 0),
        (0, 0),
        (1, 0),
        (3, 0),
        (4, 1_000),
        (5, 1_000),
        (9, 32_000),
        (13, 32_000),
        (14, 1_000_000),
    ],
)
def test_fireproof_prize_uses_highest_reached_checkpoint(answered_level: int, expected: int) -> None:
    assert fireproof_prize(answered_level) == expected


def test_status_in_progress_until_finished() -> None:
    assert resolve_status(snapshot(current_level=7), time_limit=TIME_LIMIT) == GameStatus.IN_PROGRESS


def test_status_won_when_ladder_cleared() -> None:
    state = snapshot(current_level=MAX_LEVEL + 1, finished_at=NOW_UTC)
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.WON


def test_status_fail_when_failed_inside_time_limit() -> None:
    state = snapshot(current_level=3, is_failed=True, finished_at=NOW_UTC)
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.FAIL


def test_status_timeout_when_failed_after_time_limit() -> None:
    state = snapshot(
        is_failed=True,
        created_at=NOW_UTC - timedelta(hours=1),
        finished_at=NOW_UTC,
    )
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT


def test_status_timeout_takes_precedence_exactly_at_limit() -> None:
    state = snapshot(
        is_failed=True,
        created_at=NOW_UTC - TIME_LIMIT,
        finished_at=NOW_UTC,
    )
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT


def test_status_money_when_finished_without_failure() -> None:
    state = snapshot(current_level=3, finished_at=NOW_UTC)
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.MONEY


def test_status_accepts_naive_timestamps_as_utc() -> None:
    state = snapshot(
        is_failed=True,
        created_at=(NOW_UTC - timedelta(hours=2)).replace(tzinfo=None),
        finished_at=NOW_UTC.replace(tzinfo=None),
    )
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT
    assert as_utc(NOW_UTC.replace(tzinfo=None)) == NOW_UTC


def test_correct_answer_advances_one_level() -> None:
    state, outcome = apply_answer(
        snapshot(current_level=2),
        answer_key="c",
        correct_answer_key="c",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert outcome == AnswerOutcome.CORRECT
    assert state.current_level == 3
    assert state.is_failed is False
    assert state.finished_at is None
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.IN_PROGRESS


def test_answer_key_comparison_ignores_case_and_whitespace() -> None:
    state, outcome = apply_answer(
        snapshot(),
        answer_key=" B ",
        correct_answer_key="b",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )
    assert outcome == AnswerOutcome.CORRECT
    assert state.current_level == 1


@pytest.mark.parametrize("answer_key", ["a", "x", "", None])
def test_wrong_answer_fails_without_advancing(answer_key: str | None) -> None:
    state, outcome = apply_answer(
        snapshot(current_level=2),
        answer_key=answer_key,
        correct_answer_key="d",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert outcome == AnswerOutcome.WRONG
    assert state.current_level == 2
    assert state.is_failed is True
    assert state.finished_at == NOW_UTC
    assert state.prize == 0
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.FAIL


def test_wrong_answer_keeps_fireproof_prize() -> None:
    state, _ = apply_answer(
        snapshot(current_level=10),
        answer_key="a",
        correct_answer_key="b",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )
    assert state.prize == 32_000


def test_late_correct_answer_counts_as_timeout() -> None:
    state, outcome = apply_answer(
        snapshot(current_level=5, created_at=NOW_UTC - timedelta(hours=2)),
        answer_key="a",
        correct_answer_key="a",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert outcome == AnswerOutcome.TIMED_OUT
    assert state.current_level == 5
    assert state.is_failed is True
    assert state.prize == 1_000
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT


def test_wrong_answer_exactly_at_limit_reports_timeout() -> None:
    state, outcome = apply_answer(
        snapshot(current_level=5, created_at=NOW_UTC - TIME_LIMIT),
        answer_key="b",
        correct_answer_key="a",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert outcome == AnswerOutcome.TIMED_OUT
    assert state.is_failed is True
    assert state.prize == 1_000
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT


def test_correct_answer_exactly_at_limit_is_accepted() -> None:
    state, outcome = apply_answer(
        snapshot(current_level=5, created_at=NOW_UTC - TIME_LIMIT),
        answer_key="a",
        correct_answer_key="a",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert outcome == AnswerOutcome.CORRECT
    assert state.current_level == 6
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.IN_PROGRESS


def test_last_correct_answer_wins_top_prize() -> None:
    state, outcome = apply_answer(
        snapshot(current_level=MAX_LEVEL),
        answer_key="a",
        correct_answer_key="a",
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert outcome == AnswerOutcome.WON
    assert state.current_level == MAX_LEVEL + 1
    assert state.finished_at == NOW_UTC
    assert state.prize == 1_000_000
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.WON


def test_answer_on_finished_game_is_rejected() -> None:
    with pytest.raises(SessionFinishedError):
        apply_answer(
            snapshot(current_level=3, finished_at=NOW_UTC),
            answer_key="a",
            correct_answer_key="a",
            now_utc=NOW_UTC,
            time_limit=TIME_LIMIT,
        )


def test_take_money_requires_banked_level() -> None:
    with pytest.raises(NothingToCashOutError):
        apply_take_money(snapshot(), now_utc=NOW_UTC, time_limit=TIME_LIMIT)


def test_take_money_pays_last_answered_level() -> None:
    state = apply_take_money(snapshot(current_level=1), now_utc=NOW_UTC, time_limit=TIME_LIMIT)

    assert state.prize == PRIZES[0]
    assert state.finished_at == NOW_UTC
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.MONEY


def test_take_money_after_time_limit_finishes_as_timeout() -> None:
    state = apply_take_money(
        snapshot(current_level=7, created_at=NOW_UTC - timedelta(hours=1)),
        now_utc=NOW_UTC,
        time_limit=TIME_LIMIT,
    )

    assert state.is_failed is True
    assert state.prize == 1_000
    assert resolve_status(state, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT


def test_take_money_on_finished_game_is_rejected() -> None:
    with pytest.raises(SessionFinishedError):
        apply_take_money(
            snapshot(current_level=3, finished_at=NOW_UTC),
            now_utc=NOW_UTC,
            time_limit=TIME_LIMIT,
        )


def test_time_out_is_noop_inside_limit() -> None:
    state = snapshot(current_level=2)
    updated, timed_out = apply_time_out(state, now_utc=NOW_UTC, time_limit=TIME_LIMIT)

    assert timed_out is False
    assert updated is state
    assert is_time_out(state, now_utc=NOW_UTC, time_limit=TIME_LIMIT) is False


def test_time_out_finishes_overdue_game() -> None:
    state = snapshot(current_level=2, created_at=NOW_UTC - timedelta(minutes=36))
    updated, timed_out = apply_time_out(state, now_utc=NOW_UTC, time_limit=TIME_LIMIT)

    assert timed_out is True
    assert updated.is_failed is True
    assert updated.finished_at == NOW_UTC
    assert resolve_status(updated, time_limit=TIME_LIMIT) == GameStatus.TIMEOUT


def test_previous_level_trails_current_level() -> None:
    assert snapshot(current_level=0).previous_level == -1
    assert snapshot(current_level=6).previous_level == 5
