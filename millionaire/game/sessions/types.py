from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    FAIL = "fail"
    TIMEOUT = "timeout"
    MONEY = "money"


class AnswerOutcome(str, Enum):
    CORRECT = "CORRECT"
    WON = "WON"
    WRONG = "WRONG"
    TIMED_OUT = "TIMED_OUT"


@dataclass(slots=True)
class GameSnapshot:
    current_level: int
    is_failed: bool
    prize: int
    created_at: datetime
    finished_at: datetime | None = None

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    @property
    def previous_level(self) -> int:
        return self.current_level - 1


@dataclass(slots=True)
class GameQuestionView:
    game_id: int
    level: int
    text: str
    variants: dict[str, str]
    correct_answer_key: str


@dataclass(slots=True)
class GameSummary:
    game_id: int
    user_id: int
    current_level: int
    status: GameStatus
    prize: int
    created_at: datetime
    finished_at: datetime | None = None


@dataclass(slots=True)
class AnswerResult:
    game_id: int
    accepted: bool
    outcome: AnswerOutcome
    correct_answer_key: str
    current_level: int
    status: GameStatus
    prize: int


@dataclass(slots=True)
class TakeMoneyResult:
    game_id: int
    prize: int
    balance: int
    status: GameStatus
