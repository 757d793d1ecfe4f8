from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from typing import Protocol, TypeVar

from millionaire.game.sessions.constants import QUESTION_LEVELS
from millionaire.game.sessions.errors import InsufficientQuestionsError

ANSWER_KEYS: tuple[str, ...] = ("a", "b", "c", "d")

T = TypeVar("T")


class _HasAnswers(Protocol):
    answer1: str
    answer2: str
    answer3: str
    answer4: str


def select_ladder_questions(
    candidates_by_level: Mapping[int, Sequence[T]],
    *,
    rng: random.Random,
    levels: Sequence[int] = QUESTION_LEVELS,
) -> list[T]:
    missing_levels = [level for level in levels if not candidates_by_level.get(level)]
    if missing_levels:
        raise InsufficientQuestionsError(missing_levels)
    return [rng.choice(list(candidates_by_level[level])) for level in levels]


def shuffle_answer_keys(rng: random.Random) -> dict[str, int]:
    answer_indexes = list(range(1, len(ANSWER_KEYS) + 1))
    rng.shuffle(answer_indexes)
    return dict(zip(ANSWER_KEYS, answer_indexes))


def correct_answer_key(key_map: Mapping[str, int]) -> str:
    for key in ANSWER_KEYS:
        if key_map.get(key) == 1:
            return key
    raise ValueError("answer key map has no slot for the correct answer")


def answer_variants(question: _HasAnswers, key_map: Mapping[str, int]) -> dict[str, str]:
    return {key: getattr(question, f"answer{key_map[key]}") for key in ANSWER_KEYS}
