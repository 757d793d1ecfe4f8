from __future__ import annotations

import random
from types import SimpleNamespace

import pytest

from millionaire.game.questions.selection import (
    ANSWER_KEYS,
    answer_variants,
    correct_answer_key,
    select_ladder_questions,
    shuffle_answer_keys,
)
from millionaire.game.sessions.constants import QUESTION_LEVELS
from millionaire.game.sessions.errors import InsufficientQuestionsError


def _pool(per_level: int = 4, *, skip_levels: tuple[int, ...] = ()) -> dict[int, list[str]]:
    return {
        level: [f"q{level}-{index}" for index in range(per_level)]
        for level in QUESTION_LEVELS
        if level not in skip_levels
    }


def test_select_ladder_questions_picks_one_per_level_in_order() -> None:
    selected = select_ladder_questions(_pool(), rng=random.Random(1))

    assert len(selected) == 15
    for level, question in zip(QUESTION_LEVELS, selected):
        assert question.startswith(f"q{level}-")


def test_select_ladder_questions_reports_missing_levels() -> None:
    pool = _pool(skip_levels=(3, 7))
    pool[11] = []

    with pytest.raises(InsufficientQuestionsError) as exc_info:
        select_ladder_questions(pool, rng=random.Random(1))

    assert exc_info.value.missing_levels == (3, 7, 11)


def test_select_ladder_questions_is_seed_deterministic() -> None:
    first = select_ladder_questions(_pool(), rng=random.Random(42))
    second = select_ladder_questions(_pool(), rng=random.Random(42))
    assert first == second


def test_select_ladder_questions_varies_across_seeds() -> None:
    first_rungs = {select_ladder_questions(_pool(), rng=random.Random(seed))[0] for seed in range(50)}
    assert len(first_rungs) > 1


def test_select_ladder_questions_does_not_mutate_pool() -> None:
    pool = _pool()
    snapshot = {level: list(questions) for level, questions in pool.items()}

    select_ladder_questions(pool, rng=random.Random(3))

    assert pool == snapshot


def test_shuffle_answer_keys_is_a_permutation() -> None:
    key_map = shuffle_answer_keys(random.Random(5))

    assert tuple(key_map) == ANSWER_KEYS
    assert sorted(key_map.values()) == [1, 2, 3, 4]


def test_correct_answer_key_points_at_first_answer() -> None:
    assert correct_answer_key({"a": 3, "b": 4, "c": 1, "d": 2}) == "c"


def test_correct_answer_key_rejects_broken_map() -> None:
    with pytest.raises(ValueError):
        correct_answer_key({"a": 2, "b": 2, "c": 3, "d": 4})


def test_answer_variants_follow_key_map() -> None:
    question = SimpleNamespace(answer1="Paris", answer2="Rome", answer3="Madrid", answer4="Berlin")

    variants = answer_variants(question, {"a": 4, "b": 1, "c": 2, "d": 3})

    assert variants == {"a": "Berlin", "b": "Paris", "c": "Rome", "d": "Madrid"}
