from __future__ import annotations

import random
from datetime import datetime, timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from millionaire.db.models.game_questions import GameQuestion
from millionaire.db.models.games import Game
from millionaire.db.models.ledger_entries import LedgerEntry
from millionaire.db.repo.game_questions_repo import GameQuestionsRepo
from millionaire.db.repo.games_repo import GamesRepo
from millionaire.db.repo.ledger_repo import LedgerRepo
from millionaire.db.repo.questions_repo import QuestionsRepo
from millionaire.db.repo.users_repo import UsersRepo
from millionaire.game.questions.selection import (
    ANSWER_KEYS,
    answer_variants,
    correct_answer_key,
    select_ladder_questions,
    shuffle_answer_keys,
)
from millionaire.game.sessions.constants import (
    GAME_TIME_LIMIT,
    MAX_LEVEL,
    PRIZE_LEDGER_ENTRY_TYPE,
    QUESTION_LEVELS,
)
from millionaire.game.sessions.errors import (
    GameNotFoundError,
    SessionFinishedError,
    UserNotFoundError,
)
from millionaire.game.sessions.rules import (
    apply_answer,
    apply_take_money,
    apply_time_out,
    as_utc,
    resolve_status,
)
from millionaire.game.sessions.types import (
    AnswerOutcome,
    AnswerResult,
    GameQuestionView,
    GameSnapshot,
    GameStatus,
    GameSummary,
    TakeMoneyResult,
)

logger = structlog.get_logger(__name__)


def _prize_idempotency_key(game_id: int) -> str:
    return f"game_prize:{game_id}"


class GameService:
    @staticmethod
    def _snapshot_from_model(game: Game) -> GameSnapshot:
        return GameSnapshot(
            current_level=game.current_level,
            is_failed=game.is_failed,
            prize=game.prize,
            created_at=as_utc(game.created_at),
            finished_at=as_utc(game.finished_at) if game.finished_at is not None else None,
        )

    @staticmethod
    def _apply_snapshot_to_model(game: Game, snapshot: GameSnapshot, now_utc: datetime) -> None:
        game.current_level = snapshot.current_level
        game.is_failed = snapshot.is_failed
        game.prize = snapshot.prize
        game.finished_at = snapshot.finished_at
        game.updated_at = now_utc

    @staticmethod
    def _build_summary(game: Game, *, time_limit: timedelta) -> GameSummary:
        snapshot = GameService._snapshot_from_model(game)
        return GameSummary(
            game_id=game.id,
            user_id=game.user_id,
            current_level=snapshot.current_level,
            status=resolve_status(snapshot, time_limit=time_limit),
            prize=snapshot.prize,
            created_at=snapshot.created_at,
            finished_at=snapshot.finished_at,
        )

    @staticmethod
    async def _get_game(session: AsyncSession, game_id: int, *, for_update: bool = False) -> Game:
        if for_update:
            game = await GamesRepo.get_by_id_for_update(session, game_id)
        else:
            game = await GamesRepo.get_by_id(session, game_id)
        if game is None:
            raise GameNotFoundError
        return game

    @staticmethod
    async def _build_question_view(
        session: AsyncSession,
        *,
        game_question: GameQuestion,
    ) -> GameQuestionView:
        question = await QuestionsRepo.get_by_id(session, game_question.question_id)
        if question is None:
            raise GameNotFoundError
        key_map = {key: getattr(game_question, key) for key in ANSWER_KEYS}
        return GameQuestionView(
            game_id=game_question.game_id,
            level=game_question.level,
            text=question.text,
            variants=answer_variants(question, key_map),
            correct_answer_key=correct_answer_key(key_map),
        )

    @staticmethod
    async def _settle_prize(session: AsyncSession, *, game: Game, now_utc: datetime) -> None:
        if game.prize <= 0:
            return

        idempotency_key = _prize_idempotency_key(game.id)
        existing_entry = await LedgerRepo.get_by_idempotency_key(session, idempotency_key)
        if existing_entry is not None:
            logger.warning("game_prize_already_credited", game_id=game.id, user_id=game.user_id)
            return

        user = await UsersRepo.get_by_id_for_update(session, game.user_id)
        if user is None:
            raise UserNotFoundError
        user.balance += game.prize
        await LedgerRepo.create(
            session,
            entry=LedgerEntry(
                user_id=user.id,
                game_id=game.id,
                entry_type=PRIZE_LEDGER_ENTRY_TYPE,
                direction="CREDIT",
                amount=game.prize,
                balance_after=user.balance,
                idempotency_key=idempotency_key,
                created_at=now_utc,
            ),
        )
        logger.info(
            "game_prize_credited",
            game_id=game.id,
            user_id=user.id,
            amount=game.prize,
            balance_after=user.balance,
        )

    @staticmethod
    async def _finalize(
        session: AsyncSession,
        *,
        game: Game,
        snapshot: GameSnapshot,
        now_utc: datetime,
        time_limit: timedelta,
    ) -> GameStatus:
        GameService._apply_snapshot_to_model(game, snapshot, now_utc)
        status = resolve_status(snapshot, time_limit=time_limit)
        if snapshot.finished:
            await GameService._settle_prize(session, game=game, now_utc=now_utc)
            logger.info(
                "game_finished",
                game_id=game.id,
                user_id=game.user_id,
                status=status.value,
                level=snapshot.current_level,
                prize=snapshot.prize,
            )
        await session.flush()
        return status

    @staticmethod
    async def create_game_for_user(
        session: AsyncSession,
        *,
        user_id: int,
        now_utc: datetime,
        rng: random.Random | None = None,
    ) -> GameSummary:
        user = await UsersRepo.get_by_id(session, user_id)
        if user is None:
            raise UserNotFoundError

        picker = rng if rng is not None else random.Random()
        ids_by_level = await QuestionsRepo.list_ids_by_level(session, levels=QUESTION_LEVELS)
        selected_ids = select_ladder_questions(ids_by_level, rng=picker)

        game = await GamesRepo.create(
            session,
            game=Game(
                user_id=user.id,
                current_level=0,
                is_failed=False,
                prize=0,
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        await GameQuestionsRepo.create_many(
            session,
            game_questions=[
                GameQuestion(
                    game_id=game.id,
                    question_id=question_id,
                    level=level,
                    **shuffle_answer_keys(picker),
                )
                for level, question_id in zip(QUESTION_LEVELS, selected_ids)
            ],
        )
        logger.info("game_created", game_id=game.id, user_id=user.id)
        return GameService._build_summary(game, time_limit=GAME_TIME_LIMIT)

    @staticmethod
    async def get_game(
        session: AsyncSession,
        *,
        game_id: int,
        time_limit: timedelta | None = None,
    ) -> GameSummary:
        game = await GameService._get_game(session, game_id)
        effective_limit = GAME_TIME_LIMIT if time_limit is None else time_limit
        return GameService._build_summary(game, time_limit=effective_limit)

    @staticmethod
    async def get_status(
        session: AsyncSession,
        *,
        game_id: int,
        time_limit: timedelta | None = None,
    ) -> GameStatus:
        game = await GameService._get_game(session, game_id)
        return resolve_status(
            GameService._snapshot_from_model(game),
            time_limit=GAME_TIME_LIMIT if time_limit is None else time_limit,
        )

    @staticmethod
    async def get_ladder(session: AsyncSession, *, game_id: int) -> list[GameQuestionView]:
        await GameService._get_game(session, game_id)
        game_questions = await GameQuestionsRepo.list_for_game(session, game_id=game_id)
        return [
            await GameService._build_question_view(session, game_question=game_question)
            for game_question in game_questions
        ]

    @staticmethod
    async def get_current_question(session: AsyncSession, *, game_id: int) -> GameQuestionView:
        game = await GameService._get_game(session, game_id)
        if game.finished_at is not None or game.current_level > MAX_LEVEL:
            raise SessionFinishedError
        game_question = await GameQuestionsRepo.get_for_game_level(
            session,
            game_id=game.id,
            level=game.current_level,
        )
        if game_question is None:
            raise GameNotFoundError
        return await GameService._build_question_view(session, game_question=game_question)

    @staticmethod
    async def get_previous_question(
        session: AsyncSession,
        *,
        game_id: int,
    ) -> GameQuestionView | None:
        game = await GameService._get_game(session, game_id)
        previous_level = game.current_level - 1
        if previous_level < 0:
            return None
        game_question = await GameQuestionsRepo.get_for_game_level(
            session,
            game_id=game.id,
            level=previous_level,
        )
        if game_question is None:
            return None
        return await GameService._build_question_view(session, game_question=game_question)

    @staticmethod
    async def answer_current_question(
        session: AsyncSession,
        *,
        game_id: int,
        answer_key: str | None,
        now_utc: datetime,
        time_limit: timedelta | None = None,
    ) -> AnswerResult:
        effective_limit = GAME_TIME_LIMIT if time_limit is None else time_limit
        game = await GameService._get_game(session, game_id, for_update=True)
        snapshot = GameService._snapshot_from_model(game)
        if snapshot.finished or snapshot.current_level > MAX_LEVEL:
            raise SessionFinishedError

        game_question = await GameQuestionsRepo.get_for_game_level(
            session,
            game_id=game.id,
            level=snapshot.current_level,
        )
        if game_question is None:
            raise GameNotFoundError
        correct_key = correct_answer_key({key: getattr(game_question, key) for key in ANSWER_KEYS})

        updated, outcome = apply_answer(
            snapshot,
            answer_key=answer_key,
            correct_answer_key=correct_key,
            now_utc=now_utc,
            time_limit=effective_limit,
        )
        status = await GameService._finalize(
            session,
            game=game,
            snapshot=updated,
            now_utc=now_utc,
            time_limit=effective_limit,
        )
        logger.info(
            "game_answer_submitted",
            game_id=game.id,
            level=snapshot.current_level,
            outcome=outcome.value,
        )
        return AnswerResult(
            game_id=game.id,
            accepted=outcome in {AnswerOutcome.CORRECT, AnswerOutcome.WON},
            outcome=outcome,
            correct_answer_key=correct_key,
            current_level=updated.current_level,
            status=status,
            prize=updated.prize,
        )

    @staticmethod
    async def take_money(
        session: AsyncSession,
        *,
        game_id: int,
        now_utc: datetime,
        time_limit: timedelta | None = None,
    ) -> TakeMoneyResult:
        effective_limit = GAME_TIME_LIMIT if time_limit is None else time_limit
        game = await GameService._get_game(session, game_id, for_update=True)
        updated = apply_take_money(
            GameService._snapshot_from_model(game),
            now_utc=now_utc,
            time_limit=effective_limit,
        )
        status = await GameService._finalize(
            session,
            game=game,
            snapshot=updated,
            now_utc=now_utc,
            time_limit=effective_limit,
        )
        user = await UsersRepo.get_by_id(session, game.user_id)
        return TakeMoneyResult(
            game_id=game.id,
            prize=updated.prize,
            balance=user.balance if user is not None else 0,
            status=status,
        )

    @staticmethod
    async def time_out(
        session: AsyncSession,
        *,
        game_id: int,
        now_utc: datetime,
        time_limit: timedelta | None = None,
    ) -> bool:
        effective_limit = GAME_TIME_LIMIT if time_limit is None else time_limit
        game = await GameService._get_game(session, game_id, for_update=True)
        updated, timed_out = apply_time_out(
            GameService._snapshot_from_model(game),
            now_utc=now_utc,
            time_limit=effective_limit,
        )
        if not timed_out:
            return False
        await GameService._finalize(
            session,
            game=game,
            snapshot=updated,
            now_utc=now_utc,
            time_limit=effective_limit,
        )
        return True

    @staticmethod
    async def expire_timed_out_games(
        session: AsyncSession,
        *,
        now_utc: datetime,
        limit: int,
        time_limit: timedelta | None = None,
    ) -> int:
        effective_limit = GAME_TIME_LIMIT if time_limit is None else time_limit
        game_ids = await GamesRepo.list_ids_unfinished_created_before(
            session,
            created_before_utc=now_utc - effective_limit,
            limit=limit,
        )
        expired = 0
        for game_id in game_ids:
            if await GameService.time_out(
                session,
                game_id=game_id,
                now_utc=now_utc,
                time_limit=effective_limit,
            ):
                expired += 1
        return expired
