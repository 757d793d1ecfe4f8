from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from millionaire.db.models.game_questions import GameQuestion


class GameQuestionsRepo:
    @staticmethod
    async def list_for_game(session: AsyncSession, *, game_id: int) -> list[GameQuestion]:
        stmt = (
            select(GameQuestion)
            .where(GameQuestion.game_id == game_id)
            .order_by(GameQuestion.level.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_for_game_level(
        session: AsyncSession,
        *,
        game_id: int,
        level: int,
    ) -> GameQuestion | None:
        stmt = select(GameQuestion).where(
            GameQuestion.game_id == game_id,
            GameQuestion.level == level,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_many(
        session: AsyncSession,
        *,
        game_questions: Sequence[GameQuestion],
    ) -> list[GameQuestion]:
        session.add_all(list(game_questions))
        await session.flush()
        return list(game_questions)
