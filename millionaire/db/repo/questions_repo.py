from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from millionaire.db.models.questions import Question


class QuestionsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, question_id: int) -> Question | None:
        return await session.get(Question, question_id)

    @staticmethod
    async def list_ids_by_level(
        session: AsyncSession,
        *,
        levels: Sequence[int],
    ) -> dict[int, list[int]]:
        stmt = (
            select(Question.level, Question.id)
            .where(Question.level.in_(tuple(levels)))
            .order_by(Question.level.asc(), Question.id.asc())
        )
        result = await session.execute(stmt)
        ids_by_level: dict[int, list[int]] = defaultdict(list)
        for level, question_id in result.all():
            ids_by_level[int(level)].append(int(question_id))
        return dict(ids_by_level)

    @staticmethod
    async def create(session: AsyncSession, *, question: Question) -> Question:
        session.add(question)
        await session.flush()
        return question
