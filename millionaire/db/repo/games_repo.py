from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from millionaire.db.models.games import Game


class GamesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, game_id: int) -> Game | None:
        return await session.get(Game, game_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, game_id: int) -> Game | None:
        stmt = select(Game).where(Game.id == game_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_ids_unfinished_created_before(
        session: AsyncSession,
        *,
        created_before_utc: datetime,
        limit: int,
    ) -> list[int]:
        stmt = (
            select(Game.id)
            .where(Game.finished_at.is_(None), Game.created_at < created_before_utc)
            .order_by(Game.created_at.asc(), Game.id.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [int(game_id) for game_id in result.scalars().all()]

    @staticmethod
    async def create(session: AsyncSession, *, game: Game) -> Game:
        session.add(game)
        await session.flush()
        return game
