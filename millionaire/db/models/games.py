from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from millionaire.db.models.base import Base, BigIntPK


class Game(Base):
    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint(
            "current_level >= 0 AND current_level <= 15",
            name="ck_games_current_level_range",
        ),
        CheckConstraint("prize >= 0", name="ck_games_prize_non_negative"),
        CheckConstraint(
            "(is_failed = false) OR finished_at IS NOT NULL",
            name="ck_games_failed_implies_finished",
        ),
        Index("idx_games_user_created", "user_id", "created_at"),
        Index("idx_games_unfinished_created", "finished_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    current_level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    is_failed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    prize: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
