from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    SmallInteger,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from millionaire.db.models.base import Base, BigIntPK


class GameQuestion(Base):
    """One rung of a game's ladder.

    ``a``..``d`` hold the 1-based index of the question answer shown under
    that key; the key holding ``1`` is the correct one.
    """

    __tablename__ = "game_questions"
    __table_args__ = (
        UniqueConstraint("game_id", "level", name="uq_game_questions_game_level"),
        UniqueConstraint("game_id", "question_id", name="uq_game_questions_game_question"),
        CheckConstraint("level >= 0 AND level <= 14", name="ck_game_questions_level_range"),
        CheckConstraint(
            "a + b + c + d = 10 AND a * b * c * d = 24",
            name="ck_game_questions_key_permutation",
        ),
        Index("idx_game_questions_question", "question_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("games.id"), nullable=False)
    question_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("questions.id"), nullable=False)
    level: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    a: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    b: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    c: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    d: Mapped[int] = mapped_column(SmallInteger, nullable=False)
