from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from millionaire.db.models.base import Base, BigIntPK


class Question(Base):
    """Pool question. ``answer1`` always holds the correct answer."""

    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("level >= 0 AND level <= 14", name="ck_questions_level_range"),
        Index("idx_questions_level", "level"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    level: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    answer1: Mapped[str] = mapped_column(Text, nullable=False)
    answer2: Mapped[str] = mapped_column(Text, nullable=False)
    answer3: Mapped[str] = mapped_column(Text, nullable=False)
    answer4: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
