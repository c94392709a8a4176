from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiz_engine.db.base_class import Base

if TYPE_CHECKING:
    from quiz_engine.models.attempt import Attempt


class Answer(Base):
    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(primary_key=True)
    attempt_id: Mapped[int] = mapped_column(ForeignKey("attempts.id", ondelete="CASCADE"), index=True, nullable=False)
    question_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # Question order inside the quiz at grading time
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # None when the question was left unanswered
    answer_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # JSON document: {"text": ..., "options": [...], "correctAnswer": n}
    question_snapshot: Mapped[str] = mapped_column(Text, nullable=False)

    attempt: Mapped["Attempt"] = relationship(back_populates="answers")
