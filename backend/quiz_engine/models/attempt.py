from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiz_engine.db.base_class import Base

if TYPE_CHECKING:
    from quiz_engine.models.answer import Answer

ATTEMPT_PENDING = "pending"
ATTEMPT_FINALIZED = "finalized"


class Attempt(Base):
    __tablename__ = "attempts"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    # Kept as a plain id: the quiz may be edited or deleted after grading.
    quiz_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    quiz_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ATTEMPT_PENDING,
        server_default=text("'pending'"),
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    answers: Mapped[list["Answer"]] = relationship(
        back_populates="attempt",
        order_by="Answer.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
