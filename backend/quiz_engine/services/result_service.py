from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from quiz_engine.core.errors import Forbidden, NotFound, StorageFailure
from quiz_engine.models.attempt import ATTEMPT_FINALIZED, Attempt
from quiz_engine.schemas.quiz import AttemptSummaryOut, QuestionResult, ResultView
from quiz_engine.services.attempt_service import score_percent
from quiz_engine.services.snapshot import loads_snapshot

logger = logging.getLogger(__name__)


def get_result(db: Session, attempt_id: int, requester_id: int, requester_is_admin: bool = False) -> ResultView:
    """Graded breakdown of one attempt, rebuilt from the stored snapshots only.

    Live quiz rows are never read here, so the view stays the same after the
    quiz is edited or deleted. Only the attempt owner or an admin may see it.
    """

    try:
        attempt = (
            db.query(Attempt)
            .options(selectinload(Attempt.answers))
            .filter(Attempt.id == int(attempt_id))
            .first()
        )
    except SQLAlchemyError as exc:
        logger.exception("Loading attempt_id=%s failed", attempt_id)
        raise StorageFailure("Attempt could not be loaded") from exc

    if not attempt or attempt.status != ATTEMPT_FINALIZED:
        raise NotFound("Attempt not found", details={"attempt_id": attempt_id})

    if int(requester_id) != int(attempt.user_id) and not requester_is_admin:
        logger.warning("User %s denied access to attempt %s", requester_id, attempt_id)
        raise Forbidden("Not allowed to view this attempt", details={"attempt_id": attempt_id})

    questions: List[QuestionResult] = []
    for ans in attempt.answers:
        snap = loads_snapshot(ans.question_snapshot, answer_id=ans.id)
        questions.append(
            QuestionResult(
                question_id=ans.question_id,
                text=snap.text,
                options=list(snap.options),
                correct_answer_index=snap.correctAnswer,
                chosen_index=ans.answer_index,
                is_correct=bool(ans.is_correct),
            )
        )

    total = len(questions)
    correct = sum(1 for q in questions if q.is_correct)

    if total and score_percent(correct, total) != int(attempt.score):
        logger.warning(
            "Attempt %s stored score %s does not match answers (%s/%s)",
            attempt.id,
            attempt.score,
            correct,
            total,
        )

    return ResultView(
        attempt_id=attempt.id,
        quiz_id=attempt.quiz_id,
        quiz_title=attempt.quiz_title or "",
        user_id=attempt.user_id,
        score=int(attempt.score),
        time_spent=int(attempt.time_spent or 0),
        completed_at=attempt.completed_at,
        total_questions=total,
        correct_answers=correct,
        wrong_answers=total - correct,
        questions=questions,
    )


def list_attempts_for_user(db: Session, user_id: int) -> List[AttemptSummaryOut]:
    try:
        rows = (
            db.query(Attempt)
            .filter(Attempt.user_id == int(user_id), Attempt.status == ATTEMPT_FINALIZED)
            .order_by(Attempt.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception("Listing attempts for user_id=%s failed", user_id)
        raise StorageFailure("Attempts could not be loaded") from exc
    return [
        AttemptSummaryOut(
            attempt_id=a.id,
            quiz_id=a.quiz_id,
            quiz_title=a.quiz_title or "",
            score=int(a.score),
            time_spent=int(a.time_spent or 0),
            completed_at=a.completed_at,
        )
        for a in rows
    ]
