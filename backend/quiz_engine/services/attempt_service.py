from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Union

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quiz_engine.core.errors import InvalidInput, InvalidState, NotFound, StorageFailure
from quiz_engine.models.answer import Answer
from quiz_engine.models.attempt import ATTEMPT_FINALIZED, ATTEMPT_PENDING, Attempt
from quiz_engine.models.user import User
from quiz_engine.schemas.quiz import AttemptResult, SubmitAnswer
from quiz_engine.services.quiz_store import load_quiz_for_grading
from quiz_engine.services.snapshot import build_snapshot, dumps_snapshot

logger = logging.getLogger(__name__)

_answers_adapter = TypeAdapter(List[SubmitAnswer])


def score_percent(correct_count: int, total_questions: int) -> int:
    """Integer percentage, rounded to nearest with ties going up (12.5 -> 13)."""
    if total_questions <= 0:
        raise InvalidState("Cannot score a quiz without questions")
    return (200 * int(correct_count) + int(total_questions)) // (2 * int(total_questions))


def _validate_answers(answers: Sequence[Union[SubmitAnswer, Dict[str, Any]]]) -> List[SubmitAnswer]:
    try:
        return _answers_adapter.validate_python(list(answers or []))
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        raise InvalidInput("Submitted answers are invalid", details={"errors": errors}) from exc


def submit_attempt(
    db: Session,
    quiz_id: int,
    user_id: int,
    answers: Sequence[Union[SubmitAnswer, Dict[str, Any]]],
    time_spent: int = 0,
) -> AttemptResult:
    """Grade a submission and store it as one attempt with one answer per question.

    Every question of the quiz gets an answer row. Questions the user skipped
    are stored with ``answer_index=None`` and count as wrong, so the score is
    always measured against the full question count. Entries pointing at
    questions outside the quiz are ignored.

    Nothing is visible to other sessions until the single commit at the end.
    """

    if not isinstance(time_spent, int) or isinstance(time_spent, bool) or time_spent < 0:
        raise InvalidInput("time_spent must be a non-negative number", details={"time_spent": time_spent})
    submitted = _validate_answers(answers)

    try:
        user_known = db.query(User.id).filter(User.id == int(user_id)).first() is not None
        quiz = load_quiz_for_grading(db, quiz_id)
    except SQLAlchemyError as exc:
        logger.exception("Loading quiz_id=%s for grading failed", quiz_id)
        raise StorageFailure("Quiz could not be loaded") from exc

    if not user_known:
        raise NotFound("User not found", details={"user_id": user_id})
    if not quiz:
        raise NotFound("Quiz not found", details={"quiz_id": quiz_id})

    questions = list(quiz.questions)
    if not questions:
        raise InvalidState("Quiz has no questions", details={"quiz_id": quiz_id})

    # Snapshots first: a malformed question aborts before anything is written.
    snapshots = [build_snapshot(q) for q in questions]

    answer_map = {a.question_id: a.answer_index for a in submitted}
    unknown = set(answer_map) - {q.id for q in questions}
    if unknown:
        logger.debug("Ignoring answers for questions outside quiz_id=%s: %s", quiz_id, sorted(unknown))

    try:
        attempt = Attempt(
            user_id=int(user_id),
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            status=ATTEMPT_PENDING,
            score=0,
            time_spent=int(time_spent),
        )
        db.add(attempt)
        db.flush()

        correct_count = 0
        for position, (question, snap) in enumerate(zip(questions, snapshots)):
            chosen = answer_map.get(question.id)
            is_correct = chosen is not None and int(chosen) == snap.correctAnswer
            if is_correct:
                correct_count += 1
            db.add(
                Answer(
                    attempt_id=attempt.id,
                    question_id=question.id,
                    position=position,
                    answer_index=chosen,
                    is_correct=is_correct,
                    question_snapshot=dumps_snapshot(snap),
                )
            )

        total = len(questions)
        attempt.score = score_percent(correct_count, total)
        attempt.status = ATTEMPT_FINALIZED
        attempt.completed_at = datetime.now(timezone.utc)
        db.commit()
    except IntegrityError as exc:
        # A constraint violation will fail the same way on every retry.
        db.rollback()
        logger.warning("Attempt rejected by constraints quiz_id=%s user_id=%s: %s", quiz_id, user_id, exc.orig)
        raise InvalidState(
            "Attempt violates a stored constraint",
            details={"quiz_id": quiz_id, "user_id": user_id},
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storing attempt failed quiz_id=%s user_id=%s", quiz_id, user_id)
        raise StorageFailure("Attempt could not be stored", details={"quiz_id": quiz_id}) from exc

    logger.info(
        "Attempt stored id=%s quiz_id=%s user_id=%s score=%s (%s/%s)",
        attempt.id,
        quiz.id,
        user_id,
        attempt.score,
        correct_count,
        total,
    )
    return AttemptResult(
        attempt_id=attempt.id,
        quiz_id=quiz.id,
        score=attempt.score,
        correct_count=correct_count,
        total_questions=total,
    )
