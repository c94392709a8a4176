from __future__ import annotations

import json
from typing import Optional

from pydantic import ValidationError

from quiz_engine.core.errors import DataCorruption, InvalidState
from quiz_engine.models.question import Question
from quiz_engine.schemas.quiz import QuestionSnapshot


def correct_option_index(question: Question) -> int:
    """Position of the single option flagged correct, in display order."""
    flagged = [i for i, opt in enumerate(question.options) if bool(opt.is_correct)]
    if len(flagged) != 1:
        raise InvalidState(
            "Question must have exactly one correct option",
            details={"question_id": question.id, "correct_options": len(flagged)},
        )
    return flagged[0]


def build_snapshot(question: Question) -> QuestionSnapshot:
    return QuestionSnapshot(
        text=str(question.text),
        options=[str(opt.text) for opt in question.options],
        correctAnswer=correct_option_index(question),
    )


def dumps_snapshot(snapshot: QuestionSnapshot) -> str:
    # Key order is fixed so the stored document is stable byte for byte.
    return json.dumps(
        {"text": snapshot.text, "options": list(snapshot.options), "correctAnswer": snapshot.correctAnswer},
        ensure_ascii=False,
    )


def loads_snapshot(raw: Optional[str], *, answer_id: Optional[int] = None) -> QuestionSnapshot:
    if not raw:
        raise DataCorruption("Question snapshot is empty", details={"answer_id": answer_id})
    try:
        return QuestionSnapshot.model_validate(json.loads(raw))
    except (ValueError, TypeError, ValidationError) as exc:
        raise DataCorruption(
            "Question snapshot could not be parsed",
            details={"answer_id": answer_id, "reason": str(exc)},
        ) from exc
