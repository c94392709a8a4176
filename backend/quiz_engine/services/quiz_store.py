"""Quiz definitions: authoring and read access.

Grading only ever reads through :func:`load_quiz_for_grading`; the other
helpers back the authoring and quiz-taking endpoints.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from quiz_engine.core.errors import NotFound, StorageFailure
from quiz_engine.models.category import Category
from quiz_engine.models.option import Option
from quiz_engine.models.question import Question
from quiz_engine.models.quiz import Quiz
from quiz_engine.schemas.quiz import (
    CategoryOut,
    QuizCreateRequest,
    QuizQuestionOut,
    QuizSummaryOut,
    QuizTakeOut,
)

logger = logging.getLogger(__name__)


def load_quiz_for_grading(db: Session, quiz_id: int) -> Optional[Quiz]:
    """Quiz with its questions and options, loaded in one go."""
    return (
        db.query(Quiz)
        .options(selectinload(Quiz.questions).selectinload(Question.options))
        .filter(Quiz.id == int(quiz_id))
        .first()
    )


def _summary(quiz: Quiz, question_count: int) -> QuizSummaryOut:
    return QuizSummaryOut(
        quiz_id=quiz.id,
        title=quiz.title,
        description=quiz.description or "",
        category_id=quiz.category_id,
        user_id=quiz.user_id,
        question_count=int(question_count),
    )


def create_quiz(db: Session, *, user_id: int, payload: QuizCreateRequest) -> QuizSummaryOut:
    if payload.category_id is not None:
        try:
            category = db.query(Category).filter(Category.id == int(payload.category_id)).first()
        except SQLAlchemyError as exc:
            logger.exception("Loading category_id=%s failed", payload.category_id)
            raise StorageFailure("Category could not be loaded") from exc
        if not category:
            raise NotFound("Category not found", details={"category_id": payload.category_id})

    try:
        quiz = Quiz(
            title=payload.title.strip(),
            description=payload.description or "",
            category_id=payload.category_id,
            user_id=int(user_id),
        )
        for q_pos, q in enumerate(payload.questions):
            question = Question(position=q_pos, text=q.text)
            for o_pos, opt_text in enumerate(q.options):
                question.options.append(Option(position=o_pos, text=opt_text, is_correct=(o_pos == q.correct_index)))
            quiz.questions.append(question)
        db.add(quiz)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Saving quiz failed for user_id=%s", user_id)
        raise StorageFailure("Quiz could not be saved") from exc

    logger.info("Quiz created id=%s user_id=%s questions=%s", quiz.id, user_id, len(payload.questions))
    return _summary(quiz, len(payload.questions))


def list_quizzes(db: Session) -> List[QuizSummaryOut]:
    try:
        counts = dict(
            db.query(Question.quiz_id, func.count(Question.id)).group_by(Question.quiz_id).all()
        )
        quizzes = db.query(Quiz).order_by(Quiz.id.desc()).all()
    except SQLAlchemyError as exc:
        logger.exception("Listing quizzes failed")
        raise StorageFailure("Quizzes could not be loaded") from exc
    return [_summary(q, counts.get(q.id, 0)) for q in quizzes]


def list_categories(db: Session) -> List[CategoryOut]:
    """Categories an author can file a new quiz under."""
    try:
        rows = db.query(Category).order_by(Category.name.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception("Listing categories failed")
        raise StorageFailure("Categories could not be loaded") from exc
    return [CategoryOut(category_id=c.id, name=c.name) for c in rows]


def get_quiz_for_taking(db: Session, quiz_id: int) -> QuizTakeOut:
    """Quiz as shown to a participant: option texts only, no correctness flags."""
    try:
        quiz = load_quiz_for_grading(db, quiz_id)
    except SQLAlchemyError as exc:
        logger.exception("Loading quiz_id=%s failed", quiz_id)
        raise StorageFailure("Quiz could not be loaded") from exc
    if not quiz:
        raise NotFound("Quiz not found", details={"quiz_id": quiz_id})

    return QuizTakeOut(
        quiz_id=quiz.id,
        title=quiz.title,
        description=quiz.description or "",
        questions=[
            QuizQuestionOut(question_id=q.id, text=q.text, options=[o.text for o in q.options])
            for q in quiz.questions
        ],
    )
