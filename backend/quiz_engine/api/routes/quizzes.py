from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from quiz_engine.api.deps import require_user
from quiz_engine.db.session import get_db
from quiz_engine.models.user import User
from quiz_engine.schemas.common import envelope
from quiz_engine.schemas.quiz import QuizCreateRequest, QuizSubmitRequest
from quiz_engine.services.attempt_service import submit_attempt
from quiz_engine.services.quiz_store import create_quiz, get_quiz_for_taking, list_categories, list_quizzes

router = APIRouter(tags=["quizzes"])


@router.post("/quizzes")
def quiz_create(
    request: Request,
    payload: QuizCreateRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    data = create_quiz(db, user_id=user.id, payload=payload)
    return envelope(request.state.request_id, data)


@router.get("/categories")
def category_list(request: Request, db: Session = Depends(get_db), user: User = Depends(require_user)):
    data = [c.model_dump(mode="json") for c in list_categories(db)]
    return envelope(request.state.request_id, data)


@router.get("/quizzes")
def quiz_list(request: Request, db: Session = Depends(get_db), user: User = Depends(require_user)):
    data = [q.model_dump(mode="json") for q in list_quizzes(db)]
    return envelope(request.state.request_id, data)


@router.get("/quizzes/{quiz_id}")
def quiz_get(request: Request, quiz_id: int, db: Session = Depends(get_db), user: User = Depends(require_user)):
    data = get_quiz_for_taking(db, quiz_id)
    return envelope(request.state.request_id, data)


@router.post("/quizzes/{quiz_id}/submit")
def quiz_submit(
    request: Request,
    quiz_id: int,
    payload: QuizSubmitRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    data = submit_attempt(
        db,
        quiz_id=quiz_id,
        user_id=user.id,
        answers=payload.answers,
        time_spent=payload.time_spent,
    )
    return envelope(request.state.request_id, data)
