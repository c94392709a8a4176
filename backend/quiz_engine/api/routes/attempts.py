from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from quiz_engine.api.deps import require_user
from quiz_engine.db.session import get_db
from quiz_engine.models.user import User
from quiz_engine.schemas.common import envelope
from quiz_engine.services.result_service import get_result, list_attempts_for_user

router = APIRouter(tags=["attempts"])


@router.get("/attempts")
def attempts_mine(request: Request, db: Session = Depends(get_db), user: User = Depends(require_user)):
    data = [a.model_dump(mode="json") for a in list_attempts_for_user(db, user.id)]
    return envelope(request.state.request_id, data)


@router.get("/attempts/{attempt_id}/result")
def attempt_result(
    request: Request,
    attempt_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    data = get_result(db, attempt_id, requester_id=user.id, requester_is_admin=user.is_admin)
    return envelope(request.state.request_id, data)
