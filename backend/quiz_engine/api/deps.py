"""Common FastAPI dependencies.

Authentication lives in front of this service. The gateway forwards the
identity as headers: X-User-Id, X-User-Role (``user`` or ``admin``).

We auto-create a minimal User row if missing so foreign keys won't fail.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from quiz_engine.db.session import get_db
from quiz_engine.models.user import User
from quiz_engine.services.user_service import ensure_user_exists


def _normalize_role(role: Optional[str]) -> Optional[str]:
    if not role:
        return None
    r = str(role).strip().lower()
    if r in {"user", "admin"}:
        return r
    return None


def get_current_user_optional(
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(default=None, alias="X-User-Role"),
) -> Optional[User]:
    """Return current user from identity headers.

    If headers are missing or malformed, returns None.
    """

    if not x_user_id:
        return None

    try:
        uid = int(str(x_user_id).strip())
    except ValueError:
        return None
    if uid < 1:
        return None

    # No role header: keep whatever role is stored.
    return ensure_user_exists(db, uid, role=_normalize_role(x_user_role))


def require_user(user: Optional[User] = Depends(get_current_user_optional)) -> User:
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
