from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from quiz_engine.models.user import User

logger = logging.getLogger(__name__)


def ensure_user_exists(db: Session, user_id: int, *, role: Optional[str] = None) -> User:
    """Ensure a user row exists for a given numeric ID.

    Identity comes from request headers, but quizzes and attempts keep a
    foreign key to ``users``. This helper creates a minimal record when the
    id has never been seen. The stored role only changes when ``role`` is
    given; a missing role header leaves an existing user as it is.
    """

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user:
        if role and (user.role or "") != role:
            logger.info("Updating role of user id=%s from %s to %s", user.id, user.role, role)
            user.role = role
            db.commit()
        return user

    uid = int(user_id)
    role = role or "user"
    email = f"{role}{uid}@quiz.local"

    # If email happens to exist already, keep it unique.
    if db.query(User).filter(User.email == email).first():
        email = f"{role}{uid}-{uid}@quiz.local"

    user = User(id=uid, email=email, full_name=f"{role.title()} {uid}", role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user id=%s role=%s", uid, role)
    return user
