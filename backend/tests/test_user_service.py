from __future__ import annotations

from conftest import ADMIN_ID, OWNER_ID
from quiz_engine.models.user import User
from quiz_engine.services.user_service import ensure_user_exists


def test_missing_role_keeps_stored_admin(db):
    user = ensure_user_exists(db, ADMIN_ID)

    assert user.role == "admin"
    assert db.query(User).filter(User.id == ADMIN_ID).one().is_admin


def test_explicit_role_updates_stored_user(db):
    user = ensure_user_exists(db, OWNER_ID, role="admin")

    assert user.role == "admin"


def test_new_user_defaults_to_plain_user(db):
    user = ensure_user_exists(db, 55)

    assert user.role == "user"
    assert user.email == "user55@quiz.local"
    assert db.query(User).filter(User.id == 55).count() == 1
