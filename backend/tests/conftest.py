from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

import pytest
from sqlalchemy.orm import Session, sessionmaker

from quiz_engine.db.base import Base
from quiz_engine.db.session import make_engine
from quiz_engine.models.user import User
from quiz_engine.schemas.quiz import QuizCreateRequest
from quiz_engine.services.quiz_store import create_quiz

OWNER_ID = 2
OTHER_ID = 3
ADMIN_ID = 9
AUTHOR_ID = 1


@pytest.fixture()
def engine():
    eng = make_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory) -> Iterator[Session]:
    s = session_factory()
    s.add_all(
        [
            User(id=AUTHOR_ID, email="author@quiz.local", role="user"),
            User(id=OWNER_ID, email="owner@quiz.local", role="user"),
            User(id=OTHER_ID, email="other@quiz.local", role="user"),
            User(id=ADMIN_ID, email="admin@quiz.local", role="admin"),
        ]
    )
    s.commit()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def make_quiz(db):
    """Create a quiz from ``[(text, [options...], correct_index), ...]``."""

    def _make(questions: Sequence[Tuple[str, List[str], int]], title: str = "Capitals") -> int:
        payload = QuizCreateRequest(
            title=title,
            description="",
            questions=[{"text": t, "options": list(opts), "correct_index": c} for t, opts, c in questions],
        )
        return create_quiz(db, user_id=AUTHOR_ID, payload=payload).quiz_id

    return _make


FOUR_QUESTIONS = [
    ("Capital of France?", ["Berlin", "Paris", "Rome"], 1),
    ("2 + 2 = ?", ["3", "4", "5", "22"], 1),
    ("Largest ocean?", ["Pacific", "Atlantic"], 0),
    ("H2O is?", ["Salt", "Water", "Gold"], 1),
]
