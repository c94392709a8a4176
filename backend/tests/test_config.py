import logging

from quiz_engine.core.config import Settings
from quiz_engine.core.logging_config import configure_logging


def test_cors_origins_accept_comma_list(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "http://a.test, http://b.test")
    s = Settings()
    assert s.BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_cors_origins_accept_json_list(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", '["http://a.test"]')
    s = Settings()
    assert s.BACKEND_CORS_ORIGINS == ["http://a.test"]


def test_log_level_is_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    assert Settings().LOG_LEVEL == "DEBUG"


def test_configure_logging_quiets_sql_engine():
    logger = configure_logging("INFO")

    assert logger.name == "quiz_engine"
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
