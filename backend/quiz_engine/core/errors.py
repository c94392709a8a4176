"""Error taxonomy raised by the assessment engine.

The engine has no HTTP vocabulary: each error carries a stable ``code`` and a
``retryable`` flag, and the web layer (``quiz_engine.main``) decides which
status code to answer with.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class EngineError(Exception):
    code: str = "ENGINE_ERROR"
    retryable: bool = False

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details or None}


class NotFound(EngineError):
    """Referenced quiz or attempt does not exist."""

    code = "NOT_FOUND"


class InvalidState(EngineError):
    """Quiz cannot be graded as stored (no questions, no single correct option)."""

    code = "INVALID_STATE"


class InvalidInput(EngineError):
    code = "INVALID_INPUT"


class Forbidden(EngineError):
    """Result requested by someone who is neither the owner nor an admin."""

    code = "FORBIDDEN"


class DataCorruption(EngineError):
    """A stored question snapshot can no longer be read."""

    code = "DATA_CORRUPTION"


class StorageFailure(EngineError):
    code = "STORAGE_FAILURE"
    retryable = True
