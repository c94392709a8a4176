from __future__ import annotations

from typing import Any, Optional, Dict
from pydantic import BaseModel


class ErrorOut(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class Envelope(BaseModel):
    request_id: str
    data: Optional[Any] = None
    error: Optional[ErrorOut] = None


def envelope(request_id: str, data: Any = None, error: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Wrap a payload the way every endpoint answers: ``{request_id, data, error}``."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    err = ErrorOut(**error) if error else None
    return Envelope(request_id=request_id, data=data, error=err).model_dump(mode="json")
