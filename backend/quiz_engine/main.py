from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quiz_engine.core.config import settings
from quiz_engine.core.errors import (
    DataCorruption,
    EngineError,
    Forbidden,
    InvalidInput,
    InvalidState,
    NotFound,
    StorageFailure,
)
from quiz_engine.core.logging_config import configure_logging
from quiz_engine.api.routes.health import router as health_router
from quiz_engine.api.routes.quizzes import router as quizzes_router
from quiz_engine.api.routes.attempts import router as attempts_router
from quiz_engine.schemas.common import envelope

logger = logging.getLogger(__name__)

ENGINE_ERROR_STATUS = {
    NotFound: 404,
    Forbidden: 403,
    InvalidState: 409,
    InvalidInput: 422,
    DataCorruption: 500,
    StorageFailure: 503,
}


def status_for(exc: EngineError) -> int:
    for cls, status in ENGINE_ERROR_STATUS.items():
        if isinstance(exc, cls):
            return status
    return 500


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = req_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = req_id
    return response


@app.exception_handler(EngineError)
async def engine_exception_handler(request: Request, exc: EngineError):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    status = status_for(exc)
    if status >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    headers = {"Retry-After": "1"} if exc.retryable else None
    return JSONResponse(
        status_code=status,
        content=envelope(request_id=req_id, data=None, error=exc.to_dict()),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))

    detail = exc.detail
    # Preserve structured error details when provided.
    if isinstance(detail, dict):
        code = str(detail.get("code") or "HTTP_ERROR")
        message = detail.get("message") or str(detail)
        error = {"code": code, "message": message, "details": detail}
    else:
        error = {"code": "HTTP_ERROR", "message": str(detail)}

    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(request_id=req_id, data=None, error=error),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    req_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return JSONResponse(
        status_code=422,
        content=envelope(
            request_id=req_id,
            data=None,
            error={
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": {"errors": [{"loc": list(e.get("loc", [])), "msg": str(e.get("msg"))} for e in exc.errors()]},
            },
        ),
    )


@app.on_event("startup")
def on_startup():
    configure_logging()
    if settings.DB_AUTO_CREATE:
        from quiz_engine.db.base import Base
        from quiz_engine.db.session import engine

        Base.metadata.create_all(bind=engine)
    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)


app.include_router(health_router, prefix="/api")
app.include_router(quizzes_router, prefix="/api")
app.include_router(attempts_router, prefix="/api")
