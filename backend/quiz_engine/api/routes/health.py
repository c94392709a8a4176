from fastapi import APIRouter

from quiz_engine.core.config import settings


router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME, "env": settings.ENV}
