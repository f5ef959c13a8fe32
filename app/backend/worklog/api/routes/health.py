"""Liveness and readiness probes."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from worklog.core.config import get_settings
from worklog.db.session import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Liveness probe")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready", summary="Readiness probe")
def readiness(db: Session = Depends(get_db_session)) -> dict[str, str]:
    """Round-trip the entry store; failures surface as the store error response."""

    db.execute(text("SELECT 1"))
    return {"status": "ready", "environment": get_settings().app_env}
