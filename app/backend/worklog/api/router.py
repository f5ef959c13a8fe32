"""Top-level API router."""

from fastapi import APIRouter

from worklog.api.routes.dashboard import router as dashboard_router
from worklog.api.routes.health import router as health_router
from worklog.api.routes.me import router as me_router
from worklog.api.routes.reports import router as reports_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(me_router)
api_router.include_router(reports_router)
api_router.include_router(dashboard_router)
