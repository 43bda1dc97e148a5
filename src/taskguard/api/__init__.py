"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Unlike a router-level auth dependency, protection here is per
route: every task route takes get_current_user_id, and /auth/me takes
get_current_user. Health, register and login take neither.
"""

from fastapi import APIRouter

from taskguard.api.auth import router as auth_router
from taskguard.api.health import router as health_router
from taskguard.api.tasks import router as tasks_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(tasks_router, tags=["tasks"])
