"""API v1 routes."""

from fastapi import APIRouter

from rolodex.api.v1 import accounts, auth, handlers, health, staff

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
router.include_router(handlers.router, prefix="/handlers", tags=["handlers"])
router.include_router(staff.router, prefix="/staff", tags=["staff"])
