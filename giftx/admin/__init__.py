"""Admin API: analytics dashboards and live presence, under /admin."""
from fastapi import APIRouter

from giftx.admin.routers import analytics, live

admin_router = APIRouter(prefix="/admin", tags=["admin"])

admin_router.include_router(analytics.router, prefix="/analytics", tags=["admin-analytics"])
admin_router.include_router(live.router, prefix="/live", tags=["admin-live"])
