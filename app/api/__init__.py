# ============================================================================
# Customer Service v1.0.0
# API Routes Module
# ============================================================================

from fastapi import FastAPI

from app.api.auth import router as auth_router
from app.api.customers import router as customers_router
from app.api.monitoring import router as monitoring_router
from app.api.errors import register_exception_handlers


def include_api_routers(app: FastAPI) -> None:
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(customers_router, prefix="/api/customers")
    app.include_router(monitoring_router, prefix="/api/monitoring")


__all__ = [
    "auth_router",
    "customers_router",
    "monitoring_router",
    "include_api_routers",
    "register_exception_handlers",
]
