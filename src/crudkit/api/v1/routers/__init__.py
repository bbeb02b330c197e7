from fastapi import APIRouter

from . import health, products, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(users.router)
api_router.include_router(products.router)

health_router = health.router

__all__ = ["api_router", "health_router"]
