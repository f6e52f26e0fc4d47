from fastapi import APIRouter

from weekgrid.api.routes import availability, health, users


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/user", tags=["user"])
api_router.include_router(availability.router, prefix="/availability", tags=["availability"])
