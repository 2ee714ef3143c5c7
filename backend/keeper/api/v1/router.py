from fastapi import APIRouter

from keeper.api.v1.endpoints import auth, health, secrets

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/user", tags=["auth"])
api_router.include_router(secrets.router, prefix="/user/data", tags=["secrets"])
