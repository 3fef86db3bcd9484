from fastapi import APIRouter

from drive_relay.api.endpoints import auth, health, upload

api_router = APIRouter()
api_router.include_router(upload.router, tags=["upload"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(health.router, tags=["health"])
