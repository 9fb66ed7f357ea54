"""API Router"""

from fastapi import APIRouter

from app.api.endpoints import admin

api_router = APIRouter()

api_router.include_router(admin.router, prefix="/admin", tags=["Admin Dashboard"])
