"""
API v1 router combining all v1 endpoints.
"""
from fastapi import APIRouter

from checkin.api.v1 import admin, checkins, health, quizzes

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(quizzes.router, prefix="/quizzes", tags=["quizzes"])
api_router.include_router(checkins.router, prefix="/checkins", tags=["checkins"])
api_router.include_router(admin.router, prefix="/admin")
