"""
Admin API endpoints.

All endpoints require the X-Admin-Token header.

Submodules:
    - quizzes: Quiz, question, option and scoring authoring
    - users: Per-patient check-in history for clinicians
"""
from fastapi import APIRouter

from . import quizzes, users

router = APIRouter()

router.include_router(quizzes.router, tags=["Admin - Catalog"])
router.include_router(users.router, tags=["Admin - Patients"])

__all__ = ["router"]
