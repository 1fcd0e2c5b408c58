"""
API Router
"""

from fastapi import APIRouter

from auth_api.api import auth

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)

__all__ = ["router"]
