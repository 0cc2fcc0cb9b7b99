"""
API package initialization.

This package contains FastAPI router modules for the SCV decomposition service:
- decompositions: Two-dimensional SCV decomposition of an in-memory record set
"""

from fastapi import APIRouter

from scv2d.api.decompositions import router as decompositions_router

# Create main API router
api_router = APIRouter()

# decompositions router has its own prefix
api_router.include_router(decompositions_router)

__all__ = [
    "api_router",
    "decompositions_router",
]
