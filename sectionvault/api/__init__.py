"""API routes."""

from .sections import router as sections_router
from .activities import router as activities_router

__all__ = [
    "sections_router",
    "activities_router",
]
