"""API router package for the Quote Desk service."""
from fastapi import APIRouter

from .routes import media, portals, programs, settings

router = APIRouter()
router.include_router(portals.router)
router.include_router(programs.router)
router.include_router(settings.router)
router.include_router(media.router)

__all__ = ["router"]
