from fastapi import APIRouter

from .slideshows import router as slideshows_router

api_router = APIRouter(prefix="/api")
api_router.include_router(slideshows_router)

__all__ = ["api_router"]
