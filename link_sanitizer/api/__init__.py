from fastapi import APIRouter

from link_sanitizer.api.v1 import params, preview, sanitize

api_router = APIRouter(prefix="/api")
api_router.include_router(sanitize.router)
api_router.include_router(preview.router)
api_router.include_router(params.router)

__all__ = ["api_router"]
