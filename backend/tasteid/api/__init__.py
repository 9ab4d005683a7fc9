"""API routes"""

from fastapi import APIRouter
from .auth import router as auth_router
from .users import router as users_router
from .collections import router as collections_router
from .saved_items import router as saved_items_router
from .search import router as search_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(collections_router, prefix="/collections", tags=["collections"])
api_router.include_router(saved_items_router, prefix="/saved-items", tags=["saved-items"])
api_router.include_router(search_router, prefix="/search", tags=["search"])
