"""
Hotel routers: room types, rooms and stays.
"""

from fastapi import APIRouter

from .room_types import router as room_types_router
from .rooms import router as rooms_router
from .stays import router as stays_router


router = APIRouter()
router.include_router(room_types_router)
router.include_router(rooms_router)
router.include_router(stays_router)

__all__ = ["router"]
