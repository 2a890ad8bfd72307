"""
Restaurant routers: tables and orders.
"""

from fastapi import APIRouter

from .tables import router as tables_router
from .orders import router as orders_router


router = APIRouter()
router.include_router(tables_router)
router.include_router(orders_router)

__all__ = ["router"]
