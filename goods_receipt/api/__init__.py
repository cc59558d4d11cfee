"""API router aggregator."""

from fastapi import APIRouter

from .goods_receipts import router as goods_receipts_router
from .purchase_orders import router as purchase_orders_router

api_router = APIRouter()
api_router.include_router(goods_receipts_router)
api_router.include_router(purchase_orders_router)

__all__ = ["api_router"]
