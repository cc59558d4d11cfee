"""收货单接口 - 列表、搜索、详情、创建、更新、审批"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ..errors import NotFoundError
from ..models import ChangeStatusRequest, CreateReceiptPayload, UpdateReceiptPayload
from ..storage import ReceiptStore, StoreError
from .deps import envelope, get_store, page_envelope, raise_http

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/goods-receipts", tags=["goods-receipts"])


@router.get("/get-goods-receipts")
def list_goods_receipts(
    page: int = Query(0, ge=0),
    size: int = Query(100, ge=1),
    sort: str = Query("receiptDate,desc"),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    """收货单列表（分页信封）"""
    return page_envelope(store.list_receipts(), page, size, sort)


@router.get("/search-goods-receipts")
def search_goods_receipts(
    search: str = Query(""),
    page: int = Query(0, ge=0),
    size: int = Query(100, ge=1),
    sort: str = Query("receiptDate,desc"),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    """关键字搜索（扁平信封）"""
    rows = store.search_receipts(search)
    if sort.lower().endswith(",asc"):
        rows.reverse()
    start = page * size
    logger.info(f"[收货单接口] 搜索 '{search}' 命中 {len(rows)} 条")
    return envelope(rows[start:start + size])


@router.get("/get-goods-receipt-by-id")
def get_goods_receipt_by_id(
    id: str = Query(...),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    """收货单详情；不存在时返回 ``data: null``"""
    receipt = store.get_receipt(id)
    if receipt is None:
        return envelope(None, message="Goods receipt not found")
    return envelope(receipt)


@router.post("/create-goods-receipt")
def create_goods_receipt(
    payload: CreateReceiptPayload,
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    try:
        receipt = store.create_receipt(payload)
    except StoreError as e:
        logger.warning(f"[收货单接口] 创建被拒绝: {e.message}")
        raise_http(e)
    return envelope(receipt, message="Goods receipt created")


@router.post("/update-goods-receipt")
def update_goods_receipt(
    payload: UpdateReceiptPayload,
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    try:
        receipt = store.update_receipt(payload)
    except (StoreError, NotFoundError) as e:
        logger.warning(f"[收货单接口] 更新 {payload.id} 被拒绝: {e}")
        raise_http(e)
    return envelope(receipt, message="Goods receipt updated")


@router.post("/change-goods-receipt-status")
def change_goods_receipt_status(
    body: ChangeStatusRequest,
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    """审批收货单，目标状态由订单覆盖情况决定"""
    try:
        receipt = store.approve_receipt(body.id)
    except (StoreError, NotFoundError) as e:
        logger.warning(f"[收货单接口] 审批 {body.id} 被拒绝: {e}")
        raise_http(e)
    return envelope(receipt, message="Goods receipt status changed")


__all__ = ["router"]
