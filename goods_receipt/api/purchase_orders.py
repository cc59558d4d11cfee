"""采购订单及参考数据接口 - 订单、仓库、供应商、商品目录、附件上传"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from ..storage import ReceiptStore
from .deps import envelope, get_store, page_envelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")

# 附件大小限制（10MB）
MAX_FILE_SIZE = 10 * 1024 * 1024


@router.get("/purchase-orders/get-orders", tags=["purchase-orders"])
def get_orders(
    page: int = Query(0, ge=0),
    size: int = Query(100, ge=1),
    sort: str = Query("orderDate,desc"),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    return page_envelope(store.list_purchase_orders(), page, size, sort)


@router.get("/purchase-orders/get-order-by-id", tags=["purchase-orders"])
def get_order_by_id(
    purchaseOrderId: str = Query(...),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    order = store.get_purchase_order(purchaseOrderId)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "PURCHASE_ORDER_NOT_FOUND", "message": f"Purchase order {purchaseOrderId} not found"},
        )
    return envelope(order)


@router.get("/warehouses/get-warehouses", tags=["reference"])
def get_warehouses(store: ReceiptStore = Depends(get_store)) -> Dict[str, Any]:
    return envelope(store.list_warehouses())


@router.get("/partners/get-suppliers", tags=["reference"])
def get_suppliers(store: ReceiptStore = Depends(get_store)) -> Dict[str, Any]:
    suppliers = store.list_suppliers()
    return page_envelope(suppliers, 0, max(len(suppliers), 1))


@router.get("/products/get-products", tags=["reference"])
def get_products(store: ReceiptStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """商品目录直接返回列表"""
    return store.list_products()


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "EMPTY_FILE", "message": "Uploaded file is empty"},
        )
    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": "FILE_TOO_LARGE",
                "message": f"File is too large, maximum {MAX_FILE_SIZE / 1024 / 1024:.1f}MB",
            },
        )
    return content


@router.post("/user/upload-document", tags=["uploads"])
async def upload_document(
    file: UploadFile = File(...),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    """上传收货单附件，返回 ``{"data": {"id", "fileName", "filePath"}}``"""
    content = await _read_upload(file)
    record = store.save_upload(file.filename or "document", file.content_type, len(content))
    return envelope(record, message="Document uploaded")


@router.post("/user/uploads", tags=["uploads"])
async def upload_generic(
    file: UploadFile = File(...),
    store: ReceiptStore = Depends(get_store),
) -> Dict[str, Any]:
    """通用上传接口，句柄在顶层返回"""
    content = await _read_upload(file)
    record = store.save_upload(file.filename or "upload", file.content_type, len(content))
    return {"id": record["id"], "filePath": record["filePath"]}


__all__ = ["router"]
