"""接口公共部分 - 存储依赖和响应信封"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request

from ..errors import NotFoundError
from ..storage import ReceiptStore, StoreError


def get_store(request: Request) -> ReceiptStore:
    """从应用状态中取出存储实例"""
    return request.app.state.store


def envelope(data: Any, message: str = "Success") -> Dict[str, Any]:
    return {"success": True, "code": 200, "message": message, "data": data}


def page_envelope(rows: List[Any], page: int, size: int, sort: Optional[str] = None) -> Dict[str, Any]:
    """分页信封 ``{"data": {"content": [...], ...}}``；``sort`` 以 ``,asc`` 结尾时反转默认的倒序"""
    if sort and sort.lower().endswith(",asc"):
        rows = list(reversed(rows))
    page = max(page, 0)
    size = max(size, 1)
    start = page * size
    return envelope({
        "content": rows[start:start + size],
        "page": page,
        "size": size,
        "totalElements": len(rows),
        "totalPages": math.ceil(len(rows) / size) if rows else 0,
    })


def raise_http(error: Exception) -> None:
    """将存储层异常转换为HTTPException"""
    if isinstance(error, StoreError):
        raise HTTPException(
            status_code=error.status_code,
            detail={"code": error.code, "message": error.message},
        ) from error
    if isinstance(error, NotFoundError):
        raise HTTPException(
            status_code=404,
            detail={"code": "GOODS_RECEIPT_NOT_FOUND", "message": str(error)},
        ) from error
    raise error


__all__ = ["envelope", "get_store", "page_envelope", "raise_http"]
