"""异常类型 - 收货单工作流的统一错误分类"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

GENERIC_ERROR_MESSAGE = "An error occurred"
CONNECTION_ERROR_MESSAGE = (
    "Cannot connect to server. Please check your internet connection or API URL."
)


class GoodsReceiptError(Exception):
    """所有收货单相关异常的基类"""


@dataclass(eq=False)
class ValidationError(GoodsReceiptError):
    """提交前的本地校验失败，不会触发任何网络请求"""

    field: str
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class TransportError(GoodsReceiptError):
    """统一封装网络/HTTP 异常。

    ``message`` 优先取自后端返回体，否则为通用提示。
    """

    status: Optional[int]
    message: str
    code: Optional[Any] = None
    details: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        code = self.status if self.status is not None else "-"
        return f"[{code}] {self.message}"


class ShapeError(GoodsReceiptError):
    """列表/搜索接口返回了无法识别的数据结构"""

    def __init__(self, payload: Any):
        super().__init__(f"Unexpected response envelope: {type(payload).__name__}")
        self.payload = payload


class NotFoundError(GoodsReceiptError):
    """按ID加载收货单时后端未返回数据"""

    def __init__(self, receipt_id: str):
        super().__init__(f"Goods receipt {receipt_id} not found")
        self.receipt_id = receipt_id


__all__ = [
    "CONNECTION_ERROR_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
    "GoodsReceiptError",
    "NotFoundError",
    "ShapeError",
    "TransportError",
    "ValidationError",
]
