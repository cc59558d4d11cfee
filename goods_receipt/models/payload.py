"""请求体模型 - 创建/更新/审批收货单的接口数据结构

客户端和参考后端共用这些模型，字段名与接口保持一致（camelCase）。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .base import ReceiptStatus


class ReceiptProductPayload(BaseModel):
    """收货单商品行"""
    productId: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unitPrice: float = Field(ge=0)
    totalPrice: float = Field(ge=0)
    location: str = ""
    stack: int = Field(default=1, gt=0)
    fee: float = Field(default=0.0, ge=0)
    note: Optional[str] = None


class CreateReceiptPayload(BaseModel):
    """创建收货单请求"""
    purchaseOrderId: str = Field(min_length=1)
    warehouseId: str = Field(min_length=1)
    supplierId: str = Field(min_length=1)
    documents: List[str] = []
    products: List[ReceiptProductPayload] = Field(min_length=1)
    description: Optional[str] = None
    note: Optional[str] = None
    status: ReceiptStatus = ReceiptStatus.DRAFT
    receiptDate: str
    subTotal: float = Field(ge=0)

    def to_body(self) -> Dict[str, Any]:
        """转换为JSON请求体（省略空的可选字段）"""
        return self.model_dump(mode="json", exclude_none=True)


class UpdateReceiptPayload(CreateReceiptPayload):
    """更新收货单请求"""
    id: str = Field(min_length=1)


class ChangeStatusRequest(BaseModel):
    """审批收货单请求（不携带目标状态）"""
    id: str = Field(min_length=1)


__all__ = [
    "ChangeStatusRequest",
    "CreateReceiptPayload",
    "ReceiptProductPayload",
    "UpdateReceiptPayload",
]
