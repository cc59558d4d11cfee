"""基础模型 - 收货单系统的枚举类型和参考实体"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReceiptStatus(str, Enum):
    """收货单状态"""
    DRAFT = "DRAFT"
    RECEIVED = "RECEIVED"
    PARTIAL = "PARTIAL"
    PARTIAL_COMPLETED = "PARTIAL_COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @classmethod
    def parse(cls, value: object) -> Optional["ReceiptStatus"]:
        """宽松解析状态值，无法识别时返回None"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            cleaned = value.strip().upper()
            for member in cls:
                if member.value == cleaned:
                    return member
        return None


STATUS_LABELS = {
    ReceiptStatus.DRAFT: "Draft",
    ReceiptStatus.RECEIVED: "Received",
    ReceiptStatus.PARTIAL: "Partially received",
    ReceiptStatus.PARTIAL_COMPLETED: "Partially completed",
    ReceiptStatus.CANCELLED: "Cancelled",
}


@dataclass
class Supplier:
    """供应商（外部系统维护，只读）"""
    id: str
    name: str = ""
    code: str = ""
    address: str = ""
    tax_code: str = ""
    phone_number: str = ""
    email: str = ""
    supplier_type: str = ""


@dataclass
class Warehouse:
    """仓库（外部系统维护，只读）"""
    id: str
    name: str = ""
    address: str = ""
    type: str = ""
    description: str = ""


@dataclass
class Product:
    """商品目录条目"""
    id: str
    name: str = ""
    code: str = ""
    sku: str = ""
    unit: str = ""
    cost_price: float = 0.0
    sell_price: float = 0.0


__all__ = [
    "ReceiptStatus",
    "STATUS_LABELS",
    "Supplier",
    "Warehouse",
    "Product",
]
