"""收货单模型 - 收货单、商品行、附件"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .base import ReceiptStatus, Supplier, Warehouse
from .purchase_order import PurchaseOrderRef


@dataclass
class LineItem:
    """收货单商品行

    ``total_price`` 始终由数量和单价推导，搬运费 ``fee`` 单独记录，不计入合计。
    """
    product_id: str
    quantity: int = 1
    unit_price: float = 0.0
    location: str = ""  # 存放位置
    stack: int = 1  # 堆垛/批次号
    fee: float = 0.0  # 搬运费
    note: Optional[str] = None
    product_name: str = ""

    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price


def compute_sub_total(items: List[LineItem]) -> float:
    """收货单合计 = 各商品行金额之和"""
    return sum(item.total_price for item in items)


@dataclass
class ReceiptDocument:
    """已保存在收货单上的附件"""
    id: str
    file_name: str = ""
    file_path: str = ""
    uploaded_at: Optional[datetime] = None


@dataclass
class AttachedDocument:
    """草稿中的附件：只保存上传返回的句柄和显示名称"""
    handle: str
    name: str = ""


@dataclass
class UploadSource:
    """待上传的文件"""
    name: str
    content: bytes
    mime_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadSource":
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            content=file_path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )


@dataclass
class ReceiptSummary:
    """列表中的收货单行"""
    id: str
    receipt_code: str = ""
    receipt_date: Optional[datetime] = None
    status: Optional[ReceiptStatus] = None
    sub_total: float = 0.0
    note: Optional[str] = None
    purchase_order: Optional[PurchaseOrderRef] = None
    warehouse: Optional[Warehouse] = None
    supplier: Optional[Supplier] = None


@dataclass
class GoodsReceipt:
    """收货单完整数据"""
    id: str
    receipt_code: str = ""
    receipt_date: Optional[datetime] = None
    status: Optional[ReceiptStatus] = None
    description: Optional[str] = None
    note: Optional[str] = None
    products: List[LineItem] = field(default_factory=list)
    documents: List[ReceiptDocument] = field(default_factory=list)
    purchase_order: Optional[PurchaseOrderRef] = None
    warehouse: Optional[Warehouse] = None
    supplier: Optional[Supplier] = None
    sub_total: float = 0.0  # 后端返回的合计
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def computed_sub_total(self) -> float:
        return compute_sub_total(self.products)


__all__ = [
    "AttachedDocument",
    "GoodsReceipt",
    "LineItem",
    "ReceiptDocument",
    "ReceiptSummary",
    "UploadSource",
    "compute_sub_total",
]
