"""采购订单模型 - 收货单引用的订单及其商品行"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .base import Supplier, Warehouse


@dataclass
class PurchaseOrderRef:
    """采购订单引用（下拉选项/列表行）"""
    id: str
    order_number: str = ""
    order_date: Optional[datetime] = None
    order_status: str = ""


@dataclass
class PurchaseOrderProduct:
    """采购订单中的商品行"""
    id: str  # 商品ID，与收货单行的 product_id 对应
    name: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    cost_price: float = 0.0
    sku: str = ""
    unit: str = ""


@dataclass
class PurchaseOrderDetail(PurchaseOrderRef):
    """展开后的采购订单

    订单上的供应商/仓库为收货单的默认值，商品列表限定可选商品。
    """
    supplier: Optional[Supplier] = None
    warehouse: Optional[Warehouse] = None
    products: List[PurchaseOrderProduct] = field(default_factory=list)
    description: Optional[str] = None
    note: str = ""
    sub_total: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0

    def find_product(self, product_id: str) -> Optional[PurchaseOrderProduct]:
        """查找订单中对应商品行"""
        for product in self.products:
            if product.id == product_id:
                return product
        return None


__all__ = ["PurchaseOrderRef", "PurchaseOrderProduct", "PurchaseOrderDetail"]
