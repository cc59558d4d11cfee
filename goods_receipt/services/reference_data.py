"""参考数据加载 - 收货单表单需要的下拉选项和采购订单详情"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..models import Product, PurchaseOrderDetail, PurchaseOrderProduct, PurchaseOrderRef, Supplier, Warehouse
from .purchase_order_service import PurchaseOrderService

logger = logging.getLogger(__name__)

ProductOption = Union[Product, PurchaseOrderProduct]


@dataclass
class ReferenceOptions:
    """表单下拉选项快照（单次表单会话内只读）"""
    purchase_orders: List[PurchaseOrderRef] = field(default_factory=list)
    warehouses: List[Warehouse] = field(default_factory=list)
    suppliers: List[Supplier] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)


def resolve_product_options(
    detail: Optional[PurchaseOrderDetail],
    catalog: List[Product],
) -> List[ProductOption]:
    """确定可选商品：订单有商品时仅限订单商品，否则使用完整目录"""
    if detail is not None and detail.products:
        return list(detail.products)
    return list(catalog)


class ReferenceDataLoader:
    """参考数据加载器"""

    def __init__(self, service: PurchaseOrderService):
        self.service = service

    async def load_options(self) -> ReferenceOptions:
        """并发加载四类选项；任何一个失败则整体失败"""
        purchase_orders, warehouses, suppliers, products = await asyncio.gather(
            self.service.list_orders(),
            self.service.list_warehouses(),
            self.service.list_suppliers(),
            self.service.list_products(),
        )
        logger.info(
            f"[参考数据] 订单 {len(purchase_orders)}，仓库 {len(warehouses)}，"
            f"供应商 {len(suppliers)}，商品 {len(products)}"
        )
        return ReferenceOptions(
            purchase_orders=purchase_orders,
            warehouses=warehouses,
            suppliers=suppliers,
            products=products,
        )

    async def load_purchase_order_detail(self, po_id: Optional[str]) -> Optional[PurchaseOrderDetail]:
        """加载采购订单详情；空ID返回None，表示使用完整商品目录"""
        if not po_id:
            return None
        detail = await self.service.get_order_by_id(po_id)
        if detail is None:
            logger.warning(f"[参考数据] 采购订单 {po_id} 未返回数据")
        return detail


__all__ = [
    "ProductOption",
    "ReferenceDataLoader",
    "ReferenceOptions",
    "resolve_product_options",
]
