"""采购订单服务客户端 - 订单、仓库、供应商、商品目录和附件上传"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ShapeError, TransportError
from ..models import Product, PurchaseOrderDetail, PurchaseOrderRef, Supplier, UploadSource, Warehouse
from ..models.serialization import (
    from_dict_product,
    from_dict_purchase_order_detail,
    from_dict_purchase_order_ref,
    from_dict_supplier,
    from_dict_warehouse,
    normalize_collection,
    unwrap_data,
)
from ..transport import request_json

logger = logging.getLogger(__name__)

UPLOAD_DOCUMENT_PATH = "api/v1/user/upload-document"
UPLOAD_FALLBACK_PATH = "api/v1/user/uploads"


def extract_upload_handle(response: Any) -> Optional[str]:
    """从上传响应中提取附件句柄

    依次尝试：顶层 ``id``、顶层 ``filePath``、字符串 ``data``、
    ``data.id``、``data.filePath``、``data.path``，最后将 ``data`` 转为字符串。
    """
    if not isinstance(response, dict):
        return None
    if response.get("id"):
        return str(response["id"])
    if response.get("filePath"):
        return str(response["filePath"])

    data = response.get("data")
    if isinstance(data, str) and data:
        return data
    if isinstance(data, dict):
        for key in ("id", "filePath", "path"):
            if data.get(key):
                return str(data[key])
    if data:
        return str(data)
    return None


class PurchaseOrderService:
    """采购订单相关接口（外部协作方）

    列表接口与收货单列表使用相同的信封解码规则。
    """

    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()

    async def _fetch_rows(self, path: str, label: str, **kwargs: Any) -> List[dict]:
        try:
            response = await request_json(self.client, "GET", path, **kwargs)
        except TransportError as e:
            logger.error(f"[采购订单服务] 获取{label}失败: {e}")
            raise
        try:
            rows = normalize_collection(response)
        except ShapeError:
            logger.warning(f"[采购订单服务] {label}返回了无法识别的结构: {response!r}")
            return []
        return [row for row in rows if isinstance(row, dict)]

    async def list_orders(self) -> List[PurchaseOrderRef]:
        rows = await self._fetch_rows(
            "api/v1/purchase-orders/get-orders",
            "采购订单",
            params={"page": 0, "size": self.settings.list_page_size, "sort": "orderDate,desc"},
        )
        return [order for order in map(from_dict_purchase_order_ref, rows) if order]

    async def get_order_by_id(self, purchase_order_id: str) -> Optional[PurchaseOrderDetail]:
        """获取展开后的采购订单，后端未返回数据时为None"""
        try:
            response = await request_json(
                self.client, "GET", "api/v1/purchase-orders/get-order-by-id",
                params={"purchaseOrderId": purchase_order_id},
            )
        except TransportError as e:
            logger.error(f"[采购订单服务] 获取采购订单详情失败 id={purchase_order_id}: {e}")
            raise
        return from_dict_purchase_order_detail(unwrap_data(response))

    async def list_warehouses(self) -> List[Warehouse]:
        rows = await self._fetch_rows("api/v1/warehouses/get-warehouses", "仓库")
        return [warehouse for warehouse in map(from_dict_warehouse, rows) if warehouse]

    async def list_suppliers(self) -> List[Supplier]:
        rows = await self._fetch_rows("api/v1/partners/get-suppliers", "供应商")
        return [supplier for supplier in map(from_dict_supplier, rows) if supplier]

    async def list_products(self) -> List[Product]:
        rows = await self._fetch_rows("api/v1/products/get-products", "商品")
        return [product for product in map(from_dict_product, rows) if product]

    async def _post_file(self, path: str, file: UploadSource) -> Any:
        files = {"file": (file.name, file.content, file.mime_type)}
        return await request_json(self.client, "POST", path, files=files)

    async def upload_document(self, file: UploadSource) -> str:
        """上传附件并返回句柄

        先尝试文档上传接口，失败后回退到通用上传接口。

        Raises:
            TransportError: 两个接口都失败，或响应中没有可用的句柄
        """
        logger.info(f"[采购订单服务] 上传附件: name={file.name}, type={file.mime_type}, size={len(file.content)}")
        try:
            response = await self._post_file(UPLOAD_DOCUMENT_PATH, file)
        except TransportError as e:
            logger.warning(f"[采购订单服务] 文档上传接口失败，改用通用上传接口: {e}")
            response = await self._post_file(UPLOAD_FALLBACK_PATH, file)

        handle = extract_upload_handle(response)
        if not handle:
            logger.error(f"[采购订单服务] 上传响应中没有可用的句柄: {response!r}")
            raise TransportError(
                status=None,
                message="Document upload failed - no valid response",
                details=response,
            )
        logger.info(f"[采购订单服务] 附件上传成功: {handle}")
        return handle


__all__ = ["PurchaseOrderService", "extract_upload_handle"]
