"""序列化工具 - 接口响应解码和JSON编码"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import ShapeError
from .base import Product, ReceiptStatus, Supplier, Warehouse
from .purchase_order import PurchaseOrderDetail, PurchaseOrderProduct, PurchaseOrderRef
from .receipt import GoodsReceipt, LineItem, ReceiptDocument, ReceiptSummary

logger = logging.getLogger(__name__)


# ==================== JSON编码器 ====================

class ReceiptJSONEncoder(json.JSONEncoder):
    """自定义JSON编码器，处理dataclass、datetime、Enum等类型"""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return format_datetime(obj)
        elif isinstance(obj, Enum):
            return obj.value
        elif is_dataclass(obj):
            return asdict(obj)
        elif isinstance(obj, set):
            return list(obj)
        return super().default(obj)


def to_json(obj: Any, indent: int = 2) -> str:
    """将对象序列化为JSON字符串"""
    return json.dumps(obj, cls=ReceiptJSONEncoder, ensure_ascii=False, indent=indent)


def save_to_file(obj: Any, file_path: Union[str, Path]) -> None:
    """将对象保存到JSON文件"""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, cls=ReceiptJSONEncoder, ensure_ascii=False, indent=2)


def format_datetime(value: datetime) -> str:
    """格式化为接口使用的ISO-8601字符串（UTC以 ``Z`` 结尾）"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
    return value.isoformat(timespec="milliseconds")


# ==================== 响应信封解码 ====================

def normalize_collection(response: Any) -> List[Any]:
    """将列表接口的三种响应信封统一为列表

    支持：
    - 分页信封 ``{"data": {"content": [...]}}``
    - 扁平信封 ``{"data": [...]}``
    - 直接返回的列表 ``[...]``

    Raises:
        ShapeError: 其他任何结构
    """
    if isinstance(response, dict):
        data = response.get("data")
        if isinstance(data, dict) and isinstance(data.get("content"), list):
            return data["content"]
        if isinstance(data, list):
            return data
    elif isinstance(response, list):
        return response
    raise ShapeError(response)


def unwrap_data(response: Any) -> Any:
    """取出 ``{"data": ...}`` 信封中的数据，缺失时返回None"""
    if isinstance(response, dict):
        return response.get("data") or None
    return None


# ==================== 字段解析 ====================

def _parse_datetime(value: Any) -> Optional[datetime]:
    """解析ISO日期时间，无法解析时返回None"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.endswith("Z"):
            cleaned = cleaned[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(cleaned)
        except ValueError:
            logger.debug(f"无法解析日期: {value}")
            return None
    return None


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


# ==================== 反序列化函数 ====================

def from_dict_supplier(data: Any) -> Optional[Supplier]:
    """从字典创建Supplier对象"""
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        return None
    return Supplier(
        id=_as_str(data["id"]),
        name=_as_str(data.get("name")),
        code=_as_str(data.get("code")),
        address=_as_str(data.get("address")),
        tax_code=_as_str(data.get("taxCode")),
        phone_number=_as_str(data.get("phoneNumber")),
        email=_as_str(data.get("email")),
        supplier_type=_as_str(data.get("supplierType")),
    )


def from_dict_warehouse(data: Any) -> Optional[Warehouse]:
    """从字典创建Warehouse对象"""
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        return None
    return Warehouse(
        id=_as_str(data["id"]),
        name=_as_str(data.get("name")),
        address=_as_str(data.get("address")),
        type=_as_str(data.get("type")),
        description=_as_str(data.get("description")),
    )


def from_dict_product(data: Any) -> Optional[Product]:
    """从字典创建Product对象"""
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        return None
    return Product(
        id=_as_str(data["id"]),
        name=_as_str(data.get("name")),
        code=_as_str(data.get("code")),
        sku=_as_str(data.get("sku")),
        unit=_as_str(data.get("unit")),
        cost_price=_as_float(data.get("costPrice")),
        sell_price=_as_float(data.get("sellPrice")),
    )


def from_dict_purchase_order_ref(data: Any) -> Optional[PurchaseOrderRef]:
    """从字典创建PurchaseOrderRef对象"""
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        return None
    return PurchaseOrderRef(
        id=_as_str(data["id"]),
        order_number=_as_str(data.get("orderNumber")),
        order_date=_parse_datetime(data.get("orderDate")),
        order_status=_as_str(data.get("orderStatus")),
    )


def from_dict_purchase_order_product(data: Dict[str, Any]) -> PurchaseOrderProduct:
    """从字典创建PurchaseOrderProduct对象"""
    return PurchaseOrderProduct(
        id=_as_str(data.get("id")),
        name=_as_str(data.get("name")),
        quantity=_as_int(data.get("quantity")),
        unit_price=_as_float(data.get("unitPrice")),
        cost_price=_as_float(data.get("costPrice")),
        sku=_as_str(data.get("sku")),
        unit=_as_str(data.get("unit")),
    )


def from_dict_purchase_order_detail(data: Any) -> Optional[PurchaseOrderDetail]:
    """从字典创建PurchaseOrderDetail对象"""
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        return None
    products = [
        from_dict_purchase_order_product(item)
        for item in data.get("products") or []
        if isinstance(item, dict) and item.get("id") not in (None, "")
    ]
    return PurchaseOrderDetail(
        id=_as_str(data["id"]),
        order_number=_as_str(data.get("orderNumber")),
        order_date=_parse_datetime(data.get("orderDate")),
        order_status=_as_str(data.get("orderStatus")),
        supplier=from_dict_supplier(data.get("supplier")),
        warehouse=from_dict_warehouse(data.get("warehouse")),
        products=products,
        description=data.get("description"),
        note=_as_str(data.get("note")),
        sub_total=_as_float(data.get("subTotal")),
        tax_amount=_as_float(data.get("taxAmount")),
        total_amount=_as_float(data.get("totalAmount")),
    )


def from_dict_line_item(data: Dict[str, Any]) -> LineItem:
    """从字典创建LineItem对象

    后端返回的商品行带有嵌套的 ``product``，提交时则只有 ``productId``。
    """
    product = data.get("product") if isinstance(data.get("product"), dict) else {}
    return LineItem(
        product_id=_as_str(product.get("id") or data.get("productId")),
        product_name=_as_str(product.get("name")),
        quantity=_as_int(data.get("quantity"), 1),
        unit_price=_as_float(data.get("unitPrice")),
        location=_as_str(data.get("location")),
        stack=_as_int(data.get("stack"), 1),
        fee=_as_float(data.get("fee")),
        note=data.get("note") or None,
    )


def from_dict_receipt_document(data: Any) -> Optional[ReceiptDocument]:
    """从字典创建ReceiptDocument对象"""
    if isinstance(data, str) and data:
        return ReceiptDocument(id=data, file_name=data.rsplit("/", 1)[-1], file_path=data)
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        return None
    return ReceiptDocument(
        id=_as_str(data["id"]),
        file_name=_as_str(data.get("fileName")),
        file_path=_as_str(data.get("filePath")),
        uploaded_at=_parse_datetime(data.get("uploadedAt")),
    )


def from_dict_receipt_summary(data: Dict[str, Any]) -> ReceiptSummary:
    """从字典创建ReceiptSummary对象"""
    status = ReceiptStatus.parse(data.get("status"))
    if status is None:
        logger.warning(f"收货单 {data.get('receiptCode')} 状态无法识别: {data.get('status')}")
    return ReceiptSummary(
        id=_as_str(data.get("id")),
        receipt_code=_as_str(data.get("receiptCode")),
        receipt_date=_parse_datetime(data.get("receiptDate")),
        status=status,
        sub_total=_as_float(data.get("subTotal")),
        note=data.get("note"),
        purchase_order=from_dict_purchase_order_ref(data.get("purchaseOrder")),
        warehouse=from_dict_warehouse(data.get("warehouse")),
        supplier=from_dict_supplier(data.get("supplier")),
    )


def from_dict_goods_receipt(data: Dict[str, Any]) -> GoodsReceipt:
    """从字典创建GoodsReceipt对象"""
    documents = [
        doc for doc in (from_dict_receipt_document(item) for item in data.get("documents") or [])
        if doc is not None
    ]
    return GoodsReceipt(
        id=_as_str(data.get("id")),
        receipt_code=_as_str(data.get("receiptCode")),
        receipt_date=_parse_datetime(data.get("receiptDate")),
        status=ReceiptStatus.parse(data.get("status")),
        description=data.get("description"),
        note=data.get("note"),
        products=[
            from_dict_line_item(item)
            for item in data.get("products") or []
            if isinstance(item, dict)
        ],
        documents=documents,
        purchase_order=from_dict_purchase_order_ref(data.get("purchaseOrder")),
        warehouse=from_dict_warehouse(data.get("warehouse")),
        supplier=from_dict_supplier(data.get("supplier")),
        sub_total=_as_float(data.get("subTotal")),
        created_at=_parse_datetime(data.get("createdAt")),
        updated_at=_parse_datetime(data.get("updatedAt")),
    )


__all__ = [
    "ReceiptJSONEncoder",
    "format_datetime",
    "from_dict_goods_receipt",
    "from_dict_line_item",
    "from_dict_product",
    "from_dict_purchase_order_detail",
    "from_dict_purchase_order_ref",
    "from_dict_receipt_document",
    "from_dict_receipt_summary",
    "from_dict_supplier",
    "from_dict_warehouse",
    "normalize_collection",
    "save_to_file",
    "to_json",
    "unwrap_data",
]
