"""收货单数据存储 - 参考后端使用的内存存储（可选JSON文件持久化）

存储结构（JSON文件）：
- receipts: 收货单原始记录，只保存采购订单/仓库/供应商/商品的ID
- uploads: 已上传附件的元数据

供应商、仓库、商品、采购订单来自演示数据，只读。
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import GoodsReceiptError, NotFoundError
from ..models import CreateReceiptPayload, ReceiptStatus, UpdateReceiptPayload
from ..models.serialization import format_datetime, save_to_file
from ..services import lifecycle
from . import seed

logger = logging.getLogger(__name__)

RECEIPT_CODE_PREFIX = "PN"


class StoreError(GoodsReceiptError):
    """存储层拒绝的请求（引用不存在、状态不允许等）"""

    def __init__(self, message: str, status_code: int = 400, code: str = "BAD_REQUEST"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


def _now() -> str:
    return format_datetime(datetime.now(timezone.utc))


def _normalize_date(value: str) -> str:
    """统一为UTC的ISO字符串，便于排序"""
    cleaned = (value or "").strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        raise StoreError(f"Invalid receipt date: {value}", code="INVALID_DATE")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return format_datetime(parsed)


class ReceiptStore:
    """收货单存储管理器"""

    def __init__(self, data_file: Optional[Union[str, Path]] = None, with_demo_receipts: bool = True):
        """初始化存储

        Args:
            data_file: JSON持久化文件路径，为空时只保存在内存中
            with_demo_receipts: 没有持久化数据时是否载入演示收货单
        """
        self.data_file = Path(data_file) if data_file else None

        self.suppliers: Dict[str, Dict[str, Any]] = {s["id"]: dict(s) for s in seed.SUPPLIERS}
        self.warehouses: Dict[str, Dict[str, Any]] = {w["id"]: dict(w) for w in seed.WAREHOUSES}
        self.products: Dict[str, Dict[str, Any]] = {p["id"]: dict(p) for p in seed.PRODUCTS}
        self.purchase_orders: Dict[str, Dict[str, Any]] = {o["id"]: o for o in seed.PURCHASE_ORDERS}

        self.receipts: Dict[str, Dict[str, Any]] = {}
        self.uploads: Dict[str, Dict[str, Any]] = {}

        if not self._load() and with_demo_receipts:
            for record in seed.RECEIPTS:
                stored = json.loads(json.dumps(record))
                stored.setdefault("documents", [])
                stored.setdefault("createdAt", stored["receiptDate"])
                stored.setdefault("updatedAt", stored["receiptDate"])
                self.receipts[stored["id"]] = stored

    # ==================== 持久化 ====================

    def _load(self) -> bool:
        """从JSON文件加载收货单和附件，文件不存在或损坏时返回False"""
        if self.data_file is None or not self.data_file.exists():
            return False
        with self.data_file.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError:
                logger.warning(f"[收货单存储] 数据文件损坏，忽略: {self.data_file}")
                return False
        if not isinstance(data, dict):
            return False
        self.receipts = {r["id"]: r for r in data.get("receipts", []) if isinstance(r, dict) and r.get("id")}
        self.uploads = {u["id"]: u for u in data.get("uploads", []) if isinstance(u, dict) and u.get("id")}
        logger.info(f"[收货单存储] 已加载 {len(self.receipts)} 个收货单")
        return True

    def _save(self) -> None:
        if self.data_file is None:
            return
        save_to_file(
            {"receipts": list(self.receipts.values()), "uploads": list(self.uploads.values())},
            self.data_file,
        )

    # ==================== 参考数据 ====================

    def list_suppliers(self) -> List[Dict[str, Any]]:
        return list(self.suppliers.values())

    def list_warehouses(self) -> List[Dict[str, Any]]:
        return list(self.warehouses.values())

    def list_products(self) -> List[Dict[str, Any]]:
        return list(self.products.values())

    def _order_ref(self, order: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": order["id"],
            "orderNumber": order["orderNumber"],
            "orderDate": order["orderDate"],
            "orderStatus": order["orderStatus"],
        }

    def list_purchase_orders(self) -> List[Dict[str, Any]]:
        """采购订单引用，按订单日期倒序"""
        orders = sorted(self.purchase_orders.values(), key=lambda o: o["orderDate"], reverse=True)
        return [self._order_ref(order) for order in orders]

    def get_purchase_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        """展开后的采购订单：嵌套供应商、仓库和商品"""
        order = self.purchase_orders.get(order_id)
        if order is None:
            return None
        products = []
        for line in order["products"]:
            product = self.products.get(line["id"], {"id": line["id"]})
            products.append({**product, "quantity": line["quantity"], "unitPrice": line["unitPrice"]})
        sub_total = sum(line["quantity"] * line["unitPrice"] for line in order["products"])
        return {
            **self._order_ref(order),
            "supplier": self.suppliers.get(order["supplierId"]),
            "warehouse": self.warehouses.get(order["warehouseId"]),
            "products": products,
            "description": order.get("description"),
            "note": order.get("note", ""),
            "subTotal": sub_total,
            "taxAmount": 0,
            "totalAmount": sub_total,
        }

    # ==================== 附件 ====================

    def save_upload(self, file_name: str, content_type: Optional[str], size: int) -> Dict[str, Any]:
        """记录上传的附件，返回附件元数据"""
        upload_id = uuid.uuid4().hex
        record = {
            "id": upload_id,
            "fileName": file_name,
            "filePath": f"uploads/{upload_id}/{file_name}",
            "contentType": content_type or "application/octet-stream",
            "size": size,
            "uploadedAt": _now(),
        }
        self.uploads[upload_id] = record
        self._save()
        logger.info(f"[收货单存储] 附件已保存: {file_name} ({size} bytes)")
        return record

    # ==================== 收货单 ====================

    def _expand_receipt(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """将原始记录展开为接口返回的结构"""
        order = self.purchase_orders.get(record.get("purchaseOrderId", ""))
        lines = []
        for index, line in enumerate(record.get("products", [])):
            product = self.products.get(line["productId"], {"id": line["productId"]})
            lines.append({
                "id": f"{record['id']}-{index + 1}",
                "product": product,
                "quantity": line["quantity"],
                "unitPrice": line["unitPrice"],
                "totalPrice": line["quantity"] * line["unitPrice"],
                "location": line.get("location", ""),
                "stack": line.get("stack", 1),
                "fee": line.get("fee", 0),
                "note": line.get("note"),
            })
        documents = [
            self.uploads.get(handle, {"id": handle, "fileName": handle, "filePath": handle})
            for handle in record.get("documents", [])
        ]
        return {
            "id": record["id"],
            "receiptCode": record["receiptCode"],
            "receiptDate": record["receiptDate"],
            "status": record["status"],
            "description": record.get("description"),
            "note": record.get("note"),
            "subTotal": sum(line["totalPrice"] for line in lines),
            "purchaseOrder": self._order_ref(order) if order else None,
            "warehouse": self.warehouses.get(record.get("warehouseId", "")),
            "supplier": self.suppliers.get(record.get("supplierId", "")),
            "products": lines,
            "documents": documents,
            "createdAt": record.get("createdAt"),
            "updatedAt": record.get("updatedAt"),
        }

    def _sorted_records(self) -> List[Dict[str, Any]]:
        return sorted(self.receipts.values(), key=lambda r: r["receiptDate"], reverse=True)

    def list_receipts(self) -> List[Dict[str, Any]]:
        """全部收货单，按收货日期倒序"""
        return [self._expand_receipt(record) for record in self._sorted_records()]

    def search_receipts(self, keyword: str) -> List[Dict[str, Any]]:
        """按单号、订单号、供应商、仓库、状态、备注模糊搜索（不区分大小写）"""
        needle = (keyword or "").strip().lower()
        results = []
        for receipt in self.list_receipts():
            haystack = [
                receipt["receiptCode"],
                receipt["status"],
                receipt.get("note") or "",
                receipt.get("description") or "",
                (receipt.get("purchaseOrder") or {}).get("orderNumber", ""),
                (receipt.get("supplier") or {}).get("name", ""),
                (receipt.get("warehouse") or {}).get("name", ""),
            ]
            if not needle or any(needle in str(value).lower() for value in haystack):
                results.append(receipt)
        return results

    def get_receipt(self, receipt_id: str) -> Optional[Dict[str, Any]]:
        record = self.receipts.get(receipt_id)
        return self._expand_receipt(record) if record else None

    def _next_code(self, year: int) -> str:
        pattern = re.compile(rf"^{RECEIPT_CODE_PREFIX}-{year}-(\d+)$")
        highest = 0
        for record in self.receipts.values():
            match = pattern.match(record.get("receiptCode", ""))
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{RECEIPT_CODE_PREFIX}-{year}-{highest + 1:03d}"

    def _check_references(self, payload: CreateReceiptPayload) -> None:
        if payload.purchaseOrderId not in self.purchase_orders:
            raise StoreError(f"Purchase order {payload.purchaseOrderId} not found", 404, "PURCHASE_ORDER_NOT_FOUND")
        if payload.warehouseId not in self.warehouses:
            raise StoreError(f"Warehouse {payload.warehouseId} not found", 404, "WAREHOUSE_NOT_FOUND")
        if payload.supplierId not in self.suppliers:
            raise StoreError(f"Supplier {payload.supplierId} not found", 404, "SUPPLIER_NOT_FOUND")
        for line in payload.products:
            if line.productId not in self.products:
                raise StoreError(f"Product {line.productId} not found", 404, "PRODUCT_NOT_FOUND")
        if payload.status is not ReceiptStatus.DRAFT:
            raise StoreError("Goods receipts can only be saved as drafts", 400, "INVALID_STATUS")

    def _apply_payload(self, record: Dict[str, Any], payload: CreateReceiptPayload) -> None:
        record.update({
            "receiptDate": _normalize_date(payload.receiptDate),
            "status": payload.status.value,
            "purchaseOrderId": payload.purchaseOrderId,
            "warehouseId": payload.warehouseId,
            "supplierId": payload.supplierId,
            "description": payload.description,
            "note": payload.note,
            "documents": list(payload.documents),
            # 金额由后端按数量和单价重新计算
            "products": [
                {
                    "productId": line.productId,
                    "quantity": line.quantity,
                    "unitPrice": line.unitPrice,
                    "location": line.location,
                    "stack": line.stack,
                    "fee": line.fee,
                    "note": line.note,
                }
                for line in payload.products
            ],
            "updatedAt": _now(),
        })

    def create_receipt(self, payload: CreateReceiptPayload) -> Dict[str, Any]:
        """创建收货单并分配单号"""
        self._check_references(payload)
        receipt_id = uuid.uuid4().hex
        now = _now()
        record: Dict[str, Any] = {
            "id": receipt_id,
            "receiptCode": self._next_code(datetime.now(timezone.utc).year),
            "createdAt": now,
        }
        self._apply_payload(record, payload)
        self.receipts[receipt_id] = record
        self._save()
        logger.info(f"[收货单存储] 创建收货单 {record['receiptCode']}")
        return self._expand_receipt(record)

    def _require(self, receipt_id: str) -> Dict[str, Any]:
        record = self.receipts.get(receipt_id)
        if record is None:
            raise NotFoundError(receipt_id)
        return record

    def update_receipt(self, payload: UpdateReceiptPayload) -> Dict[str, Any]:
        """更新草稿收货单；单号和创建时间保持不变"""
        record = self._require(payload.id)
        if not lifecycle.can_edit(record["status"]):
            raise StoreError("Only draft goods receipts can be edited", 409, "INVALID_STATUS")
        self._check_references(payload)
        self._apply_payload(record, payload)
        self._save()
        logger.info(f"[收货单存储] 更新收货单 {record['receiptCode']}")
        return self._expand_receipt(record)

    def _approval_status(self, record: Dict[str, Any]) -> ReceiptStatus:
        """订单中每个商品的数量都被本收货单覆盖时为RECEIVED，否则为PARTIAL"""
        order = self.purchase_orders.get(record.get("purchaseOrderId", ""))
        if order is None:
            return ReceiptStatus.RECEIVED
        received: Dict[str, int] = {}
        for line in record.get("products", []):
            received[line["productId"]] = received.get(line["productId"], 0) + line["quantity"]
        for line in order["products"]:
            if received.get(line["id"], 0) < line["quantity"]:
                return ReceiptStatus.PARTIAL
        return ReceiptStatus.RECEIVED

    def approve_receipt(self, receipt_id: str) -> Dict[str, Any]:
        """审批草稿收货单"""
        record = self._require(receipt_id)
        target = self._approval_status(record)
        if not lifecycle.can_transition(record["status"], target):
            raise StoreError("Only draft goods receipts can be approved", 409, "INVALID_STATUS")
        record["status"] = target.value
        record["updatedAt"] = _now()
        self._save()
        logger.info(f"[收货单存储] 审批收货单 {record['receiptCode']} -> {target.value}")
        return self._expand_receipt(record)


__all__ = ["ReceiptStore", "StoreError"]
