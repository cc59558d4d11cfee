# tests/conftest.py
from __future__ import annotations

import asyncio
from typing import AsyncGenerator, Dict, List, Optional, Set

import httpx
import pytest
import pytest_asyncio

from goods_receipt.config import Settings
from goods_receipt.errors import TransportError
from goods_receipt.models import (
    GoodsReceipt,
    LineItem,
    Product,
    PurchaseOrderDetail,
    PurchaseOrderProduct,
    PurchaseOrderRef,
    ReceiptStatus,
    ReceiptSummary,
    Supplier,
    UploadSource,
    Warehouse,
)
from goods_receipt.server import create_app
from goods_receipt.services import PurchaseOrderService, ReceiptRepository, ReferenceDataLoader
from goods_receipt.storage import ReceiptStore
from goods_receipt.transport import create_client

TEST_SETTINGS = Settings(api_base_url="http://testserver/", search_debounce_ms=20)


# =========================================
# 参考后端 + ASGI 客户端
# =========================================
@pytest.fixture
def settings() -> Settings:
    return TEST_SETTINGS


@pytest.fixture
def store() -> ReceiptStore:
    """内存存储，带演示数据（gr-1 RECEIVED / gr-2 PARTIAL / gr-3 DRAFT）"""
    return ReceiptStore()


@pytest.fixture
def app(store: ReceiptStore):
    return create_app(store)


@pytest_asyncio.fixture
async def client(app, settings) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with create_client(settings, transport=httpx.ASGITransport(app=app)) as cli:
        yield cli


@pytest.fixture
def repository(client, settings) -> ReceiptRepository:
    return ReceiptRepository(client, settings)


@pytest.fixture
def po_service(client, settings) -> PurchaseOrderService:
    return PurchaseOrderService(client, settings)


@pytest.fixture
def loader(po_service) -> ReferenceDataLoader:
    return ReferenceDataLoader(po_service)


def mock_client(handler, settings: Settings = TEST_SETTINGS) -> httpx.AsyncClient:
    """用 httpx.MockTransport 构造客户端，便于模拟异常响应"""
    return create_client(settings, transport=httpx.MockTransport(handler))


# =========================================
# 控制器测试用的进程内替身
# =========================================
def summary(receipt_id: str, code: str, status: ReceiptStatus = ReceiptStatus.DRAFT) -> ReceiptSummary:
    return ReceiptSummary(id=receipt_id, receipt_code=code, status=status)


class FakeRepository:
    """记录调用的收货单仓储替身"""

    def __init__(self, receipts: Optional[List[ReceiptSummary]] = None):
        self.receipts: List[ReceiptSummary] = list(receipts or [])
        self.details: Dict[str, GoodsReceipt] = {}
        self.calls: List[tuple] = []
        self.failing: Set[str] = set()
        self.payloads: List = []
        # 设置后 create/update 会等待该事件，用于模拟进行中的提交
        self.gate: Optional[asyncio.Event] = None

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise TransportError(status=500, message=f"{name} exploded")

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def list_receipts(self) -> List[ReceiptSummary]:
        self._record("list_receipts")
        return list(self.receipts)

    async def search_receipts(self, keyword: str) -> List[ReceiptSummary]:
        self._record("search_receipts", keyword)
        return [r for r in self.receipts if keyword.lower() in r.receipt_code.lower()]

    async def get_by_id(self, receipt_id: str) -> Optional[GoodsReceipt]:
        self._record("get_by_id", receipt_id)
        return self.details.get(receipt_id)

    async def create(self, payload):
        self._record("create")
        if self.gate is not None:
            await self.gate.wait()
        self.payloads.append(payload)
        return {"success": True, "data": {"id": "new-1"}}

    async def update(self, payload):
        self._record("update", payload.id)
        if self.gate is not None:
            await self.gate.wait()
        self.payloads.append(payload)
        return {"success": True, "data": {"id": payload.id}}

    async def change_status(self, receipt_id: str):
        self._record("change_status", receipt_id)
        for row in self.receipts:
            if row.id == receipt_id:
                row.status = ReceiptStatus.RECEIVED
        return {"success": True}


class FakePurchaseOrderService:
    """采购订单服务替身"""

    def __init__(self):
        self.suppliers = [Supplier(id="sup-a", name="Supplier A"), Supplier(id="sup-b", name="Supplier B")]
        self.warehouses = [Warehouse(id="wh-a", name="Warehouse A"), Warehouse(id="wh-b", name="Warehouse B")]
        self.products = [
            Product(id="A", name="Product A", cost_price=90.0),
            Product(id="B", name="Product B", cost_price=40.0),
            Product(id="C", name="Product C", cost_price=0.0),
        ]
        self.details: Dict[str, PurchaseOrderDetail] = {
            "po-001": PurchaseOrderDetail(
                id="po-001",
                order_number="PO-001",
                supplier=self.suppliers[0],
                warehouse=self.warehouses[0],
                products=[PurchaseOrderProduct(id="A", name="Product A", quantity=5, unit_price=100.0)],
            ),
            "po-empty": PurchaseOrderDetail(
                id="po-empty",
                order_number="PO-EMPTY",
                supplier=self.suppliers[1],
                warehouse=self.warehouses[1],
                products=[],
            ),
        }
        self.failing: Set[str] = set()
        self.calls: List[tuple] = []
        self.uploaded: List[UploadSource] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise TransportError(status=502, message=f"{name} unavailable")

    async def list_orders(self) -> List[PurchaseOrderRef]:
        self._record("list_orders")
        return [PurchaseOrderRef(id=d.id, order_number=d.order_number) for d in self.details.values()]

    async def get_order_by_id(self, purchase_order_id: str) -> Optional[PurchaseOrderDetail]:
        self._record("get_order_by_id", purchase_order_id)
        return self.details.get(purchase_order_id)

    async def list_warehouses(self) -> List[Warehouse]:
        self._record("list_warehouses")
        return list(self.warehouses)

    async def list_suppliers(self) -> List[Supplier]:
        self._record("list_suppliers")
        return list(self.suppliers)

    async def list_products(self) -> List[Product]:
        self._record("list_products")
        return list(self.products)

    async def upload_document(self, file: UploadSource) -> str:
        self._record("upload_document", file.name)
        self.uploaded.append(file)
        return f"handle-{len(self.uploaded)}"


def draft_receipt(receipt_id: str = "gr-10", status: ReceiptStatus = ReceiptStatus.DRAFT) -> GoodsReceipt:
    """PO-001 上的已保存收货单：A x 5 @ 100"""
    return GoodsReceipt(
        id=receipt_id,
        receipt_code="PN-2024-010",
        status=status,
        purchase_order=PurchaseOrderRef(id="po-001", order_number="PO-001"),
        warehouse=Warehouse(id="wh-b", name="Warehouse B"),
        supplier=Supplier(id="sup-a", name="Supplier A"),
        products=[LineItem(product_id="A", quantity=5, unit_price=100.0, location="R1")],
        sub_total=500.0,
    )


@pytest.fixture
def fake_repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def fake_po_service() -> FakePurchaseOrderService:
    return FakePurchaseOrderService()
