from __future__ import annotations

import httpx
import pytest

from goods_receipt.errors import TransportError
from goods_receipt.models import UploadSource
from goods_receipt.services import PurchaseOrderService
from goods_receipt.services.purchase_order_service import extract_upload_handle

from conftest import TEST_SETTINGS, mock_client


@pytest.mark.parametrize(
    "response, expected",
    [
        ({"id": "top-id", "filePath": "top/path", "data": {"id": "nested"}}, "top-id"),
        ({"filePath": "top/path", "data": {"id": "nested"}}, "top/path"),
        ({"data": "uploads/abc.pdf"}, "uploads/abc.pdf"),
        ({"data": {"id": "nested", "filePath": "nested/path"}}, "nested"),
        ({"data": {"filePath": "nested/path", "path": "p"}}, "nested/path"),
        ({"data": {"path": "p"}}, "p"),
        ({"data": 42}, "42"),
        ({"data": None}, None),
        ({}, None),
        ("not a dict", None),
    ],
)
def test_extract_upload_handle_order(response, expected):
    assert extract_upload_handle(response) == expected


@pytest.mark.asyncio
async def test_reference_lists_from_backend(po_service):
    orders = await po_service.list_orders()
    assert [o.order_number for o in orders] == ["PO-2024-003", "PO-2024-002", "PO-2024-001"]
    warehouses = await po_service.list_warehouses()
    assert {w.id for w in warehouses} == {"wh-1", "wh-2"}
    suppliers = await po_service.list_suppliers()
    assert [s.name for s in suppliers] == ["Hoang Minh Trading", "Saigon Packaging"]
    products = await po_service.list_products()
    assert len(products) == 4
    assert products[0].cost_price == 12000


@pytest.mark.asyncio
async def test_get_order_by_id_expands_order(po_service):
    detail = await po_service.get_order_by_id("po-1")
    assert detail.supplier.id == "sup-1"
    assert detail.warehouse.id == "wh-1"
    assert [(p.id, p.quantity, p.unit_price) for p in detail.products] == [
        ("prod-1", 100, 11500),
        ("prod-2", 50, 17500),
    ]
    assert detail.products[0].cost_price == 12000


@pytest.mark.asyncio
async def test_get_order_by_id_unknown_raises(po_service):
    with pytest.raises(TransportError) as exc_info:
        await po_service.get_order_by_id("po-404")
    assert exc_info.value.status == 404


@pytest.mark.asyncio
async def test_upload_document_to_backend(po_service, store):
    handle = await po_service.upload_document(
        UploadSource(name="delivery-note.pdf", content=b"%PDF-1.4", mime_type="application/pdf")
    )
    assert handle in store.uploads
    assert store.uploads[handle]["fileName"] == "delivery-note.pdf"
    assert store.uploads[handle]["size"] == 8


@pytest.mark.asyncio
async def test_upload_falls_back_to_generic_endpoint():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path.endswith("upload-document"):
            return httpx.Response(500, json={"message": "storage offline"})
        assert b'name="file"' in request.content
        return httpx.Response(200, json={"filePath": "uploads/scan.png"})

    async with mock_client(handler) as client:
        handle = await PurchaseOrderService(client, TEST_SETTINGS).upload_document(
            UploadSource(name="scan.png", content=b"png", mime_type="image/png")
        )

    assert handle == "uploads/scan.png"
    assert paths == ["/api/v1/user/upload-document", "/api/v1/user/uploads"]


@pytest.mark.asyncio
async def test_upload_without_handle_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True})

    async with mock_client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            await PurchaseOrderService(client, TEST_SETTINGS).upload_document(
                UploadSource(name="a.txt", content=b"a")
            )
    assert exc_info.value.message == "Document upload failed - no valid response"


def test_upload_source_from_path(tmp_path):
    path = tmp_path / "invoice.pdf"
    path.write_bytes(b"%PDF")
    source = UploadSource.from_path(path)
    assert source.name == "invoice.pdf"
    assert source.mime_type == "application/pdf"
    assert source.content == b"%PDF"
