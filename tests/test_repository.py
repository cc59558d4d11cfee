from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from goods_receipt.errors import TransportError
from goods_receipt.models import CreateReceiptPayload, ReceiptProductPayload, ReceiptStatus, UpdateReceiptPayload
from goods_receipt.services import ReceiptRepository

from conftest import TEST_SETTINGS, mock_client

pytestmark = pytest.mark.asyncio


def make_payload(**overrides) -> CreateReceiptPayload:
    fields = dict(
        purchaseOrderId="po-1",
        warehouseId="wh-1",
        supplierId="sup-1",
        documents=[],
        products=[
            ReceiptProductPayload(productId="prod-1", quantity=40, unitPrice=11500, totalPrice=460000, location="A-03"),
        ],
        note="Morning delivery",
        receiptDate="2030-01-02T03:04:05.000Z",
        subTotal=460000,
    )
    fields.update(overrides)
    return CreateReceiptPayload(**fields)


async def test_list_preserves_backend_order(repository):
    receipts = await repository.list_receipts()
    assert [r.receipt_code for r in receipts] == ["PN-2024-003", "PN-2024-002", "PN-2024-001"]
    assert receipts[0].status is ReceiptStatus.DRAFT
    assert receipts[0].supplier.name == "Saigon Packaging"
    assert receipts[0].purchase_order.order_number == "PO-2024-002"


async def test_search_matches_supplier_name(repository):
    receipts = await repository.search_receipts("saigon")
    assert {r.id for r in receipts} == {"gr-2", "gr-3"}
    assert await repository.search_receipts("no such thing") == []


async def test_get_by_id(repository):
    receipt = await repository.get_by_id("gr-2")
    assert receipt.receipt_code == "PN-2024-002"
    assert receipt.status is ReceiptStatus.PARTIAL
    assert receipt.products[0].product_name == "Pallet"
    assert receipt.products[0].fee == 50000
    assert receipt.sub_total == receipt.computed_sub_total == 12 * 240000


async def test_get_by_id_missing_returns_none(repository):
    assert await repository.get_by_id("missing") is None


async def test_create_update_and_approve_round_trip(repository):
    result = await repository.create(make_payload())
    created_id = result["data"]["id"]
    year = datetime.now(timezone.utc).year
    assert result["data"]["receiptCode"] == f"PN-{year}-001"

    receipts = await repository.list_receipts()
    assert receipts[0].id == created_id
    assert receipts[0].sub_total == 460000

    await repository.update(UpdateReceiptPayload(id=created_id, **make_payload(note="Changed").model_dump()))
    updated = await repository.get_by_id(created_id)
    assert updated.note == "Changed"
    assert updated.status is ReceiptStatus.DRAFT

    await repository.change_status(created_id)
    approved = await repository.get_by_id(created_id)
    # 订单 po-1 订购 100 个 prod-1 和 50 卷 prod-2，本单只覆盖一部分
    assert approved.status is ReceiptStatus.PARTIAL


async def test_backend_message_is_passed_through(repository):
    with pytest.raises(TransportError) as exc_info:
        await repository.change_status("gr-1")
    assert exc_info.value.status == 409
    assert exc_info.value.message == "Only draft goods receipts can be approved"

    with pytest.raises(TransportError) as exc_info:
        await repository.create(make_payload(warehouseId="wh-404"))
    assert exc_info.value.status == 404
    assert exc_info.value.message == "Warehouse wh-404 not found"


async def test_requests_use_expected_paths_and_params():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    async with mock_client(handler) as client:
        repository = ReceiptRepository(client, TEST_SETTINGS)
        await repository.list_receipts()
        await repository.search_receipts("PN-2024")
        await repository.change_status("gr-7")

    list_request, search_request, status_request = seen
    assert list_request.url.path == "/api/v1/goods-receipts/get-goods-receipts"
    assert dict(list_request.url.params) == {"page": "0", "size": "100", "sort": "receiptDate,desc"}
    assert search_request.url.path == "/api/v1/goods-receipts/search-goods-receipts"
    assert search_request.url.params["search"] == "PN-2024"
    assert status_request.method == "POST"
    assert status_request.url.path == "/api/v1/goods-receipts/change-goods-receipt-status"
    assert json.loads(status_request.content) == {"id": "gr-7"}


async def test_unknown_list_shape_degrades_to_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"rows": [{"id": "1"}]}})

    async with mock_client(handler) as client:
        repository = ReceiptRepository(client, TEST_SETTINGS)
        assert await repository.list_receipts() == []
        assert await repository.search_receipts("x") == []


async def test_bare_list_response_is_accepted():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "gr-1", "receiptCode": "PN-1", "status": "RECEIVED"}])

    async with mock_client(handler) as client:
        receipts = await ReceiptRepository(client, TEST_SETTINGS).list_receipts()
    assert [r.receipt_code for r in receipts] == ["PN-1"]


async def test_create_body_omits_empty_optionals():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"data": {"id": "x"}})

    async with mock_client(handler) as client:
        await ReceiptRepository(client, TEST_SETTINGS).create(make_payload(note=None))

    body = bodies[0]
    assert "note" not in body
    assert "description" not in body
    assert body["status"] == "DRAFT"
    assert body["products"][0]["totalPrice"] == 460000
