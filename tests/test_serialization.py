from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from goods_receipt.errors import ShapeError
from goods_receipt.models import LineItem, ReceiptStatus, compute_sub_total
from goods_receipt.models.serialization import (
    format_datetime,
    from_dict_goods_receipt,
    from_dict_purchase_order_detail,
    from_dict_receipt_summary,
    normalize_collection,
    to_json,
    unwrap_data,
)


@pytest.mark.parametrize(
    "response",
    [
        {"data": {"content": [{"id": "1"}, {"id": "2"}]}},
        {"data": [{"id": "1"}, {"id": "2"}]},
        [{"id": "1"}, {"id": "2"}],
    ],
)
def test_normalize_collection_accepts_known_envelopes(response):
    assert [row["id"] for row in normalize_collection(response)] == ["1", "2"]


@pytest.mark.parametrize(
    "response",
    [None, "oops", {"data": {"items": []}}, {"content": []}, {"data": "x"}],
)
def test_normalize_collection_rejects_unknown_shapes(response):
    with pytest.raises(ShapeError):
        normalize_collection(response)


def test_unwrap_data():
    assert unwrap_data({"data": {"id": "1"}}) == {"id": "1"}
    assert unwrap_data({"data": None}) is None
    assert unwrap_data([1, 2]) is None


def test_format_datetime_uses_utc_z_suffix():
    value = datetime(2024, 3, 1, 15, 30, tzinfo=timezone(timedelta(hours=7)))
    assert format_datetime(value) == "2024-03-01T08:30:00.000Z"
    assert format_datetime(datetime(2024, 3, 1, 8, 30)) == "2024-03-01T08:30:00.000"


def test_goods_receipt_decodes_nested_products_and_documents():
    receipt = from_dict_goods_receipt({
        "id": "gr-1",
        "receiptCode": "PN-2024-001",
        "receiptDate": "2024-03-08T09:30:00.000Z",
        "status": "draft",
        "subTotal": 500,
        "purchaseOrder": {"id": "po-1", "orderNumber": "PO-001"},
        "supplier": {"id": "sup-1", "name": "Supplier", "taxCode": "123"},
        "products": [
            {"product": {"id": "A", "name": "Product A"}, "quantity": 5, "unitPrice": 100, "fee": 3, "stack": 2},
            {"productId": "B", "quantity": "2", "unitPrice": "12.5"},
        ],
        "documents": [{"id": "doc-1", "fileName": "invoice.pdf"}, "uploads/x/scan.png", {"fileName": "no id"}],
    })

    assert receipt.status is ReceiptStatus.DRAFT
    assert receipt.receipt_date == datetime(2024, 3, 8, 9, 30, tzinfo=timezone.utc)
    assert receipt.supplier.tax_code == "123"
    assert [item.product_id for item in receipt.products] == ["A", "B"]
    assert receipt.products[0].product_name == "Product A"
    assert receipt.products[0].total_price == 500
    assert receipt.products[1].quantity == 2
    assert receipt.products[1].stack == 1
    assert receipt.computed_sub_total == 525
    assert [doc.id for doc in receipt.documents] == ["doc-1", "uploads/x/scan.png"]
    assert receipt.documents[1].file_name == "scan.png"


def test_summary_with_unknown_status_keeps_row():
    row = from_dict_receipt_summary({"id": "gr-9", "receiptCode": "PN-9", "status": "ARCHIVED"})
    assert row.id == "gr-9"
    assert row.status is None


def test_purchase_order_detail_skips_products_without_id():
    detail = from_dict_purchase_order_detail({
        "id": "po-1",
        "orderNumber": "PO-001",
        "supplier": {"id": "sup-1"},
        "warehouse": {"id": ""},
        "products": [{"id": "A", "quantity": 5, "unitPrice": 100}, {"name": "ghost"}],
    })
    assert detail.supplier.id == "sup-1"
    assert detail.warehouse is None
    assert [p.id for p in detail.products] == ["A"]
    assert detail.find_product("A").unit_price == 100
    assert detail.find_product("Z") is None
    assert from_dict_purchase_order_detail(None) is None


def test_fee_is_not_part_of_totals():
    items = [
        LineItem(product_id="A", quantity=5, unit_price=100.0, fee=25.0),
        LineItem(product_id="B", quantity=2, unit_price=10.0, fee=1.0),
    ]
    assert compute_sub_total(items) == 520.0


def test_to_json_encodes_dataclasses_and_enums():
    data = json.loads(to_json({"status": ReceiptStatus.PARTIAL, "item": LineItem(product_id="A")}))
    assert data["status"] == "PARTIAL"
    assert data["item"]["product_id"] == "A"
