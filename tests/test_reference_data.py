from __future__ import annotations

import pytest

from goods_receipt.errors import TransportError
from goods_receipt.models import Product, PurchaseOrderDetail, PurchaseOrderProduct
from goods_receipt.services import ReferenceDataLoader, resolve_product_options

CATALOG = [Product(id="A"), Product(id="B"), Product(id="C")]


def test_order_products_restrict_options():
    detail = PurchaseOrderDetail(id="po", products=[PurchaseOrderProduct(id="B", quantity=3)])
    options = resolve_product_options(detail, CATALOG)
    assert [o.id for o in options] == ["B"]


@pytest.mark.parametrize("detail", [None, PurchaseOrderDetail(id="po", products=[])])
def test_without_order_products_the_catalog_is_used(detail):
    options = resolve_product_options(detail, CATALOG)
    assert [o.id for o in options] == ["A", "B", "C"]
    assert options is not CATALOG


@pytest.mark.asyncio
async def test_load_options_fetches_all_four(fake_po_service):
    options = await ReferenceDataLoader(fake_po_service).load_options()
    assert len(options.purchase_orders) == 2
    assert len(options.warehouses) == 2
    assert len(options.suppliers) == 2
    assert len(options.products) == 3
    assert {call[0] for call in fake_po_service.calls} == {
        "list_orders",
        "list_warehouses",
        "list_suppliers",
        "list_products",
    }


@pytest.mark.asyncio
async def test_single_failure_fails_aggregate(fake_po_service):
    fake_po_service.failing.add("list_suppliers")
    with pytest.raises(TransportError):
        await ReferenceDataLoader(fake_po_service).load_options()


@pytest.mark.asyncio
@pytest.mark.parametrize("po_id", [None, ""])
async def test_empty_order_id_skips_request(fake_po_service, po_id):
    assert await ReferenceDataLoader(fake_po_service).load_purchase_order_detail(po_id) is None
    assert fake_po_service.calls == []


@pytest.mark.asyncio
async def test_load_purchase_order_detail(fake_po_service):
    detail = await ReferenceDataLoader(fake_po_service).load_purchase_order_detail("po-001")
    assert detail.order_number == "PO-001"
    assert await ReferenceDataLoader(fake_po_service).load_purchase_order_detail("po-x") is None
