"""演示数据 - 参考后端启动时载入的供应商、仓库、商品、采购订单和收货单"""

from __future__ import annotations

from typing import Any, Dict, List

SUPPLIERS: List[Dict[str, Any]] = [
    {
        "id": "sup-1",
        "name": "Hoang Minh Trading",
        "code": "NCC001",
        "address": "12 Nguyen Trai, Ha Noi",
        "taxCode": "0101234567",
        "phoneNumber": "0241234567",
        "email": "sales@hoangminh.example",
        "supplierType": "DISTRIBUTOR",
    },
    {
        "id": "sup-2",
        "name": "Saigon Packaging",
        "code": "NCC002",
        "address": "88 Le Loi, Ho Chi Minh City",
        "taxCode": "0307654321",
        "phoneNumber": "0287654321",
        "email": "contact@sgpack.example",
        "supplierType": "MANUFACTURER",
    },
]

WAREHOUSES: List[Dict[str, Any]] = [
    {"id": "wh-1", "name": "Main Warehouse", "address": "Lot A1, Thang Long IP", "type": "GENERAL", "description": ""},
    {"id": "wh-2", "name": "Cold Storage", "address": "Lot C4, Tan Thuan EPZ", "type": "COLD", "description": "2-8 C"},
]

PRODUCTS: List[Dict[str, Any]] = [
    {"id": "prod-1", "name": "Carton box 40x30", "code": "SP001", "sku": "BOX-4030", "unit": "pcs", "costPrice": 12000, "sellPrice": 15000},
    {"id": "prod-2", "name": "Packing tape", "code": "SP002", "sku": "TAPE-48", "unit": "roll", "costPrice": 18000, "sellPrice": 22000},
    {"id": "prod-3", "name": "Bubble wrap", "code": "SP003", "sku": "WRAP-100", "unit": "roll", "costPrice": 95000, "sellPrice": 120000},
    {"id": "prod-4", "name": "Pallet", "code": "SP004", "sku": "PAL-1210", "unit": "pcs", "costPrice": 250000, "sellPrice": 300000},
]

PURCHASE_ORDERS: List[Dict[str, Any]] = [
    {
        "id": "po-1",
        "orderNumber": "PO-2024-001",
        "orderDate": "2024-03-01T08:00:00.000Z",
        "orderStatus": "APPROVED",
        "supplierId": "sup-1",
        "warehouseId": "wh-1",
        "description": "Packaging materials for Q2",
        "note": "",
        "products": [
            {"id": "prod-1", "quantity": 100, "unitPrice": 11500},
            {"id": "prod-2", "quantity": 50, "unitPrice": 17500},
        ],
    },
    {
        "id": "po-2",
        "orderNumber": "PO-2024-002",
        "orderDate": "2024-03-05T08:00:00.000Z",
        "orderStatus": "APPROVED",
        "supplierId": "sup-2",
        "warehouseId": "wh-2",
        "description": "Pallets",
        "note": "Deliver before noon",
        "products": [
            {"id": "prod-4", "quantity": 20, "unitPrice": 240000},
        ],
    },
    {
        # 没有商品行的订单，表单回退到完整商品目录
        "id": "po-3",
        "orderNumber": "PO-2024-003",
        "orderDate": "2024-03-10T08:00:00.000Z",
        "orderStatus": "APPROVED",
        "supplierId": "sup-1",
        "warehouseId": "wh-1",
        "description": "Open order",
        "note": "",
        "products": [],
    },
]

RECEIPTS: List[Dict[str, Any]] = [
    {
        "id": "gr-1",
        "receiptCode": "PN-2024-001",
        "receiptDate": "2024-03-08T09:30:00.000Z",
        "status": "RECEIVED",
        "purchaseOrderId": "po-1",
        "warehouseId": "wh-1",
        "supplierId": "sup-1",
        "description": "First delivery",
        "note": "",
        "products": [
            {"productId": "prod-1", "quantity": 100, "unitPrice": 11500, "location": "A-01", "stack": 1, "fee": 0},
            {"productId": "prod-2", "quantity": 50, "unitPrice": 17500, "location": "A-02", "stack": 1, "fee": 0},
        ],
    },
    {
        "id": "gr-2",
        "receiptCode": "PN-2024-002",
        "receiptDate": "2024-03-12T14:00:00.000Z",
        "status": "PARTIAL",
        "purchaseOrderId": "po-2",
        "warehouseId": "wh-2",
        "supplierId": "sup-2",
        "description": "",
        "note": "Remaining pallets next week",
        "products": [
            {"productId": "prod-4", "quantity": 12, "unitPrice": 240000, "location": "C-01", "stack": 2, "fee": 50000},
        ],
    },
    {
        "id": "gr-3",
        "receiptCode": "PN-2024-003",
        "receiptDate": "2024-03-15T10:15:00.000Z",
        "status": "DRAFT",
        "purchaseOrderId": "po-2",
        "warehouseId": "wh-2",
        "supplierId": "sup-2",
        "description": "Second pallet delivery",
        "note": "",
        "products": [
            {"productId": "prod-4", "quantity": 8, "unitPrice": 240000, "location": "C-02", "stack": 1, "fee": 0},
        ],
    },
]


__all__ = ["PRODUCTS", "PURCHASE_ORDERS", "RECEIPTS", "SUPPLIERS", "WAREHOUSES"]
