"""
收货单工作流
采购订单到货后的收货单录入、列表、详情与审批

Quickstart::

    import asyncio
    from goods_receipt import (
        PurchaseOrderService,
        ReceiptFormController,
        ReceiptRepository,
        ReferenceDataLoader,
        create_client,
    )

    async def main():
        async with create_client() as client:
            repository = ReceiptRepository(client)
            loader = ReferenceDataLoader(PurchaseOrderService(client))
            form = ReceiptFormController(repository, loader)
            await form.open()
            await form.select_purchase_order("po-1")
            form.add_line_item("prod-1", quantity=10)
            print(await form.submit(), form.last_notice)

    asyncio.run(main())

本地参考后端::

    uvicorn goods_receipt.server:app --port 8080
"""

from .config import Settings, get_settings, load_env
from .controllers import (
    FormEvent,
    FormEventKind,
    FormPhase,
    NavigationEvent,
    NavigationKind,
    Notice,
    NoticeLevel,
    ReceiptDetailLoader,
    ReceiptFormController,
    ReceiptListController,
)
from .errors import GoodsReceiptError, NotFoundError, ShapeError, TransportError, ValidationError
from .models import LineItem, ReceiptStatus, UploadSource
from .services import PurchaseOrderService, ReceiptRepository, ReferenceDataLoader
from .transport import create_client

load_env()

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "load_env",
    "create_client",
    "FormEvent",
    "FormEventKind",
    "FormPhase",
    "NavigationEvent",
    "NavigationKind",
    "Notice",
    "NoticeLevel",
    "ReceiptDetailLoader",
    "ReceiptFormController",
    "ReceiptListController",
    "GoodsReceiptError",
    "NotFoundError",
    "ShapeError",
    "TransportError",
    "ValidationError",
    "LineItem",
    "ReceiptStatus",
    "UploadSource",
    "PurchaseOrderService",
    "ReceiptRepository",
    "ReferenceDataLoader",
    "__version__",
]
