"""服务层 - 收货单仓储、采购订单服务、参考数据和状态机"""

from . import lifecycle
from .lifecycle import ReceiptAction, available_actions, can_approve, can_edit
from .purchase_order_service import PurchaseOrderService
from .receipt_repository import ReceiptRepository
from .reference_data import ReferenceDataLoader, ReferenceOptions, resolve_product_options

__all__ = [
    "lifecycle",
    "ReceiptAction",
    "available_actions",
    "can_approve",
    "can_edit",
    "PurchaseOrderService",
    "ReceiptRepository",
    "ReferenceDataLoader",
    "ReferenceOptions",
    "resolve_product_options",
]
