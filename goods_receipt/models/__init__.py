"""数据模型模块 - 收货单工作流的核心数据结构

目录结构：
- base.py: 状态枚举和参考实体（供应商、仓库、商品）
- purchase_order.py: 采购订单引用和展开后的订单
- receipt.py: 收货单、商品行、附件
- payload.py: 创建/更新/审批的请求体
- serialization.py: 响应解码和JSON编码
"""

# 基础模型
from .base import STATUS_LABELS, Product, ReceiptStatus, Supplier, Warehouse

# 采购订单
from .purchase_order import PurchaseOrderDetail, PurchaseOrderProduct, PurchaseOrderRef

# 收货单
from .receipt import (
    AttachedDocument,
    GoodsReceipt,
    LineItem,
    ReceiptDocument,
    ReceiptSummary,
    UploadSource,
    compute_sub_total,
)

# 请求体
from .payload import (
    ChangeStatusRequest,
    CreateReceiptPayload,
    ReceiptProductPayload,
    UpdateReceiptPayload,
)

__all__ = [
    # 基础模型
    "ReceiptStatus",
    "STATUS_LABELS",
    "Supplier",
    "Warehouse",
    "Product",
    # 采购订单
    "PurchaseOrderRef",
    "PurchaseOrderProduct",
    "PurchaseOrderDetail",
    # 收货单
    "GoodsReceipt",
    "ReceiptSummary",
    "LineItem",
    "ReceiptDocument",
    "AttachedDocument",
    "UploadSource",
    "compute_sub_total",
    # 请求体
    "CreateReceiptPayload",
    "UpdateReceiptPayload",
    "ReceiptProductPayload",
    "ChangeStatusRequest",
]
