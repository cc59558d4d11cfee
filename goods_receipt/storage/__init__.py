"""存储模块 - 参考后端的收货单数据"""

from .receipt_store import ReceiptStore, StoreError

__all__ = ["ReceiptStore", "StoreError"]
