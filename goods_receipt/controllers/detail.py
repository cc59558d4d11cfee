"""收货单详情加载"""

from __future__ import annotations

from typing import FrozenSet, Optional

from ..errors import NotFoundError, TransportError
from ..models import GoodsReceipt
from ..services import lifecycle
from ..services.lifecycle import ReceiptAction
from ..services.receipt_repository import ReceiptRepository
from .events import NavigationEvent, NavigationKind, NoticeEmitter, NoticeLevel, NoticeListener


class ReceiptDetailLoader(NoticeEmitter):
    """加载并展示单个收货单；加载失败时视图关闭"""

    def __init__(self, repository: ReceiptRepository, on_notice: Optional[NoticeListener] = None):
        super().__init__(on_notice)
        self.repository = repository
        self.receipt: Optional[GoodsReceipt] = None
        self.closed = False
        self.closed_event: Optional[NavigationEvent] = None

    async def load(self, receipt_id: str) -> Optional[GoodsReceipt]:
        self.receipt = None
        self.closed = False
        self.closed_event = None
        try:
            receipt = await self.repository.get_by_id(receipt_id)
            if receipt is None:
                raise NotFoundError(receipt_id)
        except (TransportError, NotFoundError) as e:
            self.logger.error(f"[收货单详情] 加载 {receipt_id} 失败: {e}")
            self._notify(NoticeLevel.ERROR, "Load goods receipt", "Unable to load goods receipt details")
            self.closed = True
            self.closed_event = NavigationEvent(kind=NavigationKind.CLOSE, receipt_id=receipt_id)
            return None
        self.receipt = receipt
        return receipt

    @property
    def actions(self) -> FrozenSet[ReceiptAction]:
        if self.receipt is None:
            return frozenset()
        return lifecycle.available_actions(self.receipt.status)

    def _navigate(self, kind: NavigationKind, action: ReceiptAction) -> Optional[NavigationEvent]:
        if action not in self.actions:
            return None
        return NavigationEvent(
            kind=kind, receipt_id=self.receipt.id, receipt_code=self.receipt.receipt_code
        )

    def edit(self) -> Optional[NavigationEvent]:
        return self._navigate(NavigationKind.EDIT, ReceiptAction.EDIT)

    def approve(self) -> Optional[NavigationEvent]:
        """审批交给所属列表执行"""
        return self._navigate(NavigationKind.APPROVE, ReceiptAction.APPROVE)


__all__ = ["ReceiptDetailLoader"]
