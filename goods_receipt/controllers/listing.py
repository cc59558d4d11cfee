"""收货单列表控制器 - 加载、防抖搜索、展开、审批"""

from __future__ import annotations

from typing import FrozenSet, List, Optional

from ..config import get_settings
from ..errors import TransportError
from ..models import ReceiptSummary
from ..services import lifecycle
from ..services.lifecycle import ReceiptAction
from ..services.receipt_repository import ReceiptRepository
from .debounce import Debouncer
from .events import NavigationEvent, NavigationKind, NoticeEmitter, NoticeLevel, NoticeListener


class ReceiptListController(NoticeEmitter):
    """收货单列表

    ``receipts`` 保持后端返回的顺序；搜索关键字变化后等待防抖时间再请求。
    """

    def __init__(
        self,
        repository: ReceiptRepository,
        *,
        debounce_seconds: Optional[float] = None,
        on_notice: Optional[NoticeListener] = None,
    ):
        super().__init__(on_notice)
        self.repository = repository
        if debounce_seconds is None:
            debounce_seconds = get_settings().search_debounce_seconds
        self.debouncer = Debouncer(debounce_seconds)

        self.receipts: List[ReceiptSummary] = []
        self.keyword = ""
        self.expanded_id: Optional[str] = None
        self.loading = False

    # ------------------------------------------------------------------
    # 加载与搜索
    # ------------------------------------------------------------------

    async def load(self) -> List[ReceiptSummary]:
        """加载完整列表；失败时提示并显示空列表"""
        self.loading = True
        try:
            self.receipts = await self.repository.list_receipts()
        except TransportError as e:
            self.logger.error(f"[收货单列表] 加载失败: {e}")
            self._notify(NoticeLevel.ERROR, "Load goods receipts", "Unable to load goods receipts")
            self.receipts = []
        finally:
            self.loading = False
        return self.receipts

    async def search(self, keyword: str) -> List[ReceiptSummary]:
        """按关键字搜索；失败时提示并显示空列表"""
        self.loading = True
        try:
            self.receipts = await self.repository.search_receipts(keyword)
        except TransportError as e:
            self.logger.error(f"[收货单列表] 搜索 '{keyword}' 失败: {e}")
            self._notify(NoticeLevel.ERROR, "Search goods receipts", "Unable to search goods receipts")
            self.receipts = []
        finally:
            self.loading = False
        return self.receipts

    def set_search_keyword(self, keyword: str) -> None:
        """更新关键字并重新开始防抖计时"""
        self.keyword = keyword or ""
        self.debouncer.schedule(self._run_search)

    async def _run_search(self) -> None:
        keyword = self.keyword.strip()
        if keyword:
            await self.search(keyword)
        else:
            await self.load()

    async def wait_idle(self) -> None:
        """等待防抖定时器及其触发的请求完成"""
        await self.debouncer.wait()

    # ------------------------------------------------------------------
    # 行操作
    # ------------------------------------------------------------------

    def find(self, receipt_id: str) -> Optional[ReceiptSummary]:
        for receipt in self.receipts:
            if receipt.id == receipt_id:
                return receipt
        return None

    def toggle_expand(self, receipt_id: str) -> Optional[str]:
        """展开/收起一行；同一时间只展开一行"""
        self.expanded_id = None if self.expanded_id == receipt_id else receipt_id
        return self.expanded_id

    @staticmethod
    def actions_for(receipt: ReceiptSummary) -> FrozenSet[ReceiptAction]:
        return lifecycle.available_actions(receipt.status)

    def view(self, receipt_id: str) -> NavigationEvent:
        return NavigationEvent(kind=NavigationKind.VIEW, receipt_id=receipt_id)

    def edit(self, receipt_id: str) -> Optional[NavigationEvent]:
        """请求进入编辑；非草稿行被拒绝"""
        receipt = self.find(receipt_id)
        if receipt is None or not lifecycle.can_edit(receipt.status):
            self._notify(NoticeLevel.WARNING, "Edit goods receipt", "Only draft goods receipts can be edited")
            return None
        return NavigationEvent(
            kind=NavigationKind.EDIT, receipt_id=receipt_id, receipt_code=receipt.receipt_code
        )

    async def approve(self, receipt_id: str, receipt_code: str = "") -> bool:
        """审批收货单，完成后无论成败都重新加载完整列表"""
        receipt = self.find(receipt_id)
        if receipt is not None and not lifecycle.can_approve(receipt.status):
            self._notify(
                NoticeLevel.WARNING, "Approve goods receipt", "Only draft goods receipts can be approved"
            )
            return False

        label = receipt_code or (receipt.receipt_code if receipt else "") or receipt_id
        approved = False
        try:
            await self.repository.change_status(receipt_id)
            approved = True
            self._notify(NoticeLevel.SUCCESS, "Approve goods receipt", f"Goods receipt {label} approved")
            self.logger.info(f"[收货单列表] 已审批 {label}")
        except TransportError as e:
            self.logger.error(f"[收货单列表] 审批 {label} 失败: {e}")
            self._notify(NoticeLevel.ERROR, "Approve goods receipt", e.message)
        # 刷新时不保留搜索关键字
        await self.load()
        return approved


__all__ = ["ReceiptListController"]
