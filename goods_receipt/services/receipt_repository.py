"""收货单仓储 - 收货单后端接口的无状态网关"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ShapeError, TransportError
from ..models import (
    CreateReceiptPayload,
    GoodsReceipt,
    ReceiptSummary,
    UpdateReceiptPayload,
)
from ..models.payload import ChangeStatusRequest
from ..models.serialization import (
    from_dict_goods_receipt,
    from_dict_receipt_summary,
    normalize_collection,
    unwrap_data,
)
from ..transport import request_json

logger = logging.getLogger(__name__)

RECEIPTS_PATH = "api/v1/goods-receipts"
LIST_SORT = "receiptDate,desc"


class ReceiptRepository:
    """收货单接口网关

    不持有任何本地状态；所有方法记录错误后原样抛出，由调用方决定提示方式。
    列表/搜索遇到无法识别的响应结构时记录警告并返回空列表。
    """

    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        """初始化仓储

        Args:
            client: 共享的 httpx 异步客户端
            settings: 配置（默认读取环境变量）
        """
        self.client = client
        self.settings = settings or get_settings()

    def _page_params(self) -> dict:
        return {"page": 0, "size": self.settings.list_page_size, "sort": LIST_SORT}

    def _decode_summaries(self, response: Any, operation: str) -> List[ReceiptSummary]:
        try:
            rows = normalize_collection(response)
        except ShapeError:
            logger.warning(f"[收货单仓储] {operation} 返回了无法识别的结构: {response!r}")
            return []
        return [from_dict_receipt_summary(row) for row in rows if isinstance(row, dict)]

    async def list_receipts(self) -> List[ReceiptSummary]:
        """获取收货单列表（按收货日期倒序）"""
        try:
            response = await request_json(
                self.client, "GET", f"{RECEIPTS_PATH}/get-goods-receipts",
                params=self._page_params(),
            )
        except TransportError as e:
            logger.error(f"[收货单仓储] 获取收货单列表失败: {e}")
            raise
        receipts = self._decode_summaries(response, "list")
        logger.info(f"[收货单仓储] 获取收货单 {len(receipts)} 条")
        return receipts

    async def search_receipts(self, keyword: str) -> List[ReceiptSummary]:
        """按关键字搜索收货单"""
        params = {"search": keyword, **self._page_params()}
        try:
            response = await request_json(
                self.client, "GET", f"{RECEIPTS_PATH}/search-goods-receipts", params=params,
            )
        except TransportError as e:
            logger.error(f"[收货单仓储] 搜索收货单失败 keyword={keyword!r}: {e}")
            raise
        return self._decode_summaries(response, "search")

    async def get_by_id(self, receipt_id: str) -> Optional[GoodsReceipt]:
        """按ID获取收货单详情

        Returns:
            收货单对象，后端未返回数据时为None
        """
        try:
            response = await request_json(
                self.client, "GET", f"{RECEIPTS_PATH}/get-goods-receipt-by-id",
                params={"id": receipt_id},
            )
        except TransportError as e:
            logger.error(f"[收货单仓储] 获取收货单详情失败 id={receipt_id}: {e}")
            raise
        data = unwrap_data(response)
        if not isinstance(data, dict):
            return None
        return from_dict_goods_receipt(data)

    async def create(self, payload: CreateReceiptPayload) -> Any:
        """创建收货单"""
        body = payload.to_body()
        logger.info(f"[收货单仓储] 创建收货单: {body}")
        try:
            result = await request_json(
                self.client, "POST", f"{RECEIPTS_PATH}/create-goods-receipt", json=body,
            )
        except TransportError as e:
            logger.error(f"[收货单仓储] 创建收货单失败: {e}")
            raise
        logger.info("[收货单仓储] 收货单创建成功")
        return result

    async def update(self, payload: UpdateReceiptPayload) -> Any:
        """更新收货单（请求体包含id）"""
        body = payload.to_body()
        logger.info(f"[收货单仓储] 更新收货单 {payload.id}: {body}")
        try:
            result = await request_json(
                self.client, "POST", f"{RECEIPTS_PATH}/update-goods-receipt", json=body,
            )
        except TransportError as e:
            logger.error(f"[收货单仓储] 更新收货单失败 id={payload.id}: {e}")
            raise
        logger.info(f"[收货单仓储] 收货单 {payload.id} 更新成功")
        return result

    async def change_status(self, receipt_id: str) -> Any:
        """审批收货单；目标状态由后端决定"""
        body = ChangeStatusRequest(id=receipt_id).model_dump()
        logger.info(f"[收货单仓储] 审批收货单 id={receipt_id}")
        try:
            result = await request_json(
                self.client, "POST", f"{RECEIPTS_PATH}/change-goods-receipt-status", json=body,
            )
        except TransportError as e:
            logger.error(f"[收货单仓储] 审批收货单失败 id={receipt_id}: {e}")
            raise
        return result


__all__ = ["ReceiptRepository"]
