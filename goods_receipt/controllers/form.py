"""收货单表单控制器 - 新建/编辑收货单草稿

表单独占自己的草稿（FormState），直到提交成功或取消。界面层只调用这里的方法，
并根据返回值、``phase`` 和 ``notices`` 刷新显示。
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Union

from ..errors import GoodsReceiptError, TransportError, ValidationError
from ..models import (
    AttachedDocument,
    CreateReceiptPayload,
    GoodsReceipt,
    LineItem,
    PurchaseOrderDetail,
    ReceiptProductPayload,
    ReceiptStatus,
    UpdateReceiptPayload,
    UploadSource,
    compute_sub_total,
)
from ..models.serialization import format_datetime, unwrap_data
from ..services import lifecycle
from ..services.purchase_order_service import PurchaseOrderService
from ..services.receipt_repository import ReceiptRepository
from ..services.reference_data import (
    ProductOption,
    ReferenceDataLoader,
    ReferenceOptions,
    resolve_product_options,
)
from .events import FormEvent, FormEventKind, NoticeLevel, NoticeListener, NoticeEmitter


class FormPhase(str, Enum):
    """表单阶段"""
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    CLOSED = "closed"


@dataclass
class FormState:
    """收货单草稿"""
    receipt_id: Optional[str] = None  # 有值表示编辑模式
    purchase_order_id: str = ""
    warehouse_id: str = ""
    supplier_id: str = ""
    supplier_locked: bool = False  # 供应商由采购订单决定
    receipt_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    description: str = ""
    note: str = ""
    status: ReceiptStatus = ReceiptStatus.DRAFT
    items: List[LineItem] = field(default_factory=list)
    documents: List[AttachedDocument] = field(default_factory=list)

    @property
    def editing(self) -> bool:
        return bool(self.receipt_id)

    @property
    def sub_total(self) -> float:
        return compute_sub_total(self.items)

    @classmethod
    def from_receipt(cls, receipt: GoodsReceipt) -> "FormState":
        """用已保存的收货单初始化草稿"""
        return cls(
            receipt_id=receipt.id,
            purchase_order_id=receipt.purchase_order.id if receipt.purchase_order else "",
            warehouse_id=receipt.warehouse.id if receipt.warehouse else "",
            supplier_id=receipt.supplier.id if receipt.supplier else "",
            receipt_date=receipt.receipt_date or datetime.now(timezone.utc),
            description=receipt.description or "",
            note=receipt.note or "",
            status=receipt.status or ReceiptStatus.DRAFT,
            items=[replace(item) for item in receipt.products],
            documents=[
                AttachedDocument(handle=doc.id, name=doc.file_name or doc.id)
                for doc in receipt.documents
            ],
        )

    def to_payload(self) -> Union[CreateReceiptPayload, UpdateReceiptPayload]:
        """构建提交请求体；合计在这里重新计算"""
        fields: dict[str, Any] = dict(
            purchaseOrderId=self.purchase_order_id,
            warehouseId=self.warehouse_id,
            supplierId=self.supplier_id,
            documents=[doc.handle for doc in self.documents],
            products=[
                ReceiptProductPayload(
                    productId=item.product_id,
                    quantity=item.quantity,
                    unitPrice=item.unit_price,
                    totalPrice=item.total_price,
                    location=item.location,
                    stack=item.stack,
                    fee=item.fee,
                    note=item.note,
                )
                for item in self.items
            ],
            description=self.description,
            note=self.note,
            status=self.status,
            receiptDate=format_datetime(self.receipt_date),
            subTotal=self.sub_total,
        )
        if self.editing:
            return UpdateReceiptPayload(id=self.receipt_id, **fields)
        return CreateReceiptPayload(**fields)


def _is_whole_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_line_item(item: LineItem) -> None:
    """校验商品行，不合法时抛出 ValidationError"""
    if not item.product_id:
        raise ValidationError("product", "Please select a product")
    if not _is_whole_number(item.quantity):
        raise ValidationError("quantity", "Quantity must be a whole number")
    if item.quantity <= 0:
        raise ValidationError("quantity", "Quantity must be greater than 0")
    if item.unit_price < 0:
        raise ValidationError("unit_price", "Unit price cannot be negative")
    if not _is_whole_number(item.stack) or item.stack <= 0:
        raise ValidationError("stack", "Stack must be a positive whole number")
    if item.fee < 0:
        raise ValidationError("fee", "Fee cannot be negative")


class ReceiptFormController(NoticeEmitter):
    """收货单表单控制器

    阶段流转：LOADING → READY → SUBMITTING → (READY | CLOSED)。
    所有面向用户的失败都记录为提示并返回中性值（None/False），不会向外抛出。
    """

    def __init__(
        self,
        repository: ReceiptRepository,
        reference_loader: ReferenceDataLoader,
        uploader: Optional[PurchaseOrderService] = None,
        on_notice: Optional[NoticeListener] = None,
    ):
        """初始化表单控制器

        Args:
            repository: 收货单仓储
            reference_loader: 参考数据加载器
            uploader: 附件上传服务（默认使用参考数据加载器的服务）
            on_notice: 提示监听回调
        """
        super().__init__(on_notice)
        self.repository = repository
        self.reference_loader = reference_loader
        self.uploader = uploader or reference_loader.service

        self.phase = FormPhase.CLOSED
        self.state: Optional[FormState] = None
        self.options = ReferenceOptions()
        self.purchase_order_detail: Optional[PurchaseOrderDetail] = None
        self.product_options: List[ProductOption] = []

    # ------------------------------------------------------------------
    # 打开/关闭
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.phase is not FormPhase.CLOSED

    async def open(self, receipt_id: Optional[str] = None) -> bool:
        """打开表单

        新建模式直接生成空草稿；编辑模式必须成功加载且状态为草稿，否则关闭表单。

        Returns:
            表单是否进入 READY 阶段
        """
        self._reset()
        self.phase = FormPhase.LOADING

        if receipt_id:
            options_result, receipt_result = await asyncio.gather(
                self.reference_loader.load_options(),
                self.repository.get_by_id(receipt_id),
                return_exceptions=True,
            )
        else:
            (options_result,) = await asyncio.gather(
                self.reference_loader.load_options(), return_exceptions=True
            )
            receipt_result = None

        self._apply_options(options_result)
        self.product_options = list(self.options.products)

        if not receipt_id:
            self.state = FormState()
            self.phase = FormPhase.READY
            self.logger.info("[收货单表单] 新建收货单")
            return True

        if isinstance(receipt_result, BaseException):
            self._raise_unexpected(receipt_result)
            self.logger.error(f"[收货单表单] 加载收货单 {receipt_id} 失败: {receipt_result}")
            return self._close_with(NoticeLevel.ERROR, "Unable to load goods receipt details")
        if receipt_result is None:
            self.logger.warning(f"[收货单表单] 收货单 {receipt_id} 不存在")
            return self._close_with(NoticeLevel.ERROR, "Unable to load goods receipt details")
        if not lifecycle.can_edit(receipt_result.status):
            self.logger.warning(
                f"[收货单表单] 收货单 {receipt_id} 状态为 {receipt_result.status}，不可编辑"
            )
            return self._close_with(NoticeLevel.WARNING, "Only draft goods receipts can be edited")

        self.state = FormState.from_receipt(receipt_result)
        if self.state.purchase_order_id:
            detail = await self._fetch_purchase_order(self.state.purchase_order_id)
            self._apply_purchase_order(detail, prefill=False)

        self.phase = FormPhase.READY
        self.logger.info(f"[收货单表单] 编辑收货单 {receipt_result.receipt_code or receipt_id}")
        return True

    def cancel(self) -> FormEvent:
        """放弃草稿并关闭表单"""
        receipt_id = self.state.receipt_id if self.state else None
        self._reset()
        self.logger.info("[收货单表单] 已取消")
        return FormEvent(kind=FormEventKind.CANCELLED, receipt_id=receipt_id)

    def _reset(self) -> None:
        self.phase = FormPhase.CLOSED
        self.state = None
        self.purchase_order_detail = None
        self.product_options = []

    def _close_with(self, level: NoticeLevel, message: str) -> bool:
        self._notify(level, "Load goods receipt", message)
        self._reset()
        return False

    def _apply_options(self, result: Union[ReferenceOptions, BaseException]) -> None:
        if isinstance(result, BaseException):
            self._raise_unexpected(result)
            self.logger.error(f"[收货单表单] 加载参考数据失败: {result}")
            self._notify(NoticeLevel.ERROR, "Load data", "Unable to load data")
            self.options = ReferenceOptions()
            return
        self.options = result

    @staticmethod
    def _raise_unexpected(error: BaseException) -> None:
        # 只吸收业务异常，其它异常原样抛出
        if not isinstance(error, GoodsReceiptError):
            raise error

    def _ensure_ready(self, action: str) -> bool:
        if self.phase is not FormPhase.READY or self.state is None:
            self.logger.warning(f"[收货单表单] 当前阶段 {self.phase.value}，忽略操作 {action}")
            return False
        return True

    # ------------------------------------------------------------------
    # 采购订单与表头字段
    # ------------------------------------------------------------------

    async def _fetch_purchase_order(self, po_id: str) -> Optional[PurchaseOrderDetail]:
        try:
            return await self.reference_loader.load_purchase_order_detail(po_id)
        except TransportError as e:
            self.logger.error(f"[收货单表单] 加载采购订单 {po_id} 失败: {e}")
            self._notify(NoticeLevel.ERROR, "Load purchase order", "Unable to load purchase order details")
            return None

    def _apply_purchase_order(self, detail: Optional[PurchaseOrderDetail], prefill: bool) -> None:
        """应用订单详情：锁定供应商，限定商品；prefill 时预填仓库"""
        state = self.state
        self.purchase_order_detail = detail
        if detail is None:
            state.supplier_locked = False
            self.product_options = list(self.options.products)
            return
        if detail.supplier is not None and detail.supplier.id:
            state.supplier_id = detail.supplier.id
            state.supplier_locked = True
        else:
            state.supplier_locked = False
        if prefill and detail.warehouse is not None and detail.warehouse.id:
            state.warehouse_id = detail.warehouse.id
        self.product_options = resolve_product_options(detail, self.options.products)

    async def select_purchase_order(self, po_id: Optional[str]) -> Optional[PurchaseOrderDetail]:
        """选择采购订单；清空选择时解锁供应商并恢复完整商品目录"""
        if not self._ensure_ready("select_purchase_order"):
            return None
        po_id = po_id or ""
        self.state.purchase_order_id = po_id
        if not po_id:
            self._apply_purchase_order(None, prefill=False)
            return None

        detail = await self._fetch_purchase_order(po_id)
        # 等待期间表单已关闭或用户又选了其它订单
        if self.state is None or self.state.purchase_order_id != po_id:
            self.logger.debug(f"[收货单表单] 丢弃过期的采购订单详情 {po_id}")
            return None
        self._apply_purchase_order(detail, prefill=True)
        return detail

    def set_warehouse(self, warehouse_id: Optional[str]) -> bool:
        if not self._ensure_ready("set_warehouse"):
            return False
        self.state.warehouse_id = warehouse_id or ""
        return True

    def set_supplier(self, supplier_id: Optional[str]) -> bool:
        """设置供应商；已被采购订单锁定时拒绝修改"""
        if not self._ensure_ready("set_supplier"):
            return False
        supplier_id = supplier_id or ""
        if self.state.supplier_locked and supplier_id != self.state.supplier_id:
            self._notify(
                NoticeLevel.WARNING,
                "Select supplier",
                "Supplier is determined by the selected purchase order",
            )
            return False
        self.state.supplier_id = supplier_id
        return True

    def set_receipt_date(self, receipt_date: datetime) -> bool:
        if not self._ensure_ready("set_receipt_date"):
            return False
        self.state.receipt_date = receipt_date
        return True

    def set_description(self, description: Optional[str]) -> bool:
        if not self._ensure_ready("set_description"):
            return False
        self.state.description = description or ""
        return True

    def set_note(self, note: Optional[str]) -> bool:
        if not self._ensure_ready("set_note"):
            return False
        self.state.note = note or ""
        return True

    # ------------------------------------------------------------------
    # 商品行
    # ------------------------------------------------------------------

    def _find_option(self, product_id: str) -> Optional[ProductOption]:
        for option in self.product_options:
            if option.id == product_id:
                return option
        return None

    def select_product(self, product_id: str) -> Optional[LineItem]:
        """选择商品，返回预填好的商品行建议

        数量和单价优先取采购订单中的对应行，否则数量为1、单价为目录成本价。
        """
        if not self._ensure_ready("select_product"):
            return None
        option = self._find_option(product_id)
        if option is None:
            return None

        po_line = None
        if self.purchase_order_detail is not None:
            po_line = self.purchase_order_detail.find_product(product_id)

        quantity = po_line.quantity if po_line and po_line.quantity > 0 else 1
        if po_line and po_line.unit_price:
            unit_price = po_line.unit_price
        else:
            unit_price = option.cost_price or 0.0
        return LineItem(
            product_id=option.id,
            quantity=quantity,
            unit_price=unit_price,
            product_name=option.name,
        )

    def add_line_item(
        self,
        product_id: str,
        quantity: Optional[int] = None,
        unit_price: Optional[float] = None,
        location: str = "",
        stack: int = 1,
        fee: float = 0.0,
        note: Optional[str] = None,
    ) -> Optional[LineItem]:
        """追加商品行；未给出的数量/单价使用 select_product 的建议值"""
        if not self._ensure_ready("add_line_item"):
            return None
        suggestion = self.select_product(product_id) if product_id else None
        if product_id and suggestion is None:
            self._notify(
                NoticeLevel.WARNING,
                "Add product",
                "Product is not available for the selected purchase order",
            )
            return None

        item = LineItem(
            product_id=product_id or "",
            quantity=quantity if quantity is not None else (suggestion.quantity if suggestion else 1),
            unit_price=unit_price if unit_price is not None else (suggestion.unit_price if suggestion else 0.0),
            location=location or "",
            stack=stack,
            fee=fee,
            note=note,
            product_name=suggestion.product_name if suggestion else "",
        )
        try:
            _check_line_item(item)
        except ValidationError as e:
            self._notify(NoticeLevel.WARNING, "Add product", e.message)
            return None

        self.state.items.append(item)
        self.logger.debug(f"[收货单表单] 添加商品 {item.product_id} x {item.quantity}")
        return item

    def update_line_item(self, index: int, **changes: Any) -> Optional[LineItem]:
        """修改商品行字段（quantity/unit_price/location/stack/fee/note）"""
        if not self._ensure_ready("update_line_item"):
            return None
        if not 0 <= index < len(self.state.items):
            self.logger.warning(f"[收货单表单] 商品行索引越界: {index}")
            return None
        allowed = {"quantity", "unit_price", "location", "stack", "fee", "note"}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"unsupported line item fields: {sorted(unknown)}")

        updated = replace(self.state.items[index], **changes)
        try:
            _check_line_item(updated)
        except ValidationError as e:
            self._notify(NoticeLevel.WARNING, "Update product", e.message)
            return None
        self.state.items[index] = updated
        return updated

    def remove_line_item(self, index: int) -> Optional[LineItem]:
        if not self._ensure_ready("remove_line_item"):
            return None
        if not 0 <= index < len(self.state.items):
            return None
        return self.state.items.pop(index)

    # ------------------------------------------------------------------
    # 附件
    # ------------------------------------------------------------------

    async def attach_document(self, file: UploadSource) -> Optional[AttachedDocument]:
        """上传附件并保存返回的句柄；失败时保留已有附件"""
        if not self._ensure_ready("attach_document"):
            return None
        state = self.state
        try:
            handle = await self.uploader.upload_document(file)
        except TransportError as e:
            self.logger.error(f"[收货单表单] 上传附件 {file.name} 失败: {e}")
            self._notify(NoticeLevel.ERROR, "Upload document", e.message or "Unable to upload document")
            return None
        # 上传期间表单已关闭或换成了另一份草稿
        if self.state is not state:
            self.logger.debug(f"[收货单表单] 丢弃过期的附件 {file.name} -> {handle}")
            return None
        document = AttachedDocument(handle=handle, name=file.name)
        state.documents.append(document)
        self.logger.info(f"[收货单表单] 附件已上传: {file.name} -> {handle}")
        return document

    def remove_document(self, index: int) -> Optional[AttachedDocument]:
        if not self._ensure_ready("remove_document"):
            return None
        if not 0 <= index < len(self.state.documents):
            return None
        return self.state.documents.pop(index)

    # ------------------------------------------------------------------
    # 提交
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        """按顺序校验必填项，第一个不满足的抛出 ValidationError"""
        state = self.state
        if not state.purchase_order_id:
            raise ValidationError("purchase_order", "Please select a purchase order")
        if not state.warehouse_id:
            raise ValidationError("warehouse", "Please select a warehouse")
        if not state.supplier_id:
            raise ValidationError("supplier", "Please select a supplier")
        if not state.items:
            raise ValidationError("products", "Please add at least one product")
        # 编辑模式下的商品行直接来自已保存数据，未经过 add/update 校验
        for index, item in enumerate(state.items):
            try:
                _check_line_item(item)
            except ValidationError as e:
                raise ValidationError(f"products[{index}].{e.field}", f"Line {index + 1}: {e.message}") from e
        if not lifecycle.can_edit(state.status):
            raise ValidationError("status", "Only draft goods receipts can be edited")

    async def submit(self) -> Optional[FormEvent]:
        """提交草稿

        Returns:
            成功时返回 SUBMITTED 事件；校验失败、请求失败或重复提交时返回None
        """
        if self.phase is FormPhase.SUBMITTING:
            self.logger.info("[收货单表单] 正在提交，忽略重复提交")
            return None
        if not self._ensure_ready("submit"):
            return None

        title = "Save goods receipt"
        try:
            self._validate()
        except ValidationError as e:
            self._notify(NoticeLevel.WARNING, title, e.message)
            return None

        state = self.state
        payload = state.to_payload()
        self.phase = FormPhase.SUBMITTING
        try:
            if state.editing:
                result = await self.repository.update(payload)
            else:
                result = await self.repository.create(payload)
        except TransportError as e:
            self.logger.error(f"[收货单表单] 提交失败: {e}")
            self._notify(NoticeLevel.ERROR, title, e.message)
            return None
        finally:
            # 无论成功失败都释放提交中状态；提交期间被取消时保持 CLOSED
            if self.phase is FormPhase.SUBMITTING:
                self.phase = FormPhase.READY

        receipt_id = state.receipt_id
        if not receipt_id:
            data = unwrap_data(result)
            if isinstance(data, dict) and data.get("id") is not None:
                receipt_id = str(data["id"])

        message = (
            "Goods receipt updated successfully" if state.editing
            else "Goods receipt created successfully"
        )
        self._notify(NoticeLevel.SUCCESS, title, message)
        self.logger.info(f"[收货单表单] {message}: {receipt_id}")
        event = FormEvent(kind=FormEventKind.SUBMITTED, receipt_id=receipt_id, edited=state.editing)
        self._reset()
        return event


__all__ = ["FormPhase", "FormState", "ReceiptFormController"]
