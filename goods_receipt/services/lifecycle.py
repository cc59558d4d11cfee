"""收货单状态机 - 判断当前状态下允许的操作

只有草稿可以编辑和审批；审批是离开草稿的唯一途径，且不存在回到草稿的转换。
PARTIAL_COMPLETED 仅用于展示，本系统内没有进入该状态的转换。
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

from ..models import ReceiptStatus


class ReceiptAction(str, Enum):
    """列表/详情中可执行的操作"""
    VIEW = "view"
    EDIT = "edit"
    APPROVE = "approve"


TRANSITIONS: Dict[ReceiptStatus, FrozenSet[ReceiptStatus]] = {
    ReceiptStatus.DRAFT: frozenset(
        {ReceiptStatus.RECEIVED, ReceiptStatus.PARTIAL, ReceiptStatus.CANCELLED}
    ),
    ReceiptStatus.RECEIVED: frozenset(),
    ReceiptStatus.PARTIAL: frozenset(),
    ReceiptStatus.PARTIAL_COMPLETED: frozenset(),
    ReceiptStatus.CANCELLED: frozenset(),
}

StatusLike = Union[ReceiptStatus, str, None]


def _coerce(status: StatusLike) -> Optional[ReceiptStatus]:
    return ReceiptStatus.parse(status)


def can_edit(status: StatusLike) -> bool:
    return _coerce(status) is ReceiptStatus.DRAFT


def can_approve(status: StatusLike) -> bool:
    return _coerce(status) is ReceiptStatus.DRAFT


def can_transition(source: StatusLike, target: StatusLike) -> bool:
    """判断状态转换是否合法"""
    src, dst = _coerce(source), _coerce(target)
    if src is None or dst is None:
        return False
    return dst in TRANSITIONS[src]


def is_terminal(status: StatusLike) -> bool:
    resolved = _coerce(status)
    return resolved is not None and not TRANSITIONS[resolved]


def available_actions(status: StatusLike) -> FrozenSet[ReceiptAction]:
    """查看始终可用；编辑和审批仅限草稿。无法识别的状态只能查看。"""
    if can_edit(status):
        return frozenset({ReceiptAction.VIEW, ReceiptAction.EDIT, ReceiptAction.APPROVE})
    return frozenset({ReceiptAction.VIEW})


def status_label(status: StatusLike) -> str:
    resolved = _coerce(status)
    if resolved is None:
        return str(status or "")
    return resolved.label


__all__ = [
    "ReceiptAction",
    "TRANSITIONS",
    "available_actions",
    "can_approve",
    "can_edit",
    "can_transition",
    "is_terminal",
    "status_label",
]
