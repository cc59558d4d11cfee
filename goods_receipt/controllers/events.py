"""控制器事件 - 表单结果、跳转事件和用户提示

控制器不直接弹窗或回调界面，而是返回事件/记录提示，由持有者决定如何展示。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional


class NoticeLevel(str, Enum):
    """提示级别"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notice:
    """一条需要用户确认的提示"""
    level: NoticeLevel
    title: str  # 失败/成功的操作名称
    message: str
    created_at: datetime = field(default_factory=datetime.now)


class FormEventKind(str, Enum):
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


@dataclass
class FormEvent:
    """表单关闭时返回给持有者的结果"""
    kind: FormEventKind
    receipt_id: Optional[str] = None
    edited: bool = False


class NavigationKind(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    APPROVE = "approve"
    CLOSE = "close"


@dataclass
class NavigationEvent:
    """列表/详情请求持有者执行的跳转"""
    kind: NavigationKind
    receipt_id: Optional[str] = None
    receipt_code: str = ""


NoticeListener = Callable[[Notice], None]


class NoticeEmitter:
    """为控制器记录提示，并可选地转发给监听者"""

    def __init__(self, on_notice: Optional[NoticeListener] = None):
        self.notices: List[Notice] = []
        self._on_notice = on_notice
        self.logger = logging.getLogger(f"{type(self).__module__}.{type(self).__name__}")

    @property
    def last_notice(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    def clear_notices(self) -> None:
        self.notices.clear()

    def _notify(self, level: NoticeLevel, title: str, message: str) -> Notice:
        notice = Notice(level=level, title=title, message=message)
        self.notices.append(notice)
        if self._on_notice is not None:
            self._on_notice(notice)
        return notice


__all__ = [
    "FormEvent",
    "FormEventKind",
    "NavigationEvent",
    "NavigationKind",
    "Notice",
    "NoticeEmitter",
    "NoticeLevel",
    "NoticeListener",
]
