"""控制器 - 收货单表单、列表和详情的交互状态

控制器不依赖任何界面框架，只通过返回值、事件和提示与界面层交互。
"""

from .debounce import Debouncer
from .detail import ReceiptDetailLoader
from .events import (
    FormEvent,
    FormEventKind,
    NavigationEvent,
    NavigationKind,
    Notice,
    NoticeLevel,
)
from .form import FormPhase, FormState, ReceiptFormController
from .listing import ReceiptListController

__all__ = [
    "Debouncer",
    "FormEvent",
    "FormEventKind",
    "FormPhase",
    "FormState",
    "NavigationEvent",
    "NavigationKind",
    "Notice",
    "NoticeLevel",
    "ReceiptDetailLoader",
    "ReceiptFormController",
    "ReceiptListController",
]
