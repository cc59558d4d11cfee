"""可取消的防抖定时器"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


class Debouncer:
    """最后一次调度生效的防抖定时器

    每次 ``schedule`` 都会取消仍在等待中的定时器；已经触发的回调（例如进行中的
    网络请求）不会被取消。
    """

    def __init__(self, delay: float):
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay = delay
        self._token = 0
        self._timer: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """是否有尚未触发的定时器"""
        return self._timer is not None and not self._timer.done()

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> int:
        """重新开始计时，返回本次调度的令牌"""
        self.cancel()
        self._token += 1
        token = self._token
        task = asyncio.get_running_loop().create_task(self._fire(token, callback))
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(self._log_failure)
        return token

    @staticmethod
    def _log_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"[防抖] 回调执行失败: {error}", exc_info=error)

    def cancel(self) -> None:
        """取消等待中的定时器"""
        if self.pending:
            self._timer.cancel()
        self._timer = None

    async def _fire(self, token: int, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        if token != self._token:
            return
        # 已触发，后续调度不能再取消它
        self._timer = None
        logger.debug(f"[防抖] 令牌 {token} 触发")
        await callback()

    async def wait(self) -> None:
        """等待所有定时器和已触发的回调结束"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


__all__ = ["Debouncer"]
