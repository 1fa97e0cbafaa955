"""
过期清理定时任务
在后台线程中按固定间隔调用目录的 sweep_expired
"""

import logging
import threading
from typing import Optional

from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """
    周期性清理售罄或过期商品

    catalog 只需提供 sweep_expired(as_of) 方法；所有变更都在目录锁内完成，
    与预订操作之间不会交错
    """

    def __init__(self, catalog, interval_seconds: float = 10.0, clock: Optional[Clock] = None):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self.catalog = catalog
        self.interval_seconds = interval_seconds
        self.clock = clock or SystemClock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self):
        """立即执行一次清理，返回被移除的商品"""
        return self.catalog.sweep_expired(self.clock())

    def start(self) -> "ExpirySweeper":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="expiry-sweeper", daemon=True)
        self._thread.start()
        logger.info("expiry sweeper started (every %ss)", self.interval_seconds)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("expiry sweeper stopped")

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                # 单次清理失败不终止定时任务
                logger.exception("expiry sweep failed")

    def __enter__(self) -> "ExpirySweeper":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
