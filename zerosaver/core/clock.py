"""
时间工具
计算剩余时间、过期判断，所有函数均为纯函数

不带时区的时间一律按UTC处理
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """当前UTC时间（带时区）"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """不带时区的时间补上UTC时区，带时区的原样返回"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def in_minutes(minutes: float, start: Optional[datetime] = None) -> datetime:
    """从start（默认当前时间）起若干分钟后的时间点"""
    base = as_utc(start) if start is not None else utc_now()
    return base + timedelta(minutes=minutes)


def minutes_left(expires_at: datetime, as_of: datetime) -> int:
    """距离过期的剩余分钟数（四舍五入，半分钟进位），已过期返回0"""
    delta = (as_utc(expires_at) - as_utc(as_of)).total_seconds() / 60
    return max(0, math.floor(delta + 0.5))


def is_expired(expires_at: datetime, as_of: datetime) -> bool:
    return as_utc(expires_at) <= as_utc(as_of)


class SystemClock:
    """系统时钟"""

    def __call__(self) -> datetime:
        return utc_now()


class FixedClock:
    """可手动拨动的时钟，用于测试和演示"""

    def __init__(self, now: Optional[datetime] = None):
        self.now = as_utc(now) if now is not None else utc_now()

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float = 0, seconds: float = 0) -> datetime:
        self.now = self.now + timedelta(minutes=minutes, seconds=seconds)
        return self.now
