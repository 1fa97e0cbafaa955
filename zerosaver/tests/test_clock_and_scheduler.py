import pytest
import threading
import time
from datetime import datetime, timedelta, timezone

from zerosaver.core.clock import FixedClock, in_minutes, is_expired, minutes_left
from zerosaver.core.scheduler import ExpirySweeper
from zerosaver.seed_data import seed_marketplace
from zerosaver.services.marketplace_service import MarketplaceService

START = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


class TestClock:
    """时间工具测试"""

    def test_minutes_left(self):
        assert minutes_left(in_minutes(90, START), START) == 90
        assert minutes_left(START + timedelta(seconds=89), START) == 1
        assert minutes_left(START - timedelta(minutes=5), START) == 0

    def test_minutes_left_rounds_half_up(self):
        assert minutes_left(START + timedelta(seconds=30), START) == 1
        assert minutes_left(START + timedelta(minutes=2, seconds=30), START) == 3
        assert minutes_left(START + timedelta(seconds=29), START) == 0

    def test_naive_times_treated_as_utc(self):
        naive = datetime(2026, 10, 18, 9, 0)
        assert is_expired(START, naive) is True
        assert is_expired(in_minutes(1, START), naive) is False
        assert minutes_left(in_minutes(45, START), naive) == 45

    def test_is_expired_inclusive(self):
        assert is_expired(START, START) is True
        assert is_expired(in_minutes(1, START), START) is False

    def test_fixed_clock_advance(self):
        clock = FixedClock(START)
        clock.advance(minutes=10, seconds=30)
        assert clock() == START + timedelta(minutes=10, seconds=30)


class RecordingCatalog:
    """记录每次清理调用的替身目录"""

    def __init__(self):
        self.calls = []
        self.called = threading.Event()

    def sweep_expired(self, as_of):
        self.calls.append(as_of)
        self.called.set()
        return []


class TestExpirySweeper:
    """过期清理定时任务测试"""

    def test_run_once_uses_clock(self, market, clock):
        sweeper = market.sweeper()
        clock.advance(minutes=125)

        removed = sweeper.run_once()
        assert [d.id for d in removed] == ["d2"]

    def test_background_sweep(self, clock):
        catalog = RecordingCatalog()
        with ExpirySweeper(catalog, interval_seconds=0.01, clock=clock) as sweeper:
            assert sweeper.running
            assert catalog.called.wait(2)
        assert not sweeper.running
        assert catalog.calls[0] == clock()

    def test_background_sweep_removes_deals(self, test_settings, clock):
        """测试后台任务按间隔清理过期商品"""
        market = seed_marketplace(MarketplaceService(test_settings, clock))
        clock.advance(minutes=130)

        with market.sweeper():
            deadline = time.time() + 2
            while "d2" in market.catalog and time.time() < deadline:
                time.sleep(0.01)

        assert "d2" not in market.catalog
        assert "d1" in market.catalog

    def test_invalid_interval(self, catalog):
        with pytest.raises(ValueError):
            ExpirySweeper(catalog, interval_seconds=0)
