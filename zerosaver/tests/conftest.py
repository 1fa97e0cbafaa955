"""
测试配置文件
提供测试所需的fixtures和配置
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from zerosaver.config.settings import Settings
from zerosaver.core.clock import FixedClock, in_minutes
from zerosaver.seed_data import seed_marketplace
from zerosaver.services.cart_service import ReservationCart
from zerosaver.services.catalog_service import DealCatalog
from zerosaver.services.marketplace_service import MarketplaceService
from zerosaver.services.partner_service import PartnerRegistry

START = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings():
    """测试配置"""
    return Settings(debug=True, sweep_interval_seconds=0.05)


@pytest.fixture
def clock():
    """固定时钟，可手动拨动"""
    return FixedClock(START)


@pytest.fixture
def catalog(test_settings, clock):
    return DealCatalog(test_settings, clock)


@pytest.fixture
def deal_fields(clock):
    """一份有效的发布表单"""
    now = clock()
    return {
        "partner_id": "v2",
        "title": "Mystery pastry bag",
        "description": "A surprise mix of croissants, danishes & buns.",
        "category": "Bakery",
        "diet": ["Vegetarian"],
        "original_price": Decimal("16"),
        "price": Decimal("6"),
        "quantity": 8,
        "min_order_qty": 1,
        "distance_km": 0.6,
        "pickup_start": in_minutes(10, now),
        "pickup_end": in_minutes(90, now),
        "expires_at": in_minutes(120, now),
        "tags": ["End-of-day"],
    }


@pytest.fixture
def sample_deal(catalog, deal_fields):
    """库存为8的测试商品"""
    return catalog.create_deal(deal_fields, vendor="Daily Bakery")


@pytest.fixture
def cart(catalog):
    return ReservationCart(catalog, consumer_id="A")


@pytest.fixture
def registry(clock):
    return PartnerRegistry(clock)


@pytest.fixture
def market(test_settings, clock):
    """带种子数据的交易市场"""
    return seed_marketplace(MarketplaceService(test_settings, clock))
