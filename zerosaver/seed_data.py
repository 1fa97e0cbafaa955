"""Seed an in-memory marketplace with demo partners and deals."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from .core.clock import in_minutes
from .models.deal import Deal
from .models.partner import Partner, PartnerStatus
from .services.marketplace_service import MarketplaceService

PARTNERS = [
    {"id": "v1", "name": "Sunset Sushi", "category": "Restaurant", "status": PartnerStatus.APPROVED},
    {"id": "v2", "name": "Daily Bakery", "category": "Bakery", "status": PartnerStatus.APPROVED},
    {"id": "v3", "name": "Green Grocer", "category": "Grocer", "status": PartnerStatus.APPROVED},
    {"id": "v4", "name": "Bean Scene Café", "category": "Café", "status": PartnerStatus.APPROVED},
    {"id": "v5", "name": "Aussie Foods Wholesale", "category": "Wholesaler", "status": PartnerStatus.PENDING},
]

# 时间字段为相对当前时间的分钟数
DEALS = [
    {
        "id": "d1", "partner_id": "v1", "vendor": "Sunset Sushi",
        "title": "Assorted sushi box (10pc)",
        "description": "Chef's selection of nigiri & maki. Pick-up chilled. Bring a cooler bag if traveling >20 min.",
        "category": "Restaurant", "diet": ["Halal"],
        "original_price": "18", "price": "7.5", "quantity": 12, "min_order_qty": 1, "distance_km": 1.2,
        "pickup_address": "12 Crown St, Wollongong NSW", "pickup_notes": "Ring bell on arrival.",
        "pickup_start": 30, "pickup_end": 150, "best_before": 240, "expires_at": 180,
        "allergens": ["Soy", "Fish", "Gluten"], "cold_chain": True, "b2b": False, "rating": 4.6,
        "tags": ["End-of-day", "Cold"],
    },
    {
        "id": "d2", "partner_id": "v2", "vendor": "Daily Bakery",
        "title": "Mystery pastry bag",
        "description": "A surprise mix of croissants, danishes & buns. Best the same day.",
        "category": "Bakery", "diet": ["Vegetarian"],
        "original_price": "16", "price": "6", "quantity": 8, "min_order_qty": 1, "distance_km": 0.6,
        "pickup_address": "5 Market Ln, Wollongong NSW", "pickup_notes": "Ask for ZeroSaver bag at counter.",
        "pickup_start": 10, "pickup_end": 90, "best_before": 120, "expires_at": 120,
        "allergens": ["Gluten", "Dairy"], "cold_chain": False, "b2b": False, "rating": 4.4,
        "tags": ["End-of-day"],
    },
    {
        "id": "d3", "partner_id": "v3", "vendor": "Green Grocer",
        "title": "Fruit & veg mixed box (3kg)",
        "description": "Seasonal seconds. Great for juicing & soups. Mix varies.",
        "category": "Grocer", "diet": ["Vegan", "Vegetarian", "Gluten-free"],
        "original_price": "25", "price": "10", "quantity": 20, "min_order_qty": 1, "distance_km": 3.4,
        "pickup_address": "88 Keira St, Wollongong NSW", "pickup_notes": "Loading bay pick-up at rear.",
        "pickup_start": 60, "pickup_end": 300, "best_before": 360, "expires_at": 360,
        "allergens": [], "cold_chain": False, "b2b": False, "rating": 4.2,
        "tags": ["Family size"],
    },
    {
        "id": "d4", "partner_id": "v4", "vendor": "Bean Scene Café",
        "title": "Sandwich + coffee combo",
        "description": "Any display sandwich + medium coffee voucher. Collect before 3pm.",
        "category": "Café", "diet": ["Vegetarian"],
        "original_price": "19", "price": "8.5", "quantity": 10, "min_order_qty": 1, "distance_km": 2.1,
        "pickup_address": "21 Crown St, Wollongong NSW", "pickup_notes": "Show QR at barista.",
        "pickup_start": 20, "pickup_end": 160, "best_before": 200, "expires_at": 200,
        "allergens": ["Gluten", "Dairy"], "cold_chain": False, "b2b": False, "rating": 4.7,
        "tags": ["Lunch"],
    },
    {
        "id": "d5", "partner_id": "v5", "vendor": "Aussie Foods Wholesale",
        "title": "B2B – surplus chicken (5kg)",
        "description": "Frozen MD packs, mixed cuts. For licensed businesses only.",
        "category": "Wholesaler", "diet": ["Halal", "Gluten-free"],
        "original_price": "45", "price": "19.9", "quantity": 6, "min_order_qty": 2, "distance_km": 8.7,
        "pickup_address": "2 Industrial Rd, Unanderra NSW", "pickup_notes": "Dock 3. Bring ABN.",
        "pickup_start": 120, "pickup_end": 540, "best_before": 600, "expires_at": 600,
        "allergens": [], "cold_chain": True, "b2b": True, "rating": 4.1,
        "tags": ["Cold chain", "B2B"],
    },
]

TIME_FIELDS = ("pickup_start", "pickup_end", "best_before", "expires_at")


def build_deal(data: dict, now: datetime) -> Deal:
    """把相对分钟数换算成绝对时间并构造商品"""
    fields = dict(data)
    for name in TIME_FIELDS:
        fields[name] = in_minutes(fields[name], now)
    fields["original_price"] = Decimal(fields["original_price"])
    fields["price"] = Decimal(fields["price"])
    return Deal(created_at=now, **fields)


def seed_marketplace(market: Optional[MarketplaceService] = None) -> MarketplaceService:
    """Populate a marketplace with the demo partners and deals."""
    market = market or MarketplaceService()
    now = market.clock()

    for partner in PARTNERS:
        market.partners.add_partner(Partner(joined_at=now, **partner))
    for deal in DEALS:
        market.catalog.add_deal(build_deal(deal, now))

    return market
