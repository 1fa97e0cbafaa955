import pytest
import threading
from decimal import Decimal

from zerosaver.core.clock import in_minutes
from zerosaver.core.exceptions import (
    DealNotFoundError,
    PartnerNotApprovedError,
    PartnerNotFoundError,
    ValidationError,
)
from zerosaver.schemas.deal import DealFilter


class TestMarketplaceService:
    """交易市场服务测试"""

    def test_browse_hides_unapproved_partners(self, market):
        """测试浏览只返回已审核商家的有效商品，按距离排序"""
        assert [d.id for d in market.browse()] == ["d2", "d1", "d4", "d3"]

        market.partners.approve("v5")
        assert [d.id for d in market.browse()] == ["d2", "d1", "d4", "d3", "d5"]

    def test_browse_with_filters(self, market):
        assert [d.id for d in market.browse(DealFilter(q="sushi"))] == ["d1"]
        assert [d.id for d in market.browse(diet="Vegetarian", max_distance_km=3)] == ["d2", "d4"]
        assert [d.id for d in market.browse(category="Grocer")] == ["d3"]

    def test_browse_as_of_later_time(self, market, clock):
        later = in_minutes(150, clock())
        assert [d.id for d in market.browse(as_of=later)] == ["d1", "d4", "d3"]

    def test_publish_deal_requires_approved_partner(self, market):
        fields = {"partner_id": "v5", "title": "Chicken thighs (5kg)", "price": "15", "quantity": 4}
        with pytest.raises(PartnerNotApprovedError):
            market.publish_deal(fields)

        with pytest.raises(PartnerNotFoundError):
            market.publish_deal({**fields, "partner_id": "nobody"})

        with pytest.raises(ValidationError):
            market.publish_deal({"title": "No partner", "price": "1"})

        market.partners.approve("v5")
        deal = market.publish_deal(fields)
        assert deal.vendor == "Aussie Foods Wholesale"
        assert deal in market.browse()

    def test_publish_invalid_deal(self, market):
        with pytest.raises(ValidationError):
            market.publish_deal({"partner_id": "v1", "title": "", "price": "5"})

    def test_reserve_remove_checkout(self, market):
        """测试消费者预订、移除和结算流程"""
        market.reserve("alice", "d2", 3)
        market.reserve("alice", "d1")
        assert market.cart_total("alice") == Decimal("25.5")
        assert market.reserved_quantity("d2") == 3

        market.remove("alice", "d1")
        assert market.catalog.get_deal("d1").quantity == 12

        confirmation = market.checkout("alice")
        assert confirmation.total == Decimal("18")
        assert market.catalog.get_deal("d2").quantity == 5
        assert market.cart("alice").is_empty

    def test_reserve_uses_min_order_by_default(self, market):
        market.partners.approve("v5")
        line = market.reserve("bob", "d5")
        assert line.quantity == 2

    def test_reserve_rejects_hidden_or_expired_deals(self, market, clock):
        with pytest.raises(PartnerNotApprovedError):
            market.reserve("bob", "d5", 1)

        clock.advance(minutes=120)
        with pytest.raises(DealNotFoundError):
            market.reserve("bob", "d2", 1)

    def test_carts_are_per_consumer(self, market):
        market.reserve("alice", "d3", 4)
        market.reserve("bob", "d3", 6)

        assert market.cart("alice").quantity_for("d3") == 4
        assert market.cart("bob").quantity_for("d3") == 6
        assert market.catalog.get_deal("d3").quantity + market.reserved_quantity("d3") == 20

    def test_concurrent_first_reserves_share_one_cart(self, market):
        """测试同一消费者的并发首次预订落在同一个购物车"""
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            market.reserve("carol", "d3", 1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert market.cart("carol").quantity_for("d3") == 8
        assert market.catalog.get_deal("d3").quantity == 12
        assert market.catalog.get_deal("d3").quantity + market.reserved_quantity("d3") == 20

    def test_cart_impact(self, market):
        market.partners.approve("v5")
        market.reserve("carol", "d2", 2)
        market.reserve("carol", "d5", 1)

        impact = market.cart_impact("carol")
        assert impact.food_kg == pytest.approx(5.8)
        assert impact.co2e_kg == pytest.approx(14.5)

    def test_sweep_and_minutes_left(self, market, clock):
        assert market.minutes_left("d2") == 120
        clock.advance(minutes=130)
        assert market.minutes_left("d2") == 0

        removed = market.sweep()
        assert [d.id for d in removed] == ["d2"]
        with pytest.raises(DealNotFoundError):
            market.catalog.get_deal("d2")

    def test_sales_summary(self, market):
        """测试结算后的销售统计"""
        market.reserve("alice", "d2", 2)
        market.reserve("alice", "d1", 1)
        market.checkout("alice")
        market.reserve("bob", "d2", 1)
        market.checkout("bob")

        summary = market.sales_summary()
        assert summary.total_orders == 2
        assert summary.items_sold == 4
        assert summary.revenue == Decimal("25.5")
        assert summary.food_saved_kg == pytest.approx(1.6)
        assert summary.co2e_saved_kg == pytest.approx(4.0)
        assert [(c.category, c.orders, c.revenue) for c in summary.categories] == [
            ("Bakery", 2, Decimal("18")),
            ("Restaurant", 1, Decimal("7.5")),
        ]
