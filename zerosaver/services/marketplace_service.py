"""
交易市场服务
把商品目录、商家注册表、购物车、环保估算和销售统计组合成一个服务实例，
供展示层或持久化适配层直接调用

主要功能：
- 商家发布商品（需已通过审核）
- 消费者浏览（仅显示已审核商家的有效商品）
- 预订、移除、结算
- 过期清理与定时任务
- 销售与环保统计
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..config.settings import Settings, settings as default_settings
from ..core.clock import Clock, SystemClock, is_expired, minutes_left
from ..core.exceptions import DealNotFoundError, PartnerNotApprovedError, ValidationError
from ..core.scheduler import ExpirySweeper
from ..models.cart import CartLine, ReservationConfirmation
from ..models.deal import Deal, DealCreate
from ..schemas.analytics import SalesSummary
from ..schemas.deal import DealFilter
from ..schemas.impact import ImpactEstimate
from .analytics_service import SalesAnalytics
from .cart_service import ReservationCart
from .catalog_service import DealCatalog
from .impact_service import ImpactEstimator
from .partner_service import PartnerRegistry

logger = logging.getLogger(__name__)


class MarketplaceService:
    """交易市场服务，持有全部内存状态"""

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Clock] = None):
        self.settings = settings or default_settings
        self.clock = clock or SystemClock()
        self.catalog = DealCatalog(self.settings, self.clock)
        self.partners = PartnerRegistry(self.clock)
        self.estimator = ImpactEstimator(self.settings)
        self.analytics = SalesAnalytics(self.estimator)
        self._carts: Dict[str, ReservationCart] = {}

    # ---- 商家 ----

    def publish_deal(self, fields: Union[DealCreate, Dict[str, Any]]) -> Deal:
        """
        商家发布商品

        Raises:
            ValidationError: 缺少商家ID或表单无效时
            PartnerNotFoundError: 商家不存在时
            PartnerNotApprovedError: 商家尚未通过审核时
        """
        partner_id = fields.partner_id if isinstance(fields, DealCreate) else fields.get("partner_id")
        if not partner_id:
            raise ValidationError("缺少商家ID")

        partner = self.partners.get_partner(partner_id)
        if not partner.approved:
            logger.warning("publish rejected: partner %s is %s", partner_id, partner.status)
            raise PartnerNotApprovedError(partner_id)

        return self.catalog.create_deal(fields, vendor=partner.name)

    # ---- 消费者 ----

    def browse(self, filters: Optional[DealFilter] = None, as_of=None, **kwargs) -> List[Deal]:
        """有效商品 -> 已审核商家 -> 筛选条件，按距离升序"""
        active = self.catalog.list_active(as_of)
        visible = self.partners.visible_deals(active)
        return self.catalog.filter(visible, filters, **kwargs)

    def cart(self, consumer_id: str = "guest") -> ReservationCart:
        """获取（必要时创建）消费者的购物车"""
        with self.catalog.lock:
            cart = self._carts.get(consumer_id)
            if cart is None:
                cart = ReservationCart(self.catalog, consumer_id, self.clock)
                self._carts[consumer_id] = cart
            return cart

    def reserve(self, consumer_id: str, deal_id: str, qty: Optional[int] = None) -> Optional[CartLine]:
        """
        预订商品，qty 为空时按起订数量预订

        Raises:
            DealNotFoundError: 商品不存在或已过期时
            PartnerNotApprovedError: 商品所属商家未通过审核时
        """
        deal = self.catalog.get_deal(deal_id)
        if is_expired(deal.expires_at, self.clock()):
            raise DealNotFoundError(deal_id)
        if not self.partners.is_approved(deal.partner_id):
            raise PartnerNotApprovedError(deal.partner_id)

        cart = self.cart(consumer_id)
        if qty is None:
            return cart.reserve_default(deal)
        return cart.reserve(deal, qty)

    def remove(self, consumer_id: str, deal_id: str) -> Optional[CartLine]:
        return self.cart(consumer_id).remove(deal_id)

    def checkout(self, consumer_id: str) -> ReservationConfirmation:
        """结算并记录到销售统计"""
        confirmation = self.cart(consumer_id).checkout()
        self.analytics.record(confirmation)
        return confirmation

    def cart_total(self, consumer_id: str) -> Decimal:
        return self.cart(consumer_id).total()

    def cart_impact(self, consumer_id: str) -> ImpactEstimate:
        return self.estimator.estimate(self.cart(consumer_id).lines)

    def reserved_quantity(self, deal_id: str) -> int:
        """所有购物车中某商品的预订总数"""
        with self.catalog.lock:
            return sum(cart.quantity_for(deal_id) for cart in self._carts.values())

    def minutes_left(self, deal_id: str, as_of=None) -> int:
        deal = self.catalog.get_deal(deal_id)
        return minutes_left(deal.expires_at, as_of if as_of is not None else self.clock())

    # ---- 清理与统计 ----

    def sweep(self, as_of=None) -> List[Deal]:
        return self.catalog.sweep_expired(as_of)

    def sweeper(self, interval_seconds: Optional[float] = None) -> ExpirySweeper:
        """创建过期清理定时任务（未启动）"""
        return ExpirySweeper(
            self.catalog,
            interval_seconds or self.settings.sweep_interval_seconds,
            self.clock
        )

    def sales_summary(self) -> SalesSummary:
        return self.analytics.summary()
