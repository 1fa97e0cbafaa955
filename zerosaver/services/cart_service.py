"""
预订购物车服务模块
协调消费者的预订条目与商品目录库存

主要功能：
- 预订（超量请求自动截断到剩余库存）
- 移除条目并归还库存
- 结算（清空购物车，不归还库存）
- 金额汇总

业务规则：
- 同一商品只保留一个条目，重复预订累加数量
- 库存扣减与条目变更在目录锁内一步完成
- 每件商品：剩余库存 + 各购物车预订数 = 上次结算或创建时的库存
"""

import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional, Union

from ..core.clock import Clock
from ..core.exceptions import CartLineNotFoundError, DealNotFoundError, EmptyCartError, ValidationError
from ..models.cart import CartLine, ReservationConfirmation
from ..models.deal import Deal
from .catalog_service import DealCatalog

logger = logging.getLogger(__name__)


def clamp(n: int, low: int, high: int) -> int:
    return min(max(n, low), high)


class ReservationCart:
    """单个消费者的预订购物车，独占自己的条目"""

    def __init__(self, catalog: DealCatalog, consumer_id: str = "guest", clock: Optional[Clock] = None):
        self.catalog = catalog
        self.consumer_id = consumer_id
        self.clock = clock or catalog.clock
        self._lines: Dict[str, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def get_line(self, deal_id: str) -> CartLine:
        """获取条目，不存在时抛出 CartLineNotFoundError"""
        line = self._lines.get(deal_id)
        if line is None:
            raise CartLineNotFoundError(deal_id)
        return line

    def quantity_for(self, deal_id: str) -> int:
        """某商品在购物车中的预订数量"""
        line = self._lines.get(deal_id)
        return line.quantity if line else 0

    def reserve(self, deal: Union[Deal, str], requested_qty: int = 1) -> Optional[CartLine]:
        """
        预订商品

        Args:
            deal: 商品或商品ID，以目录中的最新库存为准
            requested_qty: 请求数量，会被截断到 [1, 剩余库存]

        Returns:
            CartLine: 更新后的条目；商品已无库存时返回 None

        Raises:
            DealNotFoundError: 商品不在目录中时
            ValidationError: 请求数量不是整数时
        """
        deal_id = deal.id if isinstance(deal, Deal) else deal
        if isinstance(requested_qty, bool) or not isinstance(requested_qty, int):
            raise ValidationError("预订数量必须是整数", details={"requested_qty": repr(requested_qty)})

        with self.catalog.lock:
            live = self.catalog.get_deal(deal_id)
            if live.quantity < 1:
                logger.info("[consumer=%s] reserve skipped: %s out of stock", self.consumer_id, deal_id)
                return None

            take = clamp(requested_qty, 1, live.quantity)

            # 先准备好条目，扣减失败时目录和购物车都保持不变
            line = self._lines.get(deal_id)
            created = line is None
            if created:
                line = CartLine(
                    deal_id=live.id,
                    title=live.title,
                    price=live.price,
                    vendor=live.vendor,
                    category=live.category,
                    quantity=take
                )
            self.catalog.decrement_stock(deal_id, take)

            if created:
                self._lines[deal_id] = line
            else:
                line.quantity += take

        if take != requested_qty:
            logger.info("[consumer=%s] requested %s of %s, clamped to %s",
                        self.consumer_id, requested_qty, deal_id, take)
        logger.info("[consumer=%s] reserved %s x%s (line qty=%s)", self.consumer_id, deal_id, take, line.quantity)
        return line

    def reserve_default(self, deal: Union[Deal, str]) -> Optional[CartLine]:
        """按商品起订数量预订（对应页面上的“预订”按钮）"""
        deal_id = deal.id if isinstance(deal, Deal) else deal
        live = self.catalog.get_deal(deal_id)
        return self.reserve(live, live.min_order_qty)

    def remove(self, deal_id: str) -> Optional[CartLine]:
        """
        移除条目并归还库存，条目不存在时什么也不做

        Returns:
            CartLine: 被移除的条目；条目不存在时返回 None
        """
        with self.catalog.lock:
            line = self._lines.pop(deal_id, None)
            if line is None:
                return None
            try:
                self.catalog.restore_stock(deal_id, line.quantity)
            except DealNotFoundError:
                # 商品已被清理，库存随商品一起下架
                logger.warning("[consumer=%s] %s no longer in catalog, %s unit(s) not restored",
                               self.consumer_id, deal_id, line.quantity)

        logger.info("[consumer=%s] removed %s x%s", self.consumer_id, deal_id, line.quantity)
        return line

    def checkout(self) -> ReservationConfirmation:
        """
        结算：清空购物车并生成确认码

        已扣减的库存视为售出，不再归还

        Raises:
            EmptyCartError: 购物车为空时
        """
        with self.catalog.lock:
            if not self._lines:
                raise EmptyCartError()

            confirmation = ReservationConfirmation(
                token=uuid.uuid4().hex[:10].upper(),
                consumer_id=self.consumer_id,
                lines=[line.model_copy() for line in self._lines.values()],
                total=self.total(),
                confirmed_at=self.clock()
            )
            self._lines.clear()

        logger.info("[consumer=%s] checkout confirmed: token=%s items=%s total=%s",
                    self.consumer_id, confirmation.token, confirmation.item_count, confirmation.total)
        return confirmation

    def total(self) -> Decimal:
        """购物车总金额"""
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))
