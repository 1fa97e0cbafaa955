"""
销售统计服务
汇总已确认的预订：订单数、售出件数、销售额、减少的浪费和按类别统计
"""

import logging
import threading
from decimal import Decimal
from typing import Dict, List, Optional

from ..models.cart import ReservationConfirmation
from ..schemas.analytics import CategoryStats, SalesSummary
from .impact_service import ImpactEstimator

logger = logging.getLogger(__name__)


class SalesAnalytics:
    """销售统计"""

    def __init__(self, estimator: Optional[ImpactEstimator] = None):
        self.estimator = estimator or ImpactEstimator()
        self._confirmations: List[ReservationConfirmation] = []
        self._lock = threading.Lock()

    def record(self, confirmation: ReservationConfirmation) -> None:
        """记录一次结算"""
        with self._lock:
            self._confirmations.append(confirmation)
        logger.debug("recorded confirmation %s", confirmation.token)

    @property
    def confirmations(self) -> List[ReservationConfirmation]:
        with self._lock:
            return list(self._confirmations)

    def summary(self) -> SalesSummary:
        """生成销售汇总，类别按销售额降序"""
        confirmations = self.confirmations
        lines = [line for c in confirmations for line in c.lines]

        categories: Dict[str, CategoryStats] = {}
        for confirmation in confirmations:
            seen = set()
            for line in confirmation.lines:
                key = line.category or "Other"
                stats = categories.setdefault(key, CategoryStats(category=key))
                stats.items_sold += line.quantity
                stats.revenue += line.line_total
                if key not in seen:
                    stats.orders += 1
                    seen.add(key)

        impact = self.estimator.estimate(lines)
        return SalesSummary(
            total_orders=len(confirmations),
            items_sold=sum(line.quantity for line in lines),
            revenue=sum((c.total for c in confirmations), Decimal("0")),
            food_saved_kg=impact.food_kg,
            co2e_saved_kg=impact.co2e_kg,
            categories=sorted(categories.values(), key=lambda s: s.revenue, reverse=True)
        )
