"""
环保影响估算服务
按商品件数粗略估算减少的食物浪费和碳排放（演示用近似值）
"""

from typing import Any, Iterable, Mapping, Optional, Union

from ..config.settings import Settings, settings as default_settings
from ..schemas.impact import ImpactEstimate, ImpactItem


ItemLike = Union[ImpactItem, Mapping[str, Any], Any]


class ImpactEstimator:
    """环保影响估算器，系数来自配置"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def item_kg(self, title: str) -> float:
        """单件重量：标题含大包装标记（默认 5kg）按 5kg 计，否则按 0.4kg 计"""
        if self.settings.bulk_weight_pattern in title:
            return self.settings.bulk_item_kg
        return self.settings.default_item_kg

    def estimate(self, items: Iterable[ItemLike]) -> ImpactEstimate:
        """
        估算一组商品的环保影响

        Args:
            items: 含 title 和 quantity 的条目（ImpactItem、字典或购物车条目）

        Returns:
            ImpactEstimate: food_kg 和 co2e_kg
        """
        food_kg = 0.0
        for item in items:
            entry = self._to_item(item)
            food_kg += self.item_kg(entry.title) * entry.quantity

        co2e_kg = food_kg * self.settings.co2e_factor
        return ImpactEstimate(food_kg=round(food_kg, 3), co2e_kg=round(co2e_kg, 3))

    @staticmethod
    def _to_item(item: ItemLike) -> ImpactItem:
        if isinstance(item, ImpactItem):
            return item
        if isinstance(item, Mapping):
            return ImpactItem.model_validate(item)
        return ImpactItem(title=item.title, quantity=item.quantity)
