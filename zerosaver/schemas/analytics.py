"""
销售统计响应模式
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List


class CategoryStats(BaseModel):
    """按类别汇总"""
    category: str = Field(..., description="商品类别")
    orders: int = Field(0, description="包含该类别的订单数")
    items_sold: int = Field(0, description="售出件数")
    revenue: Decimal = Field(Decimal("0"), description="销售额")


class SalesSummary(BaseModel):
    """销售汇总"""
    total_orders: int = Field(..., description="总订单数")
    items_sold: int = Field(..., description="售出总件数")
    revenue: Decimal = Field(..., description="总销售额")
    food_saved_kg: float = Field(..., description="减少的食物浪费（公斤）")
    co2e_saved_kg: float = Field(..., description="减少的碳排放当量（公斤）")
    categories: List[CategoryStats] = Field(default_factory=list, description="按销售额降序的类别统计")
