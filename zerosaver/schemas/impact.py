"""
环保影响估算的输入输出模式
"""

from pydantic import BaseModel, Field


class ImpactItem(BaseModel):
    """参与估算的商品条目"""
    title: str = Field(..., description="商品标题")
    quantity: int = Field(..., ge=0, description="数量")


class ImpactEstimate(BaseModel):
    """估算结果（演示用近似值）"""
    food_kg: float = Field(..., description="减少的食物浪费（公斤）")
    co2e_kg: float = Field(..., description="减少的碳排放当量（公斤）")
