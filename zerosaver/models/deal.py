"""
折扣商品相关数据模型
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from enum import Enum
from ..core.clock import as_utc
from .base import BaseEntity, TimestampMixin


class DealCategory(str, Enum):
    """商品类别枚举"""
    BENTO = "Bento"
    BAKERY = "Bakery"
    GROCER = "Grocer"
    CAFE = "Café"
    RESTAURANT = "Restaurant"
    WHOLESALER = "Wholesaler"


class DietTag(str, Enum):
    """饮食标签枚举"""
    VEGAN = "Vegan"
    VEGETARIAN = "Vegetarian"
    GLUTEN_FREE = "Gluten-free"
    HALAL = "Halal"


class DealBase(BaseModel):
    """商品基础字段"""
    partner_id: str = Field(..., description="所属商家ID")
    title: str = Field(..., description="商品标题")
    description: str = Field("", description="商品描述")
    image_url: Optional[str] = Field(None, description="图片地址")
    category: DealCategory = Field(DealCategory.RESTAURANT, description="商品类别")
    diet: List[DietTag] = Field(default_factory=list, description="饮食标签")
    original_price: Decimal = Field(Decimal("0"), ge=0, description="原价")
    distance_km: float = Field(1.0, ge=0, description="距离（公里）")
    pickup_address: str = Field("", description="取货地址")
    pickup_notes: str = Field("", description="取货说明")
    allergens: List[str] = Field(default_factory=list, description="过敏原")
    cold_chain: bool = Field(False, description="是否需要冷链")
    b2b: bool = Field(False, description="是否仅限企业客户")
    tags: List[str] = Field(default_factory=list, description="自定义标签")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """标题不能为空"""
        v = v.strip()
        if not v:
            raise ValueError("标题不能为空")
        return v

    @field_validator("pickup_start", "pickup_end", "best_before", "expires_at", check_fields=False)
    @classmethod
    def validate_timezone(cls, v):
        """不带时区的时间按UTC处理"""
        return as_utc(v) if v is not None else v


class DealCreate(DealBase):
    """商品创建模型（商家发布表单）"""
    price: Decimal = Field(..., gt=0, description="折后价")
    quantity: int = Field(1, ge=1, description="库存数量")
    min_order_qty: int = Field(1, ge=1, description="起订数量")
    pickup_start: Optional[datetime] = Field(None, description="取货开始时间")
    pickup_end: Optional[datetime] = Field(None, description="取货结束时间")
    best_before: Optional[datetime] = Field(None, description="最佳食用期限")
    expires_at: Optional[datetime] = Field(None, description="下架时间")

    @model_validator(mode="after")
    def validate_min_order(self):
        """起订数量不能超过库存"""
        if self.min_order_qty > self.quantity:
            raise ValueError("起订数量不能超过库存数量")
        return self


class Deal(DealBase, BaseEntity, TimestampMixin):
    """商品完整模型"""
    id: str = Field(..., description="商品ID")
    vendor: str = Field("", description="商家名称")
    price: Decimal = Field(..., ge=0, description="折后价")
    quantity: int = Field(..., ge=0, description="剩余库存")
    min_order_qty: int = Field(1, ge=1, description="起订数量")
    pickup_start: datetime = Field(..., description="取货开始时间")
    pickup_end: datetime = Field(..., description="取货结束时间")
    best_before: Optional[datetime] = Field(None, description="最佳食用期限")
    expires_at: datetime = Field(..., description="下架时间")
    rating: Optional[float] = Field(None, ge=0, le=5, description="评分")

    @model_validator(mode="after")
    def validate_pickup_window(self):
        """取货开始 <= 取货结束 <= 下架时间"""
        if self.pickup_start > self.pickup_end:
            raise ValueError("取货开始时间不能晚于结束时间")
        if self.pickup_end > self.expires_at:
            raise ValueError("取货结束时间不能晚于下架时间")
        return self

    @property
    def in_stock(self) -> bool:
        """是否有货"""
        return self.quantity > 0

    @property
    def discount_pct(self) -> int:
        """折扣百分比"""
        if self.original_price <= 0:
            return 0
        return round((1 - self.price / self.original_price) * 100)

    def search_text(self) -> str:
        """用于文本检索的拼接字符串"""
        return (self.vendor + self.title + self.category + " ".join(self.tags)).lower()
