"""
购物车与预订确认数据模型
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import List
from .base import BaseEntity


class CartLine(BaseEntity):
    """购物车条目，保存预订时的商品快照"""
    deal_id: str = Field(..., description="商品ID")
    title: str = Field(..., description="商品标题快照")
    price: Decimal = Field(..., ge=0, description="单价快照")
    vendor: str = Field("", description="商家名称快照")
    category: str = Field("", description="商品类别快照")
    quantity: int = Field(..., ge=1, description="预订数量")

    @property
    def line_total(self) -> Decimal:
        """条目小计"""
        return self.price * self.quantity


class ReservationConfirmation(BaseModel):
    """预订确认（结算后生成，演示中不涉及真实支付）"""
    token: str = Field(..., description="确认码")
    consumer_id: str = Field(..., description="消费者ID")
    lines: List[CartLine] = Field(..., description="已确认的条目")
    total: Decimal = Field(..., description="总金额")
    confirmed_at: datetime = Field(..., description="确认时间")

    @property
    def item_count(self) -> int:
        """确认的商品总件数"""
        return sum(line.quantity for line in self.lines)
