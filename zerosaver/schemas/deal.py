"""
商品浏览相关的请求模式
"""

from pydantic import BaseModel, Field
from typing import Optional

# 表示不过滤的哨兵值
ALL = "All"


class DealFilter(BaseModel):
    """商品筛选条件"""
    q: str = Field("", description="关键词，匹配商家名/标题/类别/标签")
    category: str = Field(ALL, description="类别过滤")
    diet: str = Field(ALL, description="饮食标签过滤")
    max_distance_km: Optional[float] = Field(None, ge=0, description="最大距离（含），为空表示不限")

    @property
    def is_default(self) -> bool:
        """是否所有条件都是默认值"""
        return (
            not self.q
            and self.category == ALL
            and self.diet == ALL
            and self.max_distance_km is None
        )
