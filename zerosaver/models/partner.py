"""
商家相关数据模型
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from enum import Enum
from .base import BaseEntity


class PartnerStatus(str, Enum):
    """商家审核状态枚举"""
    PENDING = "pending"     # 待审核
    APPROVED = "approved"   # 已通过
    REJECTED = "rejected"   # 已拒绝


class PartnerCreate(BaseModel):
    """商家入驻申请"""
    name: str = Field(..., description="商家名称")
    category: str = Field("Restaurant", description="商家类型")
    email: Optional[str] = Field(None, description="联系邮箱")
    phone: Optional[str] = Field(None, description="联系电话")
    address: Optional[str] = Field(None, description="地址")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("商家名称不能为空")
        return v


class Partner(BaseEntity):
    """商家完整模型"""
    id: str = Field(..., description="商家ID")
    name: str = Field(..., description="商家名称")
    category: str = Field("Restaurant", description="商家类型")
    status: PartnerStatus = Field(PartnerStatus.PENDING, description="审核状态")
    email: Optional[str] = Field(None, description="联系邮箱")
    phone: Optional[str] = Field(None, description="联系电话")
    address: Optional[str] = Field(None, description="地址")
    joined_at: Optional[datetime] = Field(None, description="入驻时间")

    @property
    def approved(self) -> bool:
        """是否已通过审核"""
        return self.status == PartnerStatus.APPROVED
