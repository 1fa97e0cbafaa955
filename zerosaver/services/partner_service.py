"""
商家注册服务
处理商家入驻、审核状态和可见性过滤
"""

import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..core.clock import Clock, SystemClock
from ..core.exceptions import PartnerNotFoundError, ValidationError
from ..models.deal import Deal
from ..models.partner import Partner, PartnerCreate, PartnerStatus

logger = logging.getLogger(__name__)


class PartnerRegistry:
    """商家注册表"""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._partners: Dict[str, Partner] = {}
        self._lock = threading.RLock()

    def register(self, data: Union[PartnerCreate, Dict[str, Any]]) -> Partner:
        """提交入驻申请，新商家为待审核状态"""
        if not isinstance(data, PartnerCreate):
            try:
                data = PartnerCreate.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError("商家信息无效", details={"validation_errors": str(e)})

        with self._lock:
            partner = Partner(
                id=uuid.uuid4().hex[:8],
                status=PartnerStatus.PENDING,
                joined_at=self.clock(),
                **data.model_dump()
            )
            self._partners[partner.id] = partner

        logger.info("partner registered: %s %r (pending)", partner.id, partner.name)
        return partner

    def add_partner(self, partner: Partner) -> Partner:
        """直接加入已有商家（种子数据或持久化适配层使用）"""
        with self._lock:
            if partner.id in self._partners:
                raise ValidationError(f"商家ID {partner.id} 已存在", details={"partner_id": partner.id})
            self._partners[partner.id] = partner
        return partner

    def get_partner(self, partner_id: str) -> Partner:
        partner = self._partners.get(partner_id)
        if partner is None:
            raise PartnerNotFoundError(partner_id)
        return partner

    def is_approved(self, partner_id: str) -> bool:
        """商家是否已通过审核，未知商家视为未通过"""
        partner = self._partners.get(partner_id)
        return partner is not None and partner.approved

    def set_approval(self, partner_id: str, approved: bool) -> Partner:
        """
        设置审核结果（管理员操作，权限校验由外部负责）

        Raises:
            PartnerNotFoundError: 商家不存在时
        """
        status = PartnerStatus.APPROVED if approved else PartnerStatus.REJECTED
        return self._set_status(partner_id, status)

    def approve(self, partner_id: str) -> Partner:
        return self.set_approval(partner_id, True)

    def reject(self, partner_id: str) -> Partner:
        return self.set_approval(partner_id, False)

    def list_partners(self, status: Optional[Union[PartnerStatus, str]] = None) -> List[Partner]:
        """按状态列出商家，status 为空时返回全部"""
        with self._lock:
            partners = list(self._partners.values())
        if status is None:
            return partners
        return [p for p in partners if p.status == status]

    def counts(self) -> Dict[str, int]:
        """各审核状态的商家数量"""
        result = {"total": 0}
        result.update({s.value: 0 for s in PartnerStatus})
        for partner in self.list_partners():
            result["total"] += 1
            result[PartnerStatus(partner.status).value] += 1
        return result

    def visible_deals(self, deals: Iterable[Deal]) -> List[Deal]:
        """只保留已审核商家的商品"""
        return [d for d in deals if self.is_approved(d.partner_id)]

    def _set_status(self, partner_id: str, status: PartnerStatus) -> Partner:
        with self._lock:
            partner = self.get_partner(partner_id)
            previous = partner.status
            partner.status = status.value

        logger.info("partner %s status: %s -> %s", partner_id, previous, status.value)
        return partner
