"""
商品目录服务模块
提供折扣商品的发布、查询、筛选、库存变更和过期清理

主要功能：
- 商品创建和验证
- 有效商品列表（按距离排序）
- 关键词/类别/饮食/距离筛选
- 库存扣减与归还
- 过期或售罄商品清理

业务规则：
- 标题不能为空，价格必须大于0
- 库存与起订数量必须为正整数
- 取货开始 <= 取货结束 <= 下架时间
- 只有清理操作会删除商品记录
"""

import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..config.settings import Settings, settings as default_settings
from ..core.clock import Clock, SystemClock, in_minutes, is_expired
from ..core.exceptions import DealNotFoundError, InsufficientStockError, ValidationError
from ..models.deal import Deal, DealCreate
from ..schemas.deal import ALL, DealFilter

logger = logging.getLogger(__name__)

# 发布表单未填写时间时的默认偏移（分钟）
DEFAULT_PICKUP_START_MIN = 30
DEFAULT_PICKUP_END_MIN = 180
DEFAULT_EXPIRES_MIN = 200
DEFAULT_BEST_BEFORE_MIN = 240


def check_quantity(amount, label: str = "数量") -> None:
    """数量必须是不小于1的整数（bool 不算）"""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"{label}必须是整数", details={"amount": repr(amount)})
    if amount < 1:
        raise ValidationError(f"{label}必须大于0", details={"amount": amount})


class DealCatalog:
    """商品目录，独占所有商品记录"""

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Clock] = None):
        self.settings = settings or default_settings
        self.clock = clock or SystemClock()
        self._deals: Dict[str, Deal] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """目录写锁，购物车用它把库存变更和条目变更合并成一步"""
        return self._lock

    def __len__(self) -> int:
        return len(self._deals)

    def __contains__(self, deal_id: str) -> bool:
        return deal_id in self._deals

    def create_deal(self, fields: Union[DealCreate, Dict[str, Any]], vendor: str = "") -> Deal:
        """
        创建新商品

        Args:
            fields: 发布表单字段（DealCreate 或字典）
            vendor: 商家名称快照

        Returns:
            Deal: 已加入目录的商品

        Raises:
            ValidationError: 标题为空、价格不大于0、数量不合法或时间窗口顺序错误时
        """
        payload = self._validate_payload(fields)
        now = self.clock()

        data = payload.model_dump()
        data["pickup_start"] = payload.pickup_start or in_minutes(DEFAULT_PICKUP_START_MIN, now)
        data["pickup_end"] = payload.pickup_end or in_minutes(DEFAULT_PICKUP_END_MIN, now)
        data["expires_at"] = payload.expires_at or in_minutes(DEFAULT_EXPIRES_MIN, now)
        data["best_before"] = payload.best_before or in_minutes(DEFAULT_BEST_BEFORE_MIN, now)
        data["description"] = payload.description[: self.settings.description_limit]
        data["tags"] = self._combine_tags(payload)

        with self._lock:
            data["id"] = self._new_id()
            try:
                deal = Deal(vendor=vendor, created_at=now, **data)
            except PydanticValidationError as e:
                raise ValidationError("商品信息无效", details={"validation_errors": str(e)})
            self._deals[deal.id] = deal

        logger.info("deal created: %s %r qty=%s price=%s", deal.id, deal.title, deal.quantity, deal.price)
        return deal

    def add_deal(self, deal: Deal) -> Deal:
        """直接加入已构造好的商品（种子数据或持久化适配层使用）"""
        with self._lock:
            if deal.id in self._deals:
                raise ValidationError(f"商品ID {deal.id} 已存在", details={"deal_id": deal.id})
            self._deals[deal.id] = deal
        return deal

    def get_deal(self, deal_id: str) -> Deal:
        """获取单个商品"""
        deal = self._deals.get(deal_id)
        if deal is None:
            raise DealNotFoundError(deal_id)
        return deal

    def all_deals(self) -> List[Deal]:
        """目录中全部商品（含已售罄但尚未清理的）"""
        with self._lock:
            return list(self._deals.values())

    def list_active(self, as_of=None) -> List[Deal]:
        """
        有效商品列表：有库存且未过期，按距离升序

        清理任务之间也按当前时间过滤，结果不依赖清理间隔
        """
        if as_of is None:
            as_of = self.clock()
        with self._lock:
            active = [
                d for d in self._deals.values()
                if d.quantity > 0 and not is_expired(d.expires_at, as_of)
            ]
        # sorted 是稳定排序，距离相同时保持插入顺序
        return sorted(active, key=lambda d: d.distance_km)

    def filter(self, deals: Iterable[Deal], filters: Optional[DealFilter] = None, **kwargs) -> List[Deal]:
        """
        按条件筛选商品

        Args:
            deals: 待筛选商品
            filters: 筛选条件，也可以用关键字参数传入（q/category/diet/max_distance_km）

        Returns:
            list: 满足所有条件的商品，保持输入顺序
        """
        if filters is None:
            try:
                filters = DealFilter(**kwargs)
            except PydanticValidationError as e:
                raise ValidationError("筛选条件无效", details={"validation_errors": str(e)})

        query = filters.q.strip().lower()
        result = []
        for deal in deals:
            if filters.category != ALL and deal.category != filters.category:
                continue
            if filters.diet != ALL and filters.diet not in deal.diet:
                continue
            if filters.max_distance_km is not None and deal.distance_km > filters.max_distance_km:
                continue
            if query and query not in deal.search_text():
                continue
            result.append(deal)
        return result

    def decrement_stock(self, deal_id: str, amount: int) -> Deal:
        """
        扣减库存

        Raises:
            ValidationError: 数量不是整数或小于1时
            InsufficientStockError: 数量超过剩余库存时
            DealNotFoundError: 商品不存在时
        """
        check_quantity(amount, "扣减数量")

        with self._lock:
            deal = self.get_deal(deal_id)
            if amount > deal.quantity:
                logger.warning("insufficient stock: %s have=%s need=%s", deal_id, deal.quantity, amount)
                raise InsufficientStockError(deal_id, deal.quantity, amount)
            deal.quantity -= amount

        logger.info("stock reserved: %s qty=%s (remaining=%s)", deal_id, amount, deal.quantity)
        return deal

    def restore_stock(self, deal_id: str, amount: int) -> Deal:
        """归还库存，不受原始库存上限约束"""
        check_quantity(amount, "归还数量")

        with self._lock:
            deal = self.get_deal(deal_id)
            deal.quantity += amount

        logger.info("stock released: %s qty=%s (remaining=%s)", deal_id, amount, deal.quantity)
        return deal

    def sweep_expired(self, as_of=None) -> List[Deal]:
        """
        清理售罄或已过期的商品

        Returns:
            list: 被移除的商品
        """
        if as_of is None:
            as_of = self.clock()
        with self._lock:
            removed = [
                d for d in self._deals.values()
                if d.quantity == 0 or is_expired(d.expires_at, as_of)
            ]
            for deal in removed:
                del self._deals[deal.id]

        if removed:
            logger.info("sweep removed %d deal(s): %s", len(removed), ", ".join(d.id for d in removed))
        return removed

    def _validate_payload(self, fields: Union[DealCreate, Dict[str, Any]]) -> DealCreate:
        """校验发布表单"""
        if isinstance(fields, DealCreate):
            return fields
        try:
            return DealCreate.model_validate(fields)
        except PydanticValidationError as e:
            logger.warning("deal rejected: %s", e.errors(include_url=False))
            raise ValidationError("请填写标题和价格", details={"validation_errors": str(e)})

    def _combine_tags(self, payload: DealCreate) -> List[str]:
        """合并自定义标签与 B2B / 冷链 标签，去重并保持顺序"""
        tags = list(payload.tags)
        if payload.b2b:
            tags.append("B2B")
        if payload.cold_chain:
            tags.append("Cold chain")
        return list(dict.fromkeys(tags))

    def _new_id(self) -> str:
        while True:
            deal_id = uuid.uuid4().hex[:8]
            if deal_id not in self._deals:
                return deal_id
