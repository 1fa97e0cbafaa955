"""
自定义异常类
提供更精确的错误处理和异常信息

所有异常均为调用方可恢复的局部错误，不做自动重试
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """应用基础异常类"""

    default_code = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式，供展示层使用"""
        return {
            "success": False,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(BaseApplicationError):
    """数据验证异常"""
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """资源不存在异常"""
    default_code = "RESOURCE_NOT_FOUND"


class DealNotFoundError(NotFoundError):
    """商品不存在异常"""

    def __init__(self, deal_id: str):
        super().__init__(f"商品 {deal_id} 不存在", "DEAL_NOT_FOUND", {"deal_id": deal_id})


class PartnerNotFoundError(NotFoundError):
    """商家不存在异常"""

    def __init__(self, partner_id: str):
        super().__init__(f"商家 {partner_id} 不存在", "PARTNER_NOT_FOUND", {"partner_id": partner_id})


class CartLineNotFoundError(NotFoundError):
    """购物车条目不存在异常"""

    def __init__(self, deal_id: str):
        super().__init__(f"购物车中没有商品 {deal_id}", "CART_LINE_NOT_FOUND", {"deal_id": deal_id})


class BusinessRuleError(BaseApplicationError):
    """业务规则错误"""
    default_code = "BUSINESS_RULE_VIOLATION"


class InsufficientStockError(BusinessRuleError):
    """库存不足异常"""

    def __init__(self, deal_id: str, available: int, requested: int):
        super().__init__(
            f"商品 {deal_id} 库存不足: 剩余{available}，需要{requested}",
            "INSUFFICIENT_STOCK",
            {"deal_id": deal_id, "available": available, "requested": requested}
        )


class EmptyCartError(BusinessRuleError):
    """空购物车结算异常"""

    def __init__(self):
        super().__init__("购物车为空", "EMPTY_CART")


class PartnerNotApprovedError(BusinessRuleError):
    """商家未通过审核"""

    def __init__(self, partner_id: str):
        super().__init__(
            f"商家 {partner_id} 尚未通过审核",
            "PARTNER_NOT_APPROVED",
            {"partner_id": partner_id}
        )
