"""
Business logic services.
Contains service layer implementations for the deal marketplace core.
"""

from .analytics_service import SalesAnalytics
from .cart_service import ReservationCart
from .catalog_service import DealCatalog
from .impact_service import ImpactEstimator
from .marketplace_service import MarketplaceService
from .partner_service import PartnerRegistry

__all__ = [
    "DealCatalog",
    "ImpactEstimator",
    "MarketplaceService",
    "PartnerRegistry",
    "ReservationCart",
    "SalesAnalytics",
]
