"""
Purchasing Services - stock-line persistence and purchasing totals

Usage:
    from purchasing.services import StockService, PurchasingService

    stock = StockService.create(data, purchasing)
    PurchasingService.update(purchasing.pk, PurchasingService.get_updated_price(purchasing))
"""

# Base utilities
from purchasing.services.base_service import (
    ServiceError,
    ValidationError,
    NotFoundError,
    BusinessRuleError,
    PurchasingLockedError,
    round_decimal,
    generate_number,
    BaseService,
)
# Reference data
from .setting_service import SettingService
from .product_service import ProductService

# Purchasing
from .stock_service import StockService
from .purchasing_service import PurchasingService


__all__ = [
    # Base
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "BusinessRuleError",
    "PurchasingLockedError",
    "round_decimal",
    "generate_number",
    "BaseService",

    # Reference data
    "SettingService",
    "ProductService",

    # Purchasing
    "StockService",
    "PurchasingService",
]
