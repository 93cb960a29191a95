# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели расчёта стоимости.
"""

from src.shared.models.enums import (
    ServiceType,
    DistanceUnit,
    SurchargeType,
    DiscountType,
    RuleKind,
    LineCategory,
)
from src.shared.models.quote import (
    PackageInfo,
    QuoteRequest,
    PriceLine,
    PriceBreakdown,
)

__all__ = [
    # Enums
    "ServiceType",
    "DistanceUnit",
    "SurchargeType",
    "DiscountType",
    "RuleKind",
    "LineCategory",
    # Quote
    "PackageInfo",
    "QuoteRequest",
    "PriceLine",
    "PriceBreakdown",
]
