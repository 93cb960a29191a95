# src/core/pricing/__init__.py
"""
Домен тарификации.
Чистый расчёт стоимости доставки по набору тарифных правил.
"""

from src.core.pricing.exceptions import FarePricingError, InvalidRequest, InvalidRuleSet
from src.core.pricing.rules import (
    FareRuleSet,
    PriceRule,
    discount,
    rule_from_config,
    surcharge,
    validate_rule_set,
)
from src.core.pricing.conditions import build_condition
from src.core.pricing.engine import compute_fare, parse_quote_request, validate_request

__all__ = [
    "FarePricingError",
    "InvalidRequest",
    "InvalidRuleSet",
    "FareRuleSet",
    "PriceRule",
    "surcharge",
    "discount",
    "rule_from_config",
    "validate_rule_set",
    "build_condition",
    "compute_fare",
    "parse_quote_request",
    "validate_request",
]
