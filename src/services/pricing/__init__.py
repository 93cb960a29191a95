# src/services/pricing/__init__.py
"""
Pricing Service: расчёт стоимости доставки по тарифам из конфигурации.
"""

from src.services.pricing.service import PricingService, build_rule_set, build_rule_sets

__all__ = [
    "PricingService",
    "build_rule_set",
    "build_rule_sets",
]
