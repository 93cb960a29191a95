# src/core/__init__.py
"""
Доменный слой (Core Domain).
Чистая бизнес-логика, независимая от инфраструктуры.
"""

from src.core.pricing import FareRuleSet, PriceRule, compute_fare

__all__ = [
    "FareRuleSet",
    "PriceRule",
    "compute_fare",
]
