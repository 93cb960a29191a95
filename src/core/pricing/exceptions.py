# src/core/pricing/exceptions.py
"""
Ошибки расчёта стоимости.
"""

from __future__ import annotations


class FarePricingError(ValueError):
    """Базовая ошибка движка тарификации."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class InvalidRequest(FarePricingError):
    """Некорректный запрос: расстояние, вес, габариты, тип услуги, валюта."""


class InvalidRuleSet(FarePricingError):
    """Некорректный набор тарифных правил."""
