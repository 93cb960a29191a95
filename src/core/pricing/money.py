# src/core/pricing/money.py
"""
Денежные утилиты: перевод в Decimal и округление по валюте.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from src.common.constants import CURRENCY_MINOR_UNITS, DEFAULT_MINOR_UNITS, KM_PER_MILE
from src.shared.models.enums import DistanceUnit

ZERO = Decimal("0")
HUNDRED = Decimal("100")

CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")


def to_decimal(value: float | int | str | Decimal) -> Decimal:
    """
    Переводит число в Decimal через строковое представление,
    чтобы 5.2 стало Decimal("5.2"), а не двоичным приближением.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_currency_code(value: object) -> bool:
    """Трёхбуквенный код ISO 4217 в верхнем регистре."""
    return isinstance(value, str) and CURRENCY_CODE_RE.match(value) is not None


def minor_units(currency: str) -> int:
    """Количество знаков после запятой для валюты."""
    return CURRENCY_MINOR_UNITS.get(currency.upper(), DEFAULT_MINOR_UNITS)


def round_money(amount: Decimal, currency: str) -> Decimal:
    """Округление half-up до минимальной единицы валюты."""
    quantum = Decimal(1).scaleb(-minor_units(currency))
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def percent_of(base: Decimal, percent: Decimal) -> Decimal:
    """percent процентов от base (10 -> 10%)."""
    return base * percent / HUNDRED


def convert_distance(distance: Decimal, source: DistanceUnit, target: DistanceUnit) -> Decimal:
    """Перевод расстояния между километрами и милями."""
    if source == target:
        return distance
    if source == DistanceUnit.MILE:
        return distance * KM_PER_MILE
    return distance / KM_PER_MILE
