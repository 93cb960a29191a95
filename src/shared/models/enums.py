# src/shared/models/enums.py
"""
Перечисления, общие для запросов и расчётов стоимости.
"""

from enum import Enum


class ServiceType(str, Enum):
    """Типы курьерских услуг."""
    STANDARD = "STANDARD"
    EXPRESS = "EXPRESS"
    OVERNIGHT = "OVERNIGHT"
    SAME_DAY = "SAME_DAY"
    SCHEDULED = "SCHEDULED"
    WHITE_GLOVE = "WHITE_GLOVE"
    # Специализированные услуги
    FRAGILE = "FRAGILE"
    FOOD_DELIVERY = "FOOD_DELIVERY"
    PHARMACEUTICAL = "PHARMACEUTICAL"
    DOCUMENTS = "DOCUMENTS"
    FURNITURE = "FURNITURE"
    INTERNATIONAL = "INTERNATIONAL"

    def __str__(self) -> str:
        return self.value


class DistanceUnit(str, Enum):
    """Единица измерения расстояния."""
    KM = "KM"
    MILE = "MILE"

    def __str__(self) -> str:
        return self.value


class SurchargeType(str, Enum):
    """Типы надбавок."""
    FUEL = "FUEL"
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"
    NIGHT = "NIGHT"
    RUSH_HOUR = "RUSH_HOUR"
    HEAVY_PACKAGE = "HEAVY_PACKAGE"
    FRAGILE = "FRAGILE"
    STAIRS = "STAIRS"
    WAITING_TIME = "WAITING_TIME"
    TOLL = "TOLL"
    PARKING = "PARKING"

    def __str__(self) -> str:
        return self.value


class DiscountType(str, Enum):
    """Типы скидок."""
    FIRST_TIME = "FIRST_TIME"
    BULK = "BULK"
    LOYALTY = "LOYALTY"
    PROMOTIONAL = "PROMOTIONAL"
    CORPORATE = "CORPORATE"
    SEASONAL = "SEASONAL"

    def __str__(self) -> str:
        return self.value


class RuleKind(str, Enum):
    """Вид правила: надбавка или скидка."""
    SURCHARGE = "surcharge"
    DISCOUNT = "discount"

    def __str__(self) -> str:
        return self.value


class LineCategory(str, Enum):
    """Категория строки детализации цены."""
    BASE = "base"
    DISTANCE = "distance"
    SURCHARGE = "surcharge"
    DISCOUNT = "discount"
    ADJUSTMENT = "adjustment"
    ROUNDING = "rounding"
    TAX = "tax"

    def __str__(self) -> str:
        return self.value
