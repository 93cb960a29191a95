# src/shared/models/quote.py
"""
DTO для расчёта стоимости доставки (quote).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.shared.models.enums import DistanceUnit, LineCategory, ServiceType


class PackageInfo(BaseModel):
    """Параметры посылки. Используются только условиями надбавок."""

    model_config = ConfigDict(frozen=True)

    weight_kg: float | None = None
    length_cm: float | None = None
    width_cm: float | None = None
    height_cm: float | None = None
    fragile: bool = False
    quantity: int = 1

    @property
    def dimensions(self) -> tuple[float, ...]:
        """Заданные габариты (без пустых значений)."""
        return tuple(
            d for d in (self.length_cm, self.width_cm, self.height_cm) if d is not None
        )

    @property
    def volume_cm3(self) -> float | None:
        """Объём, если заданы все три габарита."""
        if len(self.dimensions) != 3:
            return None
        length, width, height = self.dimensions
        return length * width * height


class QuoteRequest(BaseModel):
    """Запрос на расчёт стоимости доставки."""

    model_config = ConfigDict(frozen=True)

    distance: float
    distance_unit: DistanceUnit = DistanceUnit.KM
    service_type: ServiceType = ServiceType.STANDARD
    requested_at: datetime
    currency: str = "USD"
    package: PackageInfo | None = None

    # Атрибуты клиента для условий скидок
    promo_code: str | None = None
    customer_tags: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()


class PriceLine(BaseModel):
    """
    Строка детализации цены.

    Для процентных правил percentage хранит ставку в процентных пунктах,
    amount уже рассчитан от базы.
    """

    model_config = ConfigDict(frozen=True)

    category: LineCategory
    name: str
    amount: Decimal
    type: str | None = None
    description: str | None = None
    percentage: Decimal | None = None


class PriceBreakdown(BaseModel):
    """
    Результат расчёта стоимости.

    Суммы правил и подытог хранятся без округления, чтобы детализацию
    можно было проверить. total округлён до минимальной единицы валюты;
    разницу округления забирает tax, а без налога она попадает в rounding.
    Строки lines в сумме всегда дают total.
    """

    model_config = ConfigDict(frozen=True)

    service_type: ServiceType
    distance: Decimal
    distance_unit: DistanceUnit
    surge_multiplier: Decimal

    base_price: Decimal
    distance_price: Decimal
    surcharges: tuple[PriceLine, ...] = ()
    discounts: tuple[PriceLine, ...] = ()

    subtotal: Decimal
    minimum_charge_applied: bool = False
    maximum_charge_applied: bool = False
    chargeable_amount: Decimal

    tax_rate: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    rounding: Decimal = Decimal("0")
    total: Decimal
    currency: str

    @property
    def surcharge_total(self) -> Decimal:
        return sum((line.amount for line in self.surcharges), Decimal("0"))

    @property
    def discount_total(self) -> Decimal:
        """Сумма скидок (отрицательное число или ноль)."""
        return sum((line.amount for line in self.discounts), Decimal("0"))

    @property
    def lines(self) -> tuple[PriceLine, ...]:
        """Все строки, из которых сложилась цена, в порядке применения."""
        lines = [
            PriceLine(category=LineCategory.BASE, name="Base fare", amount=self.base_price),
            PriceLine(category=LineCategory.DISTANCE, name="Distance", amount=self.distance_price),
            *self.surcharges,
            *self.discounts,
        ]
        adjustment = self.chargeable_amount - self.subtotal
        if adjustment:
            name = "Maximum charge" if self.maximum_charge_applied else "Minimum charge"
            lines.append(PriceLine(category=LineCategory.ADJUSTMENT, name=name, amount=adjustment))
        if self.rounding:
            lines.append(PriceLine(category=LineCategory.ROUNDING, name="Rounding", amount=self.rounding))
        if self.tax:
            lines.append(PriceLine(category=LineCategory.TAX, name="Tax", amount=self.tax))
        return tuple(lines)
