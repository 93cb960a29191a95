# src/core/pricing/rules.py
"""
Тарифные правила и набор правил (FareRuleSet).

Надбавки и скидки описываются одним типом PriceRule с тегом kind,
без иерархии классов. Набор правил неизменяем: чтобы поменять цены,
создаётся новый FareRuleSet.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Iterable

from src.core.pricing.conditions import Condition, always, build_condition
from src.core.pricing.exceptions import InvalidRuleSet
from src.core.pricing.money import ZERO, is_currency_code, percent_of, to_decimal
from src.shared.models.enums import DiscountType, DistanceUnit, RuleKind, SurchargeType


def _non_negative(value: Any, field_name: str) -> Decimal:
    """Проверяет, что value конечное неотрицательное число, и переводит в Decimal."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidRuleSet(f"ожидается число, получено {value!r}", field=field_name)
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidRuleSet("значение должно быть конечным", field=field_name)
    result = to_decimal(value)
    if not result.is_finite():
        raise InvalidRuleSet("значение должно быть конечным", field=field_name)
    if result < ZERO:
        raise InvalidRuleSet(f"значение не может быть отрицательным: {value}", field=field_name)
    return result


@dataclass(frozen=True)
class PriceRule:
    """
    Надбавка или скидка.

    amount: абсолютная сумма либо процентные пункты (10 = 10%),
    если is_percentage. applies: условие применимости к запросу.
    description попадает в строку детализации как есть.
    """
    kind: RuleKind
    type: SurchargeType | DiscountType
    name: str
    amount: Decimal
    is_percentage: bool = False
    applies: Condition = field(default_factory=always, compare=False)
    description: str | None = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "kind", RuleKind(self.kind))
        except ValueError as e:
            raise InvalidRuleSet(f"неизвестный вид правила: {self.kind!r}", field="kind") from e

        expected = SurchargeType if self.kind == RuleKind.SURCHARGE else DiscountType
        try:
            object.__setattr__(self, "type", expected(self.type))
        except ValueError as e:
            raise InvalidRuleSet(f"тип {self.type!r} не подходит для {self.kind}", field="type") from e

        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidRuleSet("у правила должно быть имя", field="name")

        object.__setattr__(self, "amount", _non_negative(self.amount, f"{self.name}.amount"))

        if not isinstance(self.is_percentage, bool):
            raise InvalidRuleSet("is_percentage должен быть true или false", field=f"{self.name}.is_percentage")

        if self.description is not None and not isinstance(self.description, str):
            raise InvalidRuleSet("описание правила должно быть строкой", field=f"{self.name}.description")

        if not callable(self.applies):
            raise InvalidRuleSet("условие правила должно быть вызываемым", field=f"{self.name}.applies")

    def amount_for(self, base: Decimal) -> Decimal:
        """Сумма правила относительно base (для процентных правил)."""
        if self.is_percentage:
            return percent_of(base, self.amount)
        return self.amount


def surcharge(
    type: SurchargeType | str,
    name: str,
    amount: float | Decimal,
    *,
    is_percentage: bool = False,
    applies: Condition | None = None,
    description: str | None = None,
) -> PriceRule:
    """Создаёт надбавку."""
    return PriceRule(
        kind=RuleKind.SURCHARGE,
        type=type,
        name=name,
        amount=amount,
        is_percentage=is_percentage,
        applies=applies or always(),
        description=description,
    )


def discount(
    type: DiscountType | str,
    name: str,
    amount: float | Decimal,
    *,
    is_percentage: bool = False,
    applies: Condition | None = None,
    description: str | None = None,
) -> PriceRule:
    """Создаёт скидку."""
    return PriceRule(
        kind=RuleKind.DISCOUNT,
        type=type,
        name=name,
        amount=amount,
        is_percentage=is_percentage,
        applies=applies or always(),
        description=description,
    )


def rule_from_config(kind: RuleKind, entry: dict[str, Any]) -> PriceRule:
    """
    Создаёт правило из записи конфигурации:
    {"type": "NIGHT", "name": "...", "amount": 4.0, "is_percentage": false,
     "condition": {"condition": "night", "start_hour": 22, "end_hour": 6}}
    """
    if not isinstance(entry, dict):
        raise InvalidRuleSet(f"правило должно быть объектом: {entry!r}", field=str(kind))

    missing = [key for key in ("type", "name", "amount") if key not in entry]
    if missing:
        raise InvalidRuleSet(f"в правиле нет полей: {', '.join(missing)}", field=str(kind))

    return PriceRule(
        kind=kind,
        type=entry["type"],
        name=entry["name"],
        amount=entry["amount"],
        is_percentage=entry.get("is_percentage", False),
        applies=build_condition(entry.get("condition")),
        description=entry.get("description"),
    )


@dataclass(frozen=True)
class FareRuleSet:
    """
    Тарифная таблица для одного расчёта.

    per_distance_rate задаётся за единицу distance_unit.
    surge_multiplier применяется только к стоимости расстояния.
    tax_rate: доля (0.2 = 20%), None означает отсутствие налога.
    """
    base_fare: Decimal
    per_distance_rate: Decimal
    distance_unit: DistanceUnit = DistanceUnit.KM
    minimum_charge: Decimal = ZERO
    maximum_charge: Decimal | None = None
    surge_multiplier: Decimal = Decimal("1")
    tax_rate: Decimal | None = None
    currency: str | None = None
    surcharges: tuple[PriceRule, ...] = ()
    discounts: tuple[PriceRule, ...] = ()

    def __post_init__(self) -> None:
        set_ = object.__setattr__

        set_(self, "base_fare", _non_negative(self.base_fare, "base_fare"))
        set_(self, "per_distance_rate", _non_negative(self.per_distance_rate, "per_distance_rate"))
        set_(self, "minimum_charge", _non_negative(self.minimum_charge, "minimum_charge"))

        if self.maximum_charge is not None:
            set_(self, "maximum_charge", _non_negative(self.maximum_charge, "maximum_charge"))
            if self.minimum_charge > self.maximum_charge:
                raise InvalidRuleSet(
                    f"минимальная стоимость {self.minimum_charge} больше максимальной {self.maximum_charge}",
                    field="minimum_charge",
                )

        surge = _non_negative(self.surge_multiplier, "surge_multiplier")
        if surge < Decimal("1"):
            raise InvalidRuleSet(f"коэффициент спроса должен быть >= 1.0, получено {surge}", field="surge_multiplier")
        set_(self, "surge_multiplier", surge)

        if self.tax_rate is not None:
            set_(self, "tax_rate", _non_negative(self.tax_rate, "tax_rate"))

        try:
            set_(self, "distance_unit", DistanceUnit(self.distance_unit))
        except ValueError as e:
            raise InvalidRuleSet(f"неизвестная единица расстояния: {self.distance_unit!r}", field="distance_unit") from e

        if self.currency is not None:
            code = self.currency.strip().upper() if isinstance(self.currency, str) else self.currency
            if not is_currency_code(code):
                raise InvalidRuleSet(f"некорректный код валюты: {self.currency!r}", field="currency")
            set_(self, "currency", code)

        set_(self, "surcharges", self._check_rules(self.surcharges, RuleKind.SURCHARGE, "surcharges"))
        set_(self, "discounts", self._check_rules(self.discounts, RuleKind.DISCOUNT, "discounts"))

    @staticmethod
    def _check_rules(rules: Iterable[PriceRule], kind: RuleKind, field_name: str) -> tuple[PriceRule, ...]:
        result = tuple(rules)
        for rule in result:
            if not isinstance(rule, PriceRule) or rule.kind != kind:
                raise InvalidRuleSet(f"ожидается правило вида {kind}, получено {rule!r}", field=field_name)
        return result

    def with_surge(self, surge_multiplier: float | Decimal) -> "FareRuleSet":
        """Копия набора с другим коэффициентом спроса."""
        return replace(self, surge_multiplier=surge_multiplier)


def validate_rule_set(rules: FareRuleSet) -> FareRuleSet:
    """
    Повторная проверка набора правил перед расчётом.
    Ловит наборы, собранные в обход конструктора.
    """
    if not isinstance(rules, FareRuleSet):
        raise InvalidRuleSet(f"ожидается FareRuleSet, получено {type(rules).__name__}")
    # Пересоздание прогоняет все проверки __post_init__
    return replace(rules)
