# src/core/pricing/engine.py
"""
Движок расчёта стоимости доставки.

compute_fare() является чистой функцией: без ввода-вывода, без логирования,
без общего изменяемого состояния. Все суммы считаются в Decimal,
округляется только итог.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from src.core.pricing.exceptions import InvalidRequest, InvalidRuleSet
from src.core.pricing.money import ZERO, convert_distance, is_currency_code, round_money, to_decimal
from src.core.pricing.rules import FareRuleSet, PriceRule, validate_rule_set
from src.shared.models.enums import DistanceUnit, LineCategory, ServiceType
from src.shared.models.quote import PriceBreakdown, PriceLine, QuoteRequest


# =============================================================================
# ПРОВЕРКА ЗАПРОСА
# =============================================================================

def _check_measure(value: Any, field: str, allow_none: bool = True) -> None:
    if value is None and allow_none:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidRequest(f"ожидается число, получено {value!r}", field=field)
    if isinstance(value, Decimal):
        finite = value.is_finite()
    else:
        finite = math.isfinite(value)
    if not finite:
        raise InvalidRequest("значение должно быть конечным", field=field)
    if value < 0:
        raise InvalidRequest(f"значение не может быть отрицательным: {value}", field=field)


def validate_request(request: QuoteRequest) -> None:
    """
    Проверяет запрос перед расчётом.
    Нулевое расстояние допустимо (сдача в постамат).

    Raises:
        InvalidRequest: некорректное расстояние, вес, габариты, тип услуги или валюта
    """
    if not isinstance(request, QuoteRequest):
        raise InvalidRequest(f"ожидается QuoteRequest, получено {type(request).__name__}")

    _check_measure(request.distance, "distance", allow_none=False)

    if not isinstance(request.distance_unit, DistanceUnit):
        raise InvalidRequest(f"неизвестная единица расстояния: {request.distance_unit!r}", field="distance_unit")

    if not isinstance(request.service_type, ServiceType):
        raise InvalidRequest(f"неизвестный тип услуги: {request.service_type!r}", field="service_type")

    if not isinstance(request.requested_at, datetime):
        raise InvalidRequest("не задано время запроса", field="requested_at")

    if not is_currency_code(request.currency):
        raise InvalidRequest(f"некорректный код валюты: {request.currency!r}", field="currency")

    package = request.package
    if package is not None:
        _check_measure(package.weight_kg, "package.weight_kg")
        _check_measure(package.length_cm, "package.length_cm")
        _check_measure(package.width_cm, "package.width_cm")
        _check_measure(package.height_cm, "package.height_cm")
        if isinstance(package.quantity, bool) or not isinstance(package.quantity, int) or package.quantity < 1:
            raise InvalidRequest(f"количество мест должно быть >= 1: {package.quantity!r}", field="package.quantity")


def parse_quote_request(payload: dict[str, Any]) -> QuoteRequest:
    """
    Создаёт QuoteRequest из сырых данных (например, тела HTTP-запроса).
    Ошибки pydantic превращаются в InvalidRequest.
    """
    try:
        request = QuoteRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidRequest(first.get("msg", str(e)), field=field) from e

    validate_request(request)
    return request


# =============================================================================
# ПРИМЕНЕНИЕ ПРАВИЛ
# =============================================================================

def _matches(rule: PriceRule, request: QuoteRequest) -> bool:
    try:
        return bool(rule.applies(request))
    except Exception as e:
        raise InvalidRuleSet(f"условие правила завершилось ошибкой: {e}", field=rule.name) from e


def _resolve_tax_rate(rules: FareRuleSet, tax_rate: float | Decimal | None) -> Decimal:
    """Ставка из аргумента важнее ставки набора правил; без ставки налог равен нулю."""
    if tax_rate is None:
        return rules.tax_rate if rules.tax_rate is not None else ZERO
    _check_measure(tax_rate, "tax_rate", allow_none=False)
    return to_decimal(tax_rate)


# =============================================================================
# РАСЧЁТ
# =============================================================================

def compute_fare(
    request: QuoteRequest,
    rules: FareRuleSet,
    tax_rate: float | Decimal | None = None,
) -> PriceBreakdown:
    """
    Расчёт стоимости доставки.

    Порядок:
    1. base_price = base_fare
    2. distance_price = per_distance_rate * distance * surge
    3. надбавки по порядку объявления; процент берётся от base + distance
    4. скидки по порядку; процент берётся от суммы до скидок,
       каждая скидка ограничена текущим подытогом
    5. минимальная стоимость, затем максимальная
    6. налог от получившейся суммы
    7. итог округляется half-up до минимальной единицы валюты;
       налог в детализации равен total - chargeable_amount
       (при нулевой ставке разница уходит в rounding)

    Raises:
        InvalidRequest: некорректный запрос
        InvalidRuleSet: некорректный набор правил
    """
    validate_request(request)
    rules = validate_rule_set(rules)

    if rules.currency is not None and rules.currency != request.currency:
        raise InvalidRequest(
            f"валюта запроса {request.currency} не совпадает с валютой тарифа {rules.currency}",
            field="currency",
        )

    distance = convert_distance(to_decimal(request.distance), request.distance_unit, rules.distance_unit)

    base_price = rules.base_fare
    distance_price = rules.per_distance_rate * distance
    if rules.surge_multiplier != 1:
        distance_price *= rules.surge_multiplier

    # Надбавки не накладываются друг на друга
    surcharge_base = base_price + distance_price
    surcharges: list[PriceLine] = []
    for rule in rules.surcharges:
        if _matches(rule, request):
            surcharges.append(PriceLine(
                category=LineCategory.SURCHARGE,
                name=rule.name,
                type=str(rule.type),
                amount=rule.amount_for(surcharge_base),
                description=rule.description,
                percentage=rule.amount if rule.is_percentage else None,
            ))

    running = surcharge_base + sum((line.amount for line in surcharges), ZERO)

    discount_base = running
    discounts: list[PriceLine] = []
    for rule in rules.discounts:
        if _matches(rule, request):
            applied = min(rule.amount_for(discount_base), running)
            running -= applied
            discounts.append(PriceLine(
                category=LineCategory.DISCOUNT,
                name=rule.name,
                type=str(rule.type),
                amount=ZERO - applied,
                description=rule.description,
                percentage=rule.amount if rule.is_percentage else None,
            ))

    subtotal = running

    chargeable = max(subtotal, rules.minimum_charge)
    minimum_applied = subtotal < rules.minimum_charge
    maximum_applied = False
    if rules.maximum_charge is not None and chargeable > rules.maximum_charge:
        chargeable = rules.maximum_charge
        maximum_applied = True

    rate = _resolve_tax_rate(rules, tax_rate)
    total = round_money(chargeable + chargeable * rate, request.currency)

    # chargeable + tax + rounding == total, tax >= 0
    tax = max(total - chargeable, ZERO) if rate else ZERO
    rounding = total - chargeable - tax

    return PriceBreakdown(
        service_type=request.service_type,
        distance=distance,
        distance_unit=rules.distance_unit,
        surge_multiplier=rules.surge_multiplier,
        base_price=base_price,
        distance_price=distance_price,
        surcharges=tuple(surcharges),
        discounts=tuple(discounts),
        subtotal=subtotal,
        minimum_charge_applied=minimum_applied,
        maximum_charge_applied=maximum_applied,
        chargeable_amount=chargeable,
        tax_rate=rate,
        tax=tax,
        rounding=rounding,
        total=total,
        currency=request.currency,
    )
