# src/core/pricing/conditions.py
"""
Условия применимости надбавок и скидок.

Каждая фабрика возвращает замыкание QuoteRequest -> bool.
build_condition() собирает условие из записи конфигурации вида
{"condition": "night", "start_hour": 22, "end_hour": 6}.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable

from src.core.pricing.exceptions import InvalidRuleSet
from src.core.pricing.money import convert_distance, to_decimal
from src.shared.models.enums import DistanceUnit, ServiceType
from src.shared.models.quote import QuoteRequest

Condition = Callable[[QuoteRequest], bool]
MonthDay = tuple[int, int]


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================

def _check_hour(hour: int, field: str) -> int:
    if not isinstance(hour, int) or isinstance(hour, bool) or not 0 <= hour <= 23:
        raise InvalidRuleSet(f"час должен быть целым числом 0..23, получено {hour!r}", field=field)
    return hour


def _check_non_negative(value: float, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidRuleSet(f"ожидается число, получено {value!r}", field=field)
    if not math.isfinite(value) or value < 0:
        raise InvalidRuleSet(f"ожидается конечное неотрицательное число, получено {value!r}", field=field)
    return value


def _in_hour_window(hour: int, start: int, end: int) -> bool:
    """Час попадает в [start, end); окно может переходить через полночь."""
    if start < end:
        return start <= hour < end
    return hour >= start or hour < end


def _parse_month_day(value: Any) -> MonthDay:
    """Принимает (month, day), date или строку "MM-DD"."""
    if isinstance(value, date):
        return value.month, value.day
    if isinstance(value, str):
        parts = value.split("-")
        if len(parts) != 2:
            raise InvalidRuleSet(f"ожидается формат MM-DD, получено {value!r}", field="dates")
        value = (int(parts[0]), int(parts[1]))
    month, day = value
    # Проверяем, что такая дата существует (29 февраля допустимо)
    date(2000, month, day)
    return month, day


def _parse_holiday(value: Any) -> date | MonthDay:
    """Полная дата (date, datetime, "YYYY-MM-DD") или ежегодная (month, day)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.count("-") == 2:
        return date.fromisoformat(value)
    return _parse_month_day(value)


def _month_day_key(month_day: MonthDay) -> int:
    return month_day[0] * 100 + month_day[1]


# =============================================================================
# ФАБРИКИ УСЛОВИЙ
# =============================================================================

def always() -> Condition:
    """Правило применяется всегда (например, топливный сбор)."""
    return lambda request: True


def night_window(start_hour: int = 22, end_hour: int = 6) -> Condition:
    """Время запроса попадает в ночное окно [start_hour, end_hour)."""
    start = _check_hour(start_hour, "start_hour")
    end = _check_hour(end_hour, "end_hour")
    if start == end:
        raise InvalidRuleSet("ночное окно не может быть пустым", field="end_hour")

    def check(request: QuoteRequest) -> bool:
        return _in_hour_window(request.requested_at.hour, start, end)

    return check


def rush_hours(windows: Iterable[tuple[int, int]]) -> Condition:
    """Время запроса попадает хотя бы в одно окно часов пик."""
    parsed = []
    for window in windows:
        try:
            start, end = window
        except (TypeError, ValueError) as e:
            raise InvalidRuleSet(f"окно должно быть парой часов, получено {window!r}", field="windows") from e
        start = _check_hour(start, "windows")
        end = _check_hour(end, "windows")
        if start == end:
            raise InvalidRuleSet("окно часов пик не может быть пустым", field="windows")
        parsed.append((start, end))
    if not parsed:
        raise InvalidRuleSet("не задано ни одного окна часов пик", field="windows")

    def check(request: QuoteRequest) -> bool:
        hour = request.requested_at.hour
        return any(_in_hour_window(hour, start, end) for start, end in parsed)

    return check


def weekend() -> Condition:
    """Суббота или воскресенье."""
    return lambda request: request.requested_at.weekday() >= 5


def holidays(dates: Iterable[Any]) -> Condition:
    """
    Праздничные дни.
    Полная дата (date, datetime, "YYYY-MM-DD") совпадает только в своём году,
    (month, day) и "MM-DD" совпадают каждый год.
    """
    exact: set[date] = set()
    yearly: set[MonthDay] = set()
    try:
        for value in dates:
            parsed = _parse_holiday(value)
            if isinstance(parsed, date):
                exact.add(parsed)
            else:
                yearly.add(parsed)
    except (TypeError, ValueError) as e:
        raise InvalidRuleSet(f"некорректная дата праздника: {e}", field="dates") from e

    def check(request: QuoteRequest) -> bool:
        day = request.requested_at.date()
        return day in exact or (day.month, day.day) in yearly

    return check


def seasonal(start: Any, end: Any) -> Condition:
    """
    Период (месяц, день) включительно.
    Поддерживает переход через границу года (например, 27.09 - 16.01).
    """
    try:
        start_key = _month_day_key(_parse_month_day(start))
        end_key = _month_day_key(_parse_month_day(end))
    except (TypeError, ValueError) as e:
        raise InvalidRuleSet(f"некорректный период: {e}", field="start") from e

    def check(request: QuoteRequest) -> bool:
        key = request.requested_at.month * 100 + request.requested_at.day
        if start_key <= end_key:
            return start_key <= key <= end_key
        return key >= start_key or key <= end_key

    return check


def weight_above(kg: float) -> Condition:
    """Вес посылки строго больше порога."""
    threshold = _check_non_negative(kg, "kg")

    def check(request: QuoteRequest) -> bool:
        package = request.package
        return package is not None and package.weight_kg is not None and package.weight_kg > threshold

    return check


def longest_side_above(cm: float) -> Condition:
    """Самая длинная сторона посылки больше порога."""
    threshold = _check_non_negative(cm, "cm")

    def check(request: QuoteRequest) -> bool:
        package = request.package
        return package is not None and bool(package.dimensions) and max(package.dimensions) > threshold

    return check


def volume_above(cm3: float) -> Condition:
    """Объём посылки больше порога."""
    threshold = _check_non_negative(cm3, "cm3")

    def check(request: QuoteRequest) -> bool:
        volume = request.package.volume_cm3 if request.package else None
        return volume is not None and volume > threshold

    return check


def fragile() -> Condition:
    """Посылка помечена как хрупкая."""
    return lambda request: request.package is not None and request.package.fragile


def quantity_at_least(count: int) -> Condition:
    """В отправке не меньше count мест."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidRuleSet(f"ожидается целое число >= 1, получено {count!r}", field="count")

    def check(request: QuoteRequest) -> bool:
        quantity = request.package.quantity if request.package else 1
        return quantity >= count

    return check


def service_types(*types: ServiceType | str) -> Condition:
    """Тип услуги входит в перечень."""
    try:
        allowed = frozenset(ServiceType(t) for t in types)
    except ValueError as e:
        raise InvalidRuleSet(f"неизвестный тип услуги: {e}", field="types") from e
    if not allowed:
        raise InvalidRuleSet("перечень типов услуг пуст", field="types")

    return lambda request: request.service_type in allowed


def distance_above(value: float, unit: DistanceUnit | str = DistanceUnit.KM) -> Condition:
    """Расстояние строго больше порога (в указанных единицах)."""
    threshold = to_decimal(_check_non_negative(value, "value"))
    try:
        target = DistanceUnit(unit)
    except ValueError as e:
        raise InvalidRuleSet(f"неизвестная единица расстояния: {unit!r}", field="unit") from e

    def check(request: QuoteRequest) -> bool:
        distance = convert_distance(to_decimal(request.distance), request.distance_unit, target)
        return distance > threshold

    return check


def promo_code(code: str) -> Condition:
    """Промокод совпадает без учёта регистра."""
    if not isinstance(code, str) or not code.strip():
        raise InvalidRuleSet("промокод не может быть пустым", field="code")
    expected = code.strip().upper()

    def check(request: QuoteRequest) -> bool:
        return request.promo_code is not None and request.promo_code.strip().upper() == expected

    return check


def customer_tag(tag: str) -> Condition:
    """У клиента есть метка (first_time, corporate, loyalty ...)."""
    if not isinstance(tag, str) or not tag:
        raise InvalidRuleSet("метка клиента не может быть пустой", field="tag")
    return lambda request: tag in request.customer_tags


# =============================================================================
# СБОРКА ИЗ КОНФИГУРАЦИИ
# =============================================================================

_REGISTRY: dict[str, Callable[..., Condition]] = {
    "always": always,
    "night": night_window,
    "rush_hours": rush_hours,
    "weekend": weekend,
    "holidays": holidays,
    "seasonal": seasonal,
    "weight_above": weight_above,
    "longest_side_above": longest_side_above,
    "volume_above": volume_above,
    "fragile": fragile,
    "quantity_at_least": quantity_at_least,
    "distance_above": distance_above,
    "promo_code": promo_code,
    "customer_tag": customer_tag,
}


def available_conditions() -> list[str]:
    """Имена условий, доступных в конфигурации."""
    return sorted([*_REGISTRY, "service_types"])


def build_condition(entry: dict[str, Any] | None) -> Condition:
    """
    Собирает условие из записи конфигурации.
    Отсутствующее условие означает "всегда".

    Raises:
        InvalidRuleSet: неизвестное условие или некорректные параметры
    """
    if entry is None:
        return always()
    if not isinstance(entry, dict) or "condition" not in entry:
        raise InvalidRuleSet(f"условие должно быть объектом с ключом condition: {entry!r}", field="condition")

    name = entry["condition"]
    params = {k: v for k, v in entry.items() if k != "condition"}

    if name == "service_types":
        types = params.pop("types", None)
        if params or not isinstance(types, list):
            raise InvalidRuleSet("service_types ожидает только список types", field="condition")
        return service_types(*types)

    factory = _REGISTRY.get(name)
    if factory is None:
        raise InvalidRuleSet(f"неизвестное условие: {name!r}", field="condition")

    try:
        return factory(**params)
    except TypeError as e:
        raise InvalidRuleSet(f"некорректные параметры условия {name!r}: {e}", field="condition") from e
