# src/services/pricing/service.py
"""
Бизнес-логика Pricing Service.
Выбор тарифа по типу услуги, ограничение коэффициента спроса,
расчёт стоимости и логирование котировок.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from src.common.constants import TypeMsg
from src.common.logger import log_info, log_warning
from src.config.loader import PricingSettings, TariffOverride
from src.core.pricing import (
    FarePricingError,
    FareRuleSet,
    InvalidRequest,
    InvalidRuleSet,
    compute_fare,
    parse_quote_request,
    rule_from_config,
)
from src.core.pricing.money import to_decimal
from src.shared.models.enums import DistanceUnit, RuleKind, ServiceType
from src.shared.models.quote import PriceBreakdown, QuoteRequest


# =============================================================================
# СБОРКА ТАРИФОВ ИЗ КОНФИГУРАЦИИ
# =============================================================================

def build_rule_set(pricing: PricingSettings, override: TariffOverride | None = None) -> FareRuleSet:
    """
    Создаёт FareRuleSet из секции pricing.
    override заменяет базовые ставки для отдельного типа услуги,
    надбавки и скидки общие для всех тарифов.
    """
    override = override or TariffOverride()

    def pick(own: float | None, default: float | None) -> float | None:
        return own if own is not None else default

    try:
        unit = DistanceUnit(pricing.DISTANCE_UNIT)
    except ValueError as e:
        raise InvalidRuleSet(f"неизвестная единица расстояния: {pricing.DISTANCE_UNIT}", field="DISTANCE_UNIT") from e

    return FareRuleSet(
        base_fare=pick(override.BASE_FARE, pricing.BASE_FARE),
        per_distance_rate=pick(override.PER_DISTANCE_RATE, pricing.PER_DISTANCE_RATE),
        distance_unit=unit,
        minimum_charge=pick(override.MINIMUM_CHARGE, pricing.MINIMUM_CHARGE),
        maximum_charge=pick(override.MAXIMUM_CHARGE, pricing.MAXIMUM_CHARGE),
        surge_multiplier=pricing.SURGE_MULTIPLIER,
        tax_rate=pricing.TAX_RATE,
        currency=pricing.CURRENCY,
        surcharges=tuple(rule_from_config(RuleKind.SURCHARGE, entry) for entry in pricing.SURCHARGES),
        discounts=tuple(rule_from_config(RuleKind.DISCOUNT, entry) for entry in pricing.DISCOUNTS),
    )


def build_rule_sets(pricing: PricingSettings) -> dict[ServiceType, FareRuleSet]:
    """Тарифы для типов услуг, у которых есть переопределения."""
    rule_sets: dict[ServiceType, FareRuleSet] = {}
    for key, override in pricing.SERVICE_TARIFFS.items():
        try:
            service_type = ServiceType(key.upper())
        except ValueError as e:
            raise InvalidRuleSet(f"неизвестный тип услуги в SERVICE_TARIFFS: {key}", field="SERVICE_TARIFFS") from e
        rule_sets[service_type] = build_rule_set(pricing, override)
    return rule_sets


# =============================================================================
# СЕРВИС
# =============================================================================

class PricingService:
    """
    Сервис тарификации.

    Держит неизменяемые наборы правил, созданные при старте.
    Сам расчёт выполняет compute_fare(); сервис только выбирает тариф,
    применяет динамический коэффициент спроса и пишет логи.
    """

    def __init__(
        self,
        default_rule_set: FareRuleSet,
        rule_sets: Mapping[ServiceType, FareRuleSet] | None = None,
        surge_cap: float | Decimal = 3.0,
    ) -> None:
        self._default_rule_set = default_rule_set
        self._rule_sets = dict(rule_sets or {})
        self._surge_cap = to_decimal(surge_cap)

    @classmethod
    def from_settings(cls, pricing: PricingSettings | None = None) -> "PricingService":
        """Создаёт сервис из секции pricing конфигурации."""
        if pricing is None:
            from src.config import settings
            pricing = settings.pricing

        return cls(
            default_rule_set=build_rule_set(pricing),
            rule_sets=build_rule_sets(pricing),
            surge_cap=pricing.SURGE_MULTIPLIER_MAX,
        )

    @property
    def surge_cap(self) -> Decimal:
        return self._surge_cap

    def rule_set_for(self, service_type: ServiceType) -> FareRuleSet:
        """Тариф для типа услуги или тариф по умолчанию."""
        return self._rule_sets.get(service_type, self._default_rule_set)

    def _apply_surge(self, rules: FareRuleSet, surge_multiplier: float | Decimal | None) -> FareRuleSet:
        if surge_multiplier is None:
            return rules

        surge = to_decimal(surge_multiplier)
        if not surge.is_finite() or surge < 1:
            raise InvalidRequest(f"коэффициент спроса должен быть >= 1.0, получено {surge_multiplier}", field="surge_multiplier")

        # Ограничиваем surge multiplier
        return rules.with_surge(min(surge, self._surge_cap))

    async def quote(
        self,
        request: QuoteRequest,
        surge_multiplier: float | Decimal | None = None,
        tax_rate: float | Decimal | None = None,
    ) -> PriceBreakdown:
        """
        Расчёт стоимости доставки.

        Args:
            request: Запрос на расчёт
            surge_multiplier: Динамический коэффициент спроса (ограничивается surge_cap)
            tax_rate: Ставка налога, заменяет ставку тарифа

        Returns:
            Детализация стоимости

        Raises:
            FarePricingError: некорректный запрос или тариф
        """
        try:
            rules = self._apply_surge(self.rule_set_for(request.service_type), surge_multiplier)
            breakdown = compute_fare(request, rules, tax_rate=tax_rate)
        except FarePricingError as e:
            await log_warning(
                f"Расчёт стоимости отклонён: {e}",
                extra={"error": type(e).__name__, "field": e.field},
            )
            raise

        await log_info(
            f"Стоимость рассчитана: {breakdown.service_type} {breakdown.distance} {breakdown.distance_unit} "
            f"-> {breakdown.total} {breakdown.currency}",
            type_msg=TypeMsg.DEBUG,
            extra={
                "subtotal": str(breakdown.subtotal),
                "surcharges": [line.name for line in breakdown.surcharges],
                "discounts": [line.name for line in breakdown.discounts],
                "surge_multiplier": str(breakdown.surge_multiplier),
            },
        )
        return breakdown

    async def quote_payload(
        self,
        payload: dict[str, Any],
        surge_multiplier: float | Decimal | None = None,
        tax_rate: float | Decimal | None = None,
    ) -> PriceBreakdown:
        """Расчёт стоимости по сырым данным запроса."""
        try:
            request = parse_quote_request(payload)
        except InvalidRequest as e:
            await log_warning(f"Некорректный запрос на расчёт: {e}", extra={"field": e.field})
            raise

        return await self.quote(request, surge_multiplier=surge_multiplier, tax_rate=tax_rate)
