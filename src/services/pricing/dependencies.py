# src/services/pricing/dependencies.py
"""
Зависимости для Pricing Service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from src.services.pricing.service import PricingService


_pricing_service: Optional["PricingService"] = None


async def init_dependencies() -> None:
    """Создаёт сервис тарификации из конфигурации."""
    global _pricing_service

    from src.common.logger import log_info
    from src.common.constants import TypeMsg
    from src.services.pricing.service import PricingService

    _pricing_service = PricingService.from_settings()

    await log_info("Pricing Service инициализирован", type_msg=TypeMsg.INFO)


async def close_dependencies() -> None:
    """Сбрасывает сервис (тарифы перечитываются при следующей инициализации)."""
    global _pricing_service

    from src.common.logger import log_info
    from src.common.constants import TypeMsg

    _pricing_service = None
    await log_info("Pricing Service остановлен", type_msg=TypeMsg.DEBUG)


async def get_pricing_service() -> "PricingService":
    if _pricing_service is None:
        raise RuntimeError("PricingService не инициализирован")
    return _pricing_service
