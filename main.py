#!/usr/bin/env python3
# main.py
"""
Главная точка входа Fare Engine.
Рассчитывает стоимость доставки по JSON-запросу или выводит тарифы из конфигурации.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from src.common.logger import setup_logging, log_info, log_error
from src.common.constants import TypeMsg
from src.core.pricing import FarePricingError
from src.services.pricing.dependencies import init_dependencies, close_dependencies, get_pricing_service
from src.shared.models import ServiceType


def _read_payload(source: str) -> dict[str, Any]:
    """Читает запрос из файла или из stdin ("-")."""
    if source == "-":
        return json.load(sys.stdin)
    with open(Path(source), "r", encoding="utf-8") as f:
        return json.load(f)


def _parse_options(args: list[str]) -> dict[str, float]:
    """Разбирает --surge X и --tax Y."""
    options: dict[str, float] = {}
    names = {"--surge": "surge_multiplier", "--tax": "tax_rate"}
    it = iter(args)
    for arg in it:
        if arg not in names:
            raise ValueError(f"неизвестный параметр '{arg}'")
        value = next(it, None)
        if value is None:
            raise ValueError(f"не задано значение для {arg}")
        options[names[arg]] = float(value)
    return options


async def run_quote(source: str, options: dict[str, float]) -> int:
    """Расчёт стоимости и вывод детализации в JSON."""
    service = await get_pricing_service()
    try:
        breakdown = await service.quote_payload(_read_payload(source), **options)
    except FarePricingError as e:
        print(json.dumps({"error": type(e).__name__, "field": e.field, "message": e.message}, ensure_ascii=False))
        return 2

    print(breakdown.model_dump_json(indent=2))
    return 0


async def run_tariffs() -> int:
    """Вывод действующих тарифов по типам услуг."""
    service = await get_pricing_service()
    for service_type in ServiceType:
        rules = service.rule_set_for(service_type)
        maximum = rules.maximum_charge if rules.maximum_charge is not None else "-"
        print(
            f"{service_type.value:<15} base={rules.base_fare} rate={rules.per_distance_rate}/{rules.distance_unit} "
            f"min={rules.minimum_charge} max={maximum} {rules.currency or ''}"
        )
    return 0


async def main(argv: list[str]) -> int:
    """
    Главная функция запуска.

    Args:
        argv: Аргументы командной строки без имени скрипта

    Returns:
        Код завершения процесса
    """
    setup_logging()

    mode = argv[0].lower() if argv else "tariffs"

    await init_dependencies()
    try:
        if mode == "tariffs":
            return await run_tariffs()
        if mode == "quote" and len(argv) >= 2:
            return await run_quote(argv[1], _parse_options(argv[2:]))

        print_usage()
        return 1
    except (OSError, ValueError) as e:
        await log_error(f"Ошибка запуска: {e}")
        return 1
    finally:
        await close_dependencies()
        await log_info("Приложение остановлено", type_msg=TypeMsg.DEBUG)


def print_usage() -> None:
    """Выводит справку по использованию."""
    print("""
Fare Engine — расчёт стоимости курьерской доставки

Использование:
    python main.py [mode]

Режимы:
    tariffs                              — тарифы по типам услуг (по умолчанию)
    quote <request.json | -> [--surge X] [--tax Y]
                                         — расчёт стоимости по JSON-запросу

Пример запроса:
    {"distance": 5.2, "distance_unit": "MILE", "service_type": "EXPRESS",
     "requested_at": "2026-10-14T12:00:00", "currency": "USD"}

Конфигурация:
    config/config.json, путь переопределяется переменной FARE_ENGINE_CONFIG
    """)


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1].lower() in ("--help", "-h"):
        print_usage()
        sys.exit(0)

    try:
        sys.exit(asyncio.run(main(sys.argv[1:])))
    except KeyboardInterrupt:
        pass
