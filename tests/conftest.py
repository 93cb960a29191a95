# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("ENVIRONMENT", "test")

from src.core.pricing import FareRuleSet
from src.shared.models import DistanceUnit, PackageInfo, QuoteRequest


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "тестовая конфигурация",
        "PROJECT_NAME": "fare_engine_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_MAX_BYTES": 1048576,
        "CURRENCY": "usd",
        "DISTANCE_UNIT": "mile",
        "BASE_FARE": 3.0,
        "PER_DISTANCE_RATE": 1.25,
        "MINIMUM_CHARGE": 5.0,
        "MAXIMUM_CHARGE": 100.0,
        "SURGE_MULTIPLIER": 1.0,
        "SURGE_MULTIPLIER_MAX": 2.5,
        "TAX_RATE": None,
        "SURCHARGES": [
            {"type": "NIGHT", "name": "Night delivery", "amount": 4.0,
             "condition": {"condition": "night", "start_hour": 22, "end_hour": 6}},
            {"type": "WEEKEND", "name": "Weekend delivery", "amount": 10, "is_percentage": True,
             "condition": {"condition": "weekend"}},
        ],
        "DISCOUNTS": [
            {"type": "FIRST_TIME", "name": "First delivery", "amount": 10, "is_percentage": True,
             "condition": {"condition": "customer_tag", "tag": "first_time"}},
        ],
        "SERVICE_TARIFFS": {
            "EXPRESS": {"BASE_FARE": 6.0, "PER_DISTANCE_RATE": 1.75},
            "furniture": {"BASE_FARE": 30.0, "PER_DISTANCE_RATE": 3.0, "MINIMUM_CHARGE": 50.0},
        },
    }


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def weekday_noon() -> datetime:
    """Среда, 12:00: не ночь, не выходной, не час пик."""
    return datetime(2026, 10, 14, 12, 0)


@pytest.fixture
def make_request(weekday_noon: datetime) -> Callable[..., QuoteRequest]:
    """Фабрика запросов: по умолчанию 5.2 мили, STANDARD, USD, будний день."""

    def factory(**overrides: Any) -> QuoteRequest:
        data: dict[str, Any] = {
            "distance": 5.2,
            "distance_unit": DistanceUnit.MILE,
            "requested_at": weekday_noon,
            "currency": "USD",
        }
        data.update(overrides)
        return QuoteRequest(**data)

    return factory


@pytest.fixture
def sample_request(make_request: Callable[..., QuoteRequest]) -> QuoteRequest:
    """Пример запроса: 5.2 мили, STANDARD."""
    return make_request()


@pytest.fixture
def heavy_package() -> PackageInfo:
    """Тяжёлая хрупкая посылка."""
    return PackageInfo(weight_kg=25.0, length_cm=80, width_cm=40, height_cm=30, fragile=True)


@pytest.fixture
def basic_rules() -> FareRuleSet:
    """Тариф: посадка 3.0, 1.25 за милю, без надбавок и скидок."""
    return FareRuleSet(
        base_fare=3.0,
        per_distance_rate=1.25,
        distance_unit=DistanceUnit.MILE,
        currency="USD",
    )


# =============================================================================
# УТИЛИТЫ
# =============================================================================

@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file
