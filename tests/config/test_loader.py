# tests/config/test_loader.py
"""
Тесты для модуля загрузки конфигурации.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config.loader import (
    get_project_root,
    get_config_path,
    load_config_json,
    SystemSettings,
    LoggingSettings,
    PricingSettings,
    TariffOverride,
    Settings,
    get_settings,
)


class TestGetProjectRoot:
    """Тесты для функции get_project_root."""

    def test_returns_path_object(self) -> None:
        """Проверяет, что возвращается объект Path."""
        root = get_project_root()
        assert isinstance(root, Path)

    def test_root_contains_src_directory(self) -> None:
        """Проверяет наличие директории src в корне."""
        root = get_project_root()
        assert (root / "src").exists()

    def test_root_contains_config_directory(self) -> None:
        """Проверяет наличие директории config в корне."""
        root = get_project_root()
        assert (root / "config").exists()


class TestGetConfigPath:
    """Тесты для функции get_config_path."""

    def test_path_ends_with_config_json(self) -> None:
        """Проверяет правильность имени файла."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("FARE_ENGINE_CONFIG", None)
            path = get_config_path()

        assert path.name == "config.json"
        assert path.parent.name == "config"

    def test_env_override(self, temp_config_file: Path) -> None:
        """Проверяет путь из переменной окружения."""
        with patch.dict(os.environ, {"FARE_ENGINE_CONFIG": str(temp_config_file)}):
            assert get_config_path() == temp_config_file


class TestLoadConfigJson:
    """Тесты для функции load_config_json."""

    def test_loads_dict(self) -> None:
        """Проверяет загрузку словаря конфигурации."""
        config = load_config_json()
        assert isinstance(config, dict)

    def test_contains_required_keys(self) -> None:
        """Проверяет наличие обязательных ключей."""
        config = load_config_json()

        required_keys = [
            "PROJECT_NAME",
            "LOG_LEVEL",
            "CURRENCY",
            "BASE_FARE",
            "PER_DISTANCE_RATE",
            "SURCHARGES",
            "DISCOUNTS",
        ]

        for key in required_keys:
            assert key in config, f"Отсутствует ключ: {key}"

    def test_loads_from_env_path(self, temp_config_file: Path) -> None:
        """Проверяет загрузку файла из FARE_ENGINE_CONFIG."""
        with patch.dict(os.environ, {"FARE_ENGINE_CONFIG": str(temp_config_file)}):
            config = load_config_json()

        assert config["PROJECT_NAME"] == "fare_engine_test"

    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        """Проверяет исключение при отсутствии файла."""
        with patch("src.config.loader.get_config_path") as mock_path:
            mock_path.return_value = tmp_path / "nonexistent.json"

            with pytest.raises(FileNotFoundError):
                load_config_json()


class TestSystemSettings:
    """Тесты для модели SystemSettings."""

    def test_default_values(self) -> None:
        """Проверяет значения по умолчанию."""
        settings = SystemSettings()

        assert settings.PROJECT_NAME == "fare_engine"
        assert settings.VERSION == "1.0.0"
        assert settings.DEBUG is False
        assert settings.ENVIRONMENT == "development"


class TestLoggingSettings:
    """Тесты для модели LoggingSettings."""

    def test_default_values(self) -> None:
        """Проверяет значения по умолчанию."""
        settings = LoggingSettings()

        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_TO_FILE is False
        assert settings.LOG_FILE_PATH == "logs/app.log"
        assert settings.LOG_FORMAT == "colored"
        assert settings.LOG_MAX_BYTES == 10485760

    def test_unknown_format_rejected(self) -> None:
        """Проверяет отказ при неизвестном формате логов."""
        with pytest.raises(ValidationError):
            LoggingSettings(LOG_FORMAT="xml")


class TestPricingSettings:
    """Тесты для модели PricingSettings."""

    def test_default_values(self) -> None:
        """Проверяет значения по умолчанию."""
        settings = PricingSettings()

        assert settings.CURRENCY == "USD"
        assert settings.DISTANCE_UNIT == "MILE"
        assert settings.BASE_FARE == 3.0
        assert settings.PER_DISTANCE_RATE == 1.25
        assert settings.SURGE_MULTIPLIER == 1.0
        assert settings.TAX_RATE is None
        assert settings.SURCHARGES == []
        assert settings.SERVICE_TARIFFS == {}

    def test_uppercase_codes(self) -> None:
        """Проверяет приведение кодов к верхнему регистру."""
        settings = PricingSettings(CURRENCY="eur", DISTANCE_UNIT="km")

        assert settings.CURRENCY == "EUR"
        assert settings.DISTANCE_UNIT == "KM"

    def test_negative_rate_rejected(self) -> None:
        """Проверяет отказ при отрицательной ставке."""
        with pytest.raises(ValidationError):
            PricingSettings(PER_DISTANCE_RATE=-1)

    def test_minimum_above_maximum_rejected(self) -> None:
        """Проверяет отказ, если минимум больше максимума."""
        with pytest.raises(ValidationError):
            PricingSettings(MINIMUM_CHARGE=50, MAXIMUM_CHARGE=10)

    def test_surge_above_cap_rejected(self) -> None:
        """Проверяет отказ, если коэффициент по умолчанию выше предела."""
        with pytest.raises(ValidationError):
            PricingSettings(SURGE_MULTIPLIER=4.0, SURGE_MULTIPLIER_MAX=3.0)

    def test_tariff_overrides(self) -> None:
        """Проверяет разбор переопределений тарифа."""
        settings = PricingSettings(SERVICE_TARIFFS={"EXPRESS": {"BASE_FARE": 6.0}})

        override = settings.SERVICE_TARIFFS["EXPRESS"]
        assert isinstance(override, TariffOverride)
        assert override.BASE_FARE == 6.0
        assert override.PER_DISTANCE_RATE is None


class TestSettings:
    """Тесты для главного класса Settings."""

    def test_from_config_json(self, mock_config: dict[str, Any]) -> None:
        """Проверяет создание настроек из словаря."""
        with patch.dict(os.environ, {}, clear=False):
            for key in ("LOG_LEVEL", "CURRENCY", "TAX_RATE"):
                os.environ.pop(key, None)
            settings = Settings.from_config_json(mock_config)

        assert settings.system.PROJECT_NAME == "fare_engine_test"
        assert settings.logging.LOG_FORMAT == "json"
        assert settings.logging.LOG_LEVEL == "DEBUG"
        assert settings.pricing.CURRENCY == "USD"
        assert settings.pricing.MAXIMUM_CHARGE == 100.0
        assert len(settings.pricing.SURCHARGES) == 2

    def test_env_overrides(self, mock_config: dict[str, Any]) -> None:
        """Проверяет переопределение значений из окружения."""
        env = {"ENVIRONMENT": "production", "LOG_LEVEL": "WARNING", "CURRENCY": "eur", "TAX_RATE": "0.19"}
        with patch.dict(os.environ, env):
            settings = Settings.from_config_json(mock_config)

        assert settings.system.ENVIRONMENT == "production"
        assert settings.logging.LOG_LEVEL == "WARNING"
        assert settings.pricing.CURRENCY == "EUR"
        assert settings.pricing.TAX_RATE == 0.19

    def test_comment_keys_ignored(self, mock_config: dict[str, Any]) -> None:
        """Проверяет, что ключи _comment_ не мешают загрузке."""
        mock_config["_comment_pricing"] = "пояснение"
        settings = Settings.from_config_json(mock_config)

        assert settings.system.PROJECT_NAME == "fare_engine_test"

    def test_get_settings_cached(self) -> None:
        """Проверяет, что get_settings возвращает один и тот же объект."""
        assert get_settings() is get_settings()
