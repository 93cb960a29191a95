# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины: config/config.json.
Отдельные значения переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    env_path = os.getenv("FARE_ENGINE_CONFIG")
    if env_path:
        return Path(env_path)
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "fare_engine"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "colored"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_MAX_BYTES: int = 10485760

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только json и colored."""
        if v not in ("json", "colored"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class TariffOverride(BaseModel):
    """Переопределение тарифа для отдельного типа услуги."""
    BASE_FARE: float | None = None
    PER_DISTANCE_RATE: float | None = None
    MINIMUM_CHARGE: float | None = None
    MAXIMUM_CHARGE: float | None = None


class PricingSettings(BaseModel):
    """
    Настройки тарификации.
    Правила надбавок и скидок хранятся как словари и превращаются
    в FareRuleSet при старте сервиса.
    """
    CURRENCY: str = "USD"
    DISTANCE_UNIT: str = "MILE"
    BASE_FARE: float = Field(default=3.0, ge=0)
    PER_DISTANCE_RATE: float = Field(default=1.25, ge=0)
    MINIMUM_CHARGE: float = Field(default=0.0, ge=0)
    MAXIMUM_CHARGE: float | None = Field(default=None, ge=0)
    SURGE_MULTIPLIER: float = Field(default=1.0, ge=1.0)
    SURGE_MULTIPLIER_MAX: float = Field(default=3.0, ge=1.0)
    TAX_RATE: float | None = Field(default=None, ge=0)
    SURCHARGES: list[dict[str, Any]] = Field(default_factory=list)
    DISCOUNTS: list[dict[str, Any]] = Field(default_factory=list)
    SERVICE_TARIFFS: dict[str, TariffOverride] = Field(default_factory=dict)

    @field_validator("CURRENCY", "DISTANCE_UNIT")
    @classmethod
    def upper(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def check_charges(self) -> "PricingSettings":
        """Минимальная стоимость не может превышать максимальную."""
        if self.MAXIMUM_CHARGE is not None and self.MINIMUM_CHARGE > self.MAXIMUM_CHARGE:
            raise ValueError("MINIMUM_CHARGE больше MAXIMUM_CHARGE")
        if self.SURGE_MULTIPLIER > self.SURGE_MULTIPLIER_MAX:
            raise ValueError("SURGE_MULTIPLIER больше SURGE_MULTIPLIER_MAX")
        return self


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)

    @classmethod
    def from_config_json(cls, config_data: dict[str, Any] | None = None) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Уровень логов, валюта и налог переопределяются из окружения.
        """
        if config_data is None:
            config_data = load_config_json()

        # Ключи, начинающиеся с _comment_, служат пояснениями
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        tax_rate = os.getenv("TAX_RATE", data.get("TAX_RATE"))

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "fare_engine"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", data.get("LOG_LEVEL", "INFO")),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
            ),
            pricing=PricingSettings(
                CURRENCY=os.getenv("CURRENCY", data.get("CURRENCY", "USD")),
                DISTANCE_UNIT=data.get("DISTANCE_UNIT", "MILE"),
                BASE_FARE=data.get("BASE_FARE", 3.0),
                PER_DISTANCE_RATE=data.get("PER_DISTANCE_RATE", 1.25),
                MINIMUM_CHARGE=data.get("MINIMUM_CHARGE", 0.0),
                MAXIMUM_CHARGE=data.get("MAXIMUM_CHARGE"),
                SURGE_MULTIPLIER=data.get("SURGE_MULTIPLIER", 1.0),
                SURGE_MULTIPLIER_MAX=data.get("SURGE_MULTIPLIER_MAX", 3.0),
                TAX_RATE=float(tax_rate) if tax_rate is not None else None,
                SURCHARGES=data.get("SURCHARGES", []),
                DISCOUNTS=data.get("DISCOUNTS", []),
                SERVICE_TARIFFS=data.get("SERVICE_TARIFFS", {}),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
