# src/common/logger.py
"""
Модуль структурированного логирования.
Поддерживает JSON и цветной текстовый формат, ротацию файлов по размеру.
"""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from src.common.constants import TypeMsg


DEFAULT_LOGGER_NAME = "fare_engine"

# Общие файловые хендлеры (один набор на процесс)
_GLOBAL_FILE_HANDLER: logging.Handler | None = None
_GLOBAL_ERROR_HANDLER: logging.Handler | None = None

_LOGGING_INITIALIZED: bool = False


# =============================================================================
# ФОРМАТТЕРЫ
# =============================================================================

class JsonFormatter(logging.Formatter):
    """Форматтер для JSON логов."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Цветной форматтер для консоли (разработка)."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"
    GRAY = "\033[90m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.GRAY)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        caller_info = ""
        extra_data = getattr(record, "extra_data", None) or {}
        if extra_data.get("caller_function"):
            caller_info = (
                f" {self.GRAY}[{extra_data.get('caller_module')}."
                f"{extra_data.get('caller_function')}() "
                f"{extra_data.get('caller_file')}:{extra_data.get('caller_line')}]{self.RESET}"
            )

        message = (
            f"{timestamp} {color}[{record.levelname}]{self.RESET}{caller_info} "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


# =============================================================================
# РОТАЦИЯ ФАЙЛОВ
# =============================================================================

class SizeRotatingFileHandler(RotatingFileHandler):
    """
    Пишет в фиксированный файл (например, fare_engine.log).
    При превышении размера переименовывает его в архив с датой и временем.
    """

    def __init__(self, log_dir: str, max_bytes: int, logger_name: str = "app", encoding: str = "utf-8"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.logger_name = logger_name

        super().__init__(
            filename=str(self.log_dir / f"{logger_name}.log"),
            maxBytes=max_bytes,
            backupCount=0,
            encoding=encoding,
        )

    def doRollover(self) -> None:
        """Переименовывает текущий файл в архивный и открывает новый."""
        if self.stream:
            self.stream.close()
            self.stream = None

        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        archive_path = self.log_dir / f"{self.logger_name}_{timestamp}.log"

        if os.path.exists(self.baseFilename):
            try:
                os.rename(self.baseFilename, archive_path)
            except OSError:
                # Файл занят другим процессом: продолжаем писать в него же
                pass

        self.stream = self._open()


# =============================================================================
# НАСТРОЙКИ ЛОГГЕРА
# =============================================================================

@dataclass(frozen=True)
class _LoggingOptions:
    """Параметры логирования, прочитанные из конфигурации."""
    level: str = "DEBUG"
    fmt: str = "colored"
    to_file: bool = False
    file_path: str = "logs/app.log"
    max_bytes: int = 10485760


def _read_logging_options() -> _LoggingOptions:
    """
    Читает параметры из settings.logging.
    Ленивый импорт исключает циклическую зависимость config -> logger.
    """
    try:
        from src.config import settings
        section = settings.logging
    except Exception:
        return _LoggingOptions()

    defaults = _LoggingOptions()
    level = section.LOG_LEVEL if isinstance(section.LOG_LEVEL, str) else defaults.level
    fmt = section.LOG_FORMAT if isinstance(section.LOG_FORMAT, str) else defaults.fmt
    file_path = section.LOG_FILE_PATH if isinstance(section.LOG_FILE_PATH, str) else defaults.file_path
    max_bytes = section.LOG_MAX_BYTES if isinstance(section.LOG_MAX_BYTES, int) else defaults.max_bytes

    return _LoggingOptions(
        level=level,
        fmt=fmt,
        to_file=section.LOG_TO_FILE is True,
        file_path=file_path,
        max_bytes=max_bytes,
    )


def _make_formatter(fmt: str) -> logging.Formatter:
    return JsonFormatter() if fmt == "json" else ColoredFormatter()


def _file_handlers(options: _LoggingOptions) -> list[logging.Handler]:
    """Возвращает общие файловые хендлеры (основной и для ошибок)."""
    global _GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER

    log_path = Path(options.file_path)
    log_dir = log_path.parent
    log_name = log_path.stem

    service_name = os.getenv("SERVICE_NAME")
    if service_name:
        log_name = f"{log_name}_{service_name}"

    if _GLOBAL_FILE_HANDLER is None:
        _GLOBAL_FILE_HANDLER = SizeRotatingFileHandler(
            log_dir=str(log_dir),
            max_bytes=options.max_bytes,
            logger_name=log_name,
        )
        _GLOBAL_FILE_HANDLER.setFormatter(_make_formatter(options.fmt))

    if _GLOBAL_ERROR_HANDLER is None:
        _GLOBAL_ERROR_HANDLER = SizeRotatingFileHandler(
            log_dir=str(log_dir),
            max_bytes=options.max_bytes,
            logger_name="error",
        )
        _GLOBAL_ERROR_HANDLER.setLevel(logging.ERROR)
        _GLOBAL_ERROR_HANDLER.setFormatter(_make_formatter(options.fmt))

    return [_GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER]


# =============================================================================
# ЛОГГЕР
# =============================================================================

_loggers: dict[str, logging.Logger] = {}


def setup_logging() -> None:
    """
    Инициализирует систему логирования.
    Может безопасно вызываться многократно.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED:
        return

    _LOGGING_INITIALIZED = True
    get_logger(DEFAULT_LOGGER_NAME)


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Возвращает настроенный логгер.
    Использует кэширование для избежания дублирования хендлеров.

    Args:
        name: Имя логгера

    Returns:
        Настроенный логгер
    """
    if name in _loggers:
        return _loggers[name]

    options = _read_logging_options()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options.level.upper(), logging.DEBUG))

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_make_formatter(options.fmt))
    logger.addHandler(console_handler)

    if options.to_file:
        for handler in _file_handlers(options):
            logger.addHandler(handler)

    logger.propagate = False

    _loggers[name] = logger
    return logger


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ ЛОГИРОВАНИЯ
# =============================================================================

def _get_caller_info() -> dict[str, Any]:
    """
    Получает информацию о коде, вызвавшем функцию логирования.

    Returns:
        Словарь с ключами caller_function, caller_module, caller_file, caller_line
    """
    frame = inspect.currentframe()
    try:
        # [0] _get_caller_info, [1] log_*, [2] вызывающий код
        caller_frame = frame.f_back.f_back if frame and frame.f_back else None
        if caller_frame is None:
            return {}

        module = inspect.getmodule(caller_frame)
        return {
            "caller_function": caller_frame.f_code.co_name,
            "caller_module": module.__name__ if module else "unknown",
            "caller_file": Path(caller_frame.f_code.co_filename).name,
            "caller_line": caller_frame.f_lineno,
        }
    finally:
        del frame


def _emit(
    message: str,
    type_msg: TypeMsg,
    logger_name: str,
    extra: dict[str, Any] | None,
    caller: dict[str, Any],
) -> None:
    logger = get_logger(logger_name)
    record_extra = {"extra_data": {**caller, **(extra or {})}}

    match type_msg:
        case TypeMsg.DEBUG:
            logger.debug(message, extra=record_extra)
        case TypeMsg.WARNING:
            logger.warning(message, extra=record_extra)
        case TypeMsg.ERROR:
            logger.error(message, extra=record_extra)
        case TypeMsg.CRITICAL:
            logger.critical(message, extra=record_extra)
        case _:
            logger.info(message, extra=record_extra)


async def log_info(
    message: str,
    *,
    type_msg: TypeMsg = TypeMsg.INFO,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Асинхронная функция логирования.

    Args:
        message: Сообщение для логирования
        type_msg: Уровень сообщения
        logger_name: Имя логгера
        extra: Дополнительные данные
    """
    _emit(message, type_msg, logger_name, extra, _get_caller_info())


async def log_debug(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """Логирование DEBUG уровня."""
    _emit(message, TypeMsg.DEBUG, logger_name, extra, _get_caller_info())


async def log_warning(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """Логирование WARNING уровня."""
    _emit(message, TypeMsg.WARNING, logger_name, extra, _get_caller_info())


async def log_error(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """
    Логирование ERROR уровня.

    Args:
        message: Сообщение об ошибке
        logger_name: Имя логгера
        extra: Дополнительные данные
        exc_info: Включать ли трейсбек исключения
    """
    logger = get_logger(logger_name)
    record_extra = {"extra_data": {**_get_caller_info(), **(extra or {})}}
    logger.error(message, extra=record_extra, exc_info=exc_info)
