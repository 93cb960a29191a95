# src/common/constants.py
"""
Общие константы и перечисления.
"""

from decimal import Decimal
from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Километров в одной миле (международная миля)
KM_PER_MILE = Decimal("1.609344")

# Количество знаков после запятой для валют, отличных от стандартных двух
CURRENCY_MINOR_UNITS: dict[str, int] = {
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    "CLP": 0,
    "ISK": 0,
    "BHD": 3,
    "JOD": 3,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
}

DEFAULT_MINOR_UNITS = 2
