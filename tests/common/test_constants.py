# tests/common/test_constants.py
"""
Тесты для модуля констант.
"""

from decimal import Decimal

from src.common.constants import CURRENCY_MINOR_UNITS, DEFAULT_MINOR_UNITS, KM_PER_MILE, TypeMsg


class TestTypeMsg:
    """Тесты для enum TypeMsg."""

    def test_type_msg_values(self) -> None:
        """Проверяет значения типов сообщений."""
        assert TypeMsg.DEBUG.value == "debug"
        assert TypeMsg.INFO.value == "info"
        assert TypeMsg.WARNING.value == "warning"
        assert TypeMsg.ERROR.value == "error"
        assert TypeMsg.CRITICAL.value == "critical"

    def test_type_msg_is_str_enum(self) -> None:
        """Проверяет, что TypeMsg является строковым enum."""
        assert isinstance(TypeMsg.DEBUG, str)
        assert TypeMsg.INFO == "info"


class TestPricingConstants:
    """Тесты констант тарификации."""

    def test_km_per_mile(self) -> None:
        """Проверяет международную милю."""
        assert KM_PER_MILE == Decimal("1.609344")

    def test_minor_units(self) -> None:
        """Проверяет знаки после запятой для валют."""
        assert CURRENCY_MINOR_UNITS["JPY"] == 0
        assert CURRENCY_MINOR_UNITS["KWD"] == 3
        assert "USD" not in CURRENCY_MINOR_UNITS
        assert DEFAULT_MINOR_UNITS == 2
