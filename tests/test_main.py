# tests/test_main.py
"""
Тесты точки входа main.py.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

import main


@pytest.fixture(autouse=True)
def quiet_logs():
    """Отключает вывод логов точки входа и сервиса."""
    with patch("main.log_info", new_callable=AsyncMock), \
         patch("src.common.logger.log_info", new_callable=AsyncMock), \
         patch("main.log_error", new_callable=AsyncMock), \
         patch("src.services.pricing.service.log_info", new_callable=AsyncMock), \
         patch("src.services.pricing.service.log_warning", new_callable=AsyncMock):
        yield


class TestParseOptions:
    """Разбор параметров командной строки."""

    def test_surge_and_tax(self) -> None:
        """Проверяет разбор --surge и --tax."""
        assert main._parse_options(["--surge", "1.5", "--tax", "0.2"]) == {
            "surge_multiplier": 1.5,
            "tax_rate": 0.2,
        }

    def test_unknown_option(self) -> None:
        """Проверяет отказ при неизвестном параметре."""
        with pytest.raises(ValueError):
            main._parse_options(["--discount", "5"])

    def test_missing_value(self) -> None:
        """Проверяет отказ без значения."""
        with pytest.raises(ValueError):
            main._parse_options(["--surge"])


class TestMain:
    """Запуск режимов."""

    @pytest.mark.asyncio
    async def test_quote_mode(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Проверяет расчёт по файлу запроса."""
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps({
            "distance": 5.2,
            "distance_unit": "MILE",
            "requested_at": "2026-10-14T12:00:00",
            "currency": "USD",
        }))

        code = await main.main(["quote", str(request_file)])
        output = json.loads(capsys.readouterr().out)

        assert code == 0
        assert output["total"] == "9.50"
        assert output["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_quote_mode_invalid_request(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Проверяет вывод ошибки при некорректном запросе."""
        request_file = tmp_path / "request.json"
        request_file.write_text(json.dumps({"distance": -1, "requested_at": "2026-10-14T12:00:00"}))

        code = await main.main(["quote", str(request_file)])
        output = json.loads(capsys.readouterr().out)

        assert code == 2
        assert output["error"] == "InvalidRequest"
        assert output["field"] == "distance"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        """Проверяет код ошибки при отсутствии файла."""
        code = await main.main(["quote", str(tmp_path / "missing.json")])

        assert code == 1

    @pytest.mark.asyncio
    async def test_tariffs_mode(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Проверяет вывод тарифов."""
        code = await main.main(["tariffs"])
        output = capsys.readouterr().out

        assert code == 0
        assert "STANDARD" in output
        assert "FURNITURE" in output
