# src/services/__init__.py
"""
Прикладные сервисы.

Сервисы:
- pricing: расчёт стоимости доставки по тарифам из конфигурации
"""

__all__: list[str] = []
