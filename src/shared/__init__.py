# src/shared/__init__.py
"""
Общий код слоёв приложения.

Модули:
- models: DTO запроса и детализации стоимости, перечисления
"""

__all__: list[str] = []
