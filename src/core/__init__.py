# src/core/__init__.py
"""
Доменный слой (Core Domain).
Чистая логика без сети и ввода-вывода.
"""
