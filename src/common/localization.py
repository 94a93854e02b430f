# src/common/localization.py
"""
Модуль локализации.
Загружает тексты меню оператора и пассажира из lang_dict.json.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any


FALLBACK_LANGUAGE = "pt"


def get_lang_dict_path() -> Path:
    """Возвращает путь к файлу локализации."""
    return Path(__file__).parent.parent.parent / "config" / "lang_dict.json"


@lru_cache()
def load_lang_dict() -> dict[str, dict[str, str]]:
    """
    Загружает словарь локализации из JSON файла.
    Кэширует результат.
    """
    lang_path = get_lang_dict_path()
    if not lang_path.exists():
        raise FileNotFoundError(f"Файл локализации не найден: {lang_path}")

    with open(lang_path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_text(
    key: str,
    lang: str | None = None,
    default: str | None = None,
    **kwargs: Any,
) -> str:
    """
    Получает локализованный текст по ключу.

    Args:
        key: Ключ перевода
        lang: Код языка (pt, en, ru); None означает язык из настроек
        default: Значение по умолчанию, если ключ не найден
        **kwargs: Параметры для форматирования строки

    Example:
        >>> get_text("DRIVER_DISTANCE", "en", distance=971)
        "Driver at 971m"
    """
    if lang is None:
        from src.config import settings
        lang = settings.domain.DEFAULT_LANGUAGE

    try:
        lang_dict = load_lang_dict()
    except FileNotFoundError:
        return default if default else f"[{key}]"

    translations = lang_dict.get(key)
    if not translations:
        return default if default else f"[{key}]"

    text = translations.get(lang) or translations.get(FALLBACK_LANGUAGE)
    if not text:
        text = next(iter(translations.values()), f"[{key}]")

    if kwargs:
        try:
            text = text.format(**kwargs)
        except KeyError:
            pass  # Игнорируем отсутствующие ключи форматирования

    return text


def validate_lang_dict(languages: list[str]) -> list[str]:
    """
    Проверяет, что у каждого ключа есть перевод на все языки.

    Returns:
        Список ошибок (пустой, если всё в порядке)
    """
    errors: list[str] = []
    for key, translations in load_lang_dict().items():
        for lang in languages:
            if not translations.get(lang):
                errors.append(f"{key}: нет перевода '{lang}'")
    return errors
