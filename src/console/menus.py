# src/console/menus.py
"""
Текстовые меню оператора диспетчера и пассажира.
"""

from __future__ import annotations

from typing import TextIO

from src.common.localization import get_text


BOX_WIDTH = 35
_RULE = "-" * BOX_WIDTH


def box_line(text: str = "") -> str:
    """Строка меню в рамке: "| $ text   |"."""
    inner = f" $ {text}" if text else " $"
    return f"|{inner.ljust(BOX_WIDTH - 2)}|"


def _emit(lines: list[str], out: TextIO | None) -> None:
    print("\n".join(lines), file=out, flush=True)


def print_server_waiting(driver_arrived: bool = False, out: TextIO | None = None) -> None:
    """Экран ожидания заявки (с отметкой о прибытии после поездки)."""
    lines = [_RULE]
    if driver_arrived:
        lines.append(box_line(get_text("SERVER_DRIVER_ARRIVED")))
    lines += [box_line(get_text("SERVER_WAITING")), box_line(), _RULE]
    _emit(lines, out)


def print_ride_available(out: TextIO | None = None) -> None:
    """Меню решения оператора: принять или отказать."""
    _emit(
        [
            _RULE,
            box_line(get_text("SERVER_RIDE_AVAILABLE")),
            box_line(get_text("SERVER_DECLINE")),
            box_line(get_text("SERVER_ACCEPT")),
            box_line(),
            _RULE,
        ],
        out,
    )


def print_client_menu(driver_not_found: bool = False, out: TextIO | None = None) -> None:
    """Меню пассажира; после отказа показывает, что водитель не найден."""
    lines = [_RULE]
    if driver_not_found:
        lines.append(box_line(get_text("CLIENT_NO_DRIVER")))
    lines += [
        box_line(get_text("CLIENT_EXIT")),
        box_line(get_text("CLIENT_REQUEST_RIDE")),
        box_line(),
        _RULE,
    ]
    _emit(lines, out)


def print_driver_distance(distance: int, first: bool = False, out: TextIO | None = None) -> None:
    lines = [_RULE] if first else []
    lines.append(box_line(get_text("DRIVER_DISTANCE", distance=distance)))
    _emit(lines, out)


def print_driver_arrived(out: TextIO | None = None) -> None:
    _emit(
        [
            box_line(get_text("CLIENT_DRIVER_ARRIVED")),
            box_line(get_text("CLIENT_END_PROGRAM")),
            _RULE,
        ],
        out,
    )


def print_invalid_choice(out: TextIO | None = None) -> None:
    _emit([box_line(get_text("INVALID_CHOICE"))], out)
