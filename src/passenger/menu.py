# src/passenger/menu.py
"""
Меню пассажира и отображение хода поездки.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, TextIO

from src.common.constants import MenuChoice
from src.console.menus import (
    print_client_menu,
    print_driver_arrived,
    print_driver_distance,
    print_invalid_choice,
)
from src.console.prompt import read_console_line


class MenuProvider(Protocol):
    """Выбор пассажира в состоянии IDLE."""

    async def choose(self, driver_not_found: bool) -> MenuChoice:
        ...


class RideObserver(Protocol):
    """Получатель статусов текущей поездки."""

    def on_progress(self, distance: int) -> None:
        ...

    def on_arrived(self) -> None:
        ...

    def on_declined(self) -> None:
        ...


class ConsoleMenuProvider:
    """Меню в терминале: 0 выход, 1 заказать поездку."""

    def __init__(
        self,
        read_line: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self._read_line = read_line
        self._out = out

    async def choose(self, driver_not_found: bool) -> MenuChoice:
        print_client_menu(driver_not_found, self._out)
        while True:
            try:
                answer = (await read_console_line(self._read_line)).strip()
            except EOFError:
                # stdin закрыт: выходим, как по "0"
                return MenuChoice.STOP
            try:
                return MenuChoice(answer)
            except ValueError:
                print_invalid_choice(self._out)


class ScriptedMenuProvider:
    """
    Возвращает заранее заданные ответы, затем STOP.
    Запоминает, показывалось ли сообщение "водитель не найден".
    """

    def __init__(self, choices: Iterable[MenuChoice]) -> None:
        self._choices = list(choices)
        self.prompts: list[bool] = []

    async def choose(self, driver_not_found: bool) -> MenuChoice:
        self.prompts.append(driver_not_found)
        if not self._choices:
            return MenuChoice.STOP
        return self._choices.pop(0)


class ConsoleRideObserver:
    """Печатает обновления расстояния и прибытие в рамке меню."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self._first_line = True

    def on_progress(self, distance: int) -> None:
        print_driver_distance(distance, first=self._first_line, out=self._out)
        self._first_line = False

    def on_arrived(self) -> None:
        print_driver_arrived(self._out)

    def on_declined(self) -> None:
        # Сообщение "водитель не найден" выводит следующее меню
        self._first_line = True
