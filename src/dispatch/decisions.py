# src/dispatch/decisions.py
"""
Поставщики решения "принять / отказать" для диспетчера.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol, TextIO

from src.common.constants import TypeMsg
from src.common.logger import log_info, log_warning
from src.console.menus import print_invalid_choice, print_ride_available
from src.console.prompt import read_console_line
from src.protocol.models import Coordinate


class DecisionProvider(Protocol):
    """Решение по заявке пассажира. Может блокироваться сколь угодно долго."""

    async def decide(self, request: Coordinate) -> bool:
        ...


class StaticDecisionProvider:
    """Всегда возвращает заранее заданное решение."""

    def __init__(self, accept: bool) -> None:
        self.accept = accept
        self.requests: list[Coordinate] = []

    async def decide(self, request: Coordinate) -> bool:
        self.requests.append(request)
        return self.accept


class ConsoleDecisionProvider:
    """
    Спрашивает оператора в терминале.

    Терминал один, поэтому запросы параллельных сессий задаются
    оператору по очереди. Чтение stdin идёт в отдельном потоке,
    чтобы не блокировать event loop остальных сессий.

    После закрытия stdin оператора нет: все заявки отклоняются.
    """

    ACCEPT = "1"
    DECLINE = "0"

    def __init__(
        self,
        read_line: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self._read_line = read_line
        self._out = out
        self._lock = asyncio.Lock()
        self.input_closed = False

    async def decide(self, request: Coordinate) -> bool:
        async with self._lock:
            if self.input_closed:
                return False
            await log_info(
                f"Заявка от ({request.latitude}, {request.longitude}) ждёт решения оператора",
                type_msg=TypeMsg.DEBUG,
            )
            print_ride_available(self._out)
            while True:
                try:
                    answer = (await read_console_line(self._read_line)).strip()
                except EOFError:
                    self.input_closed = True
                    await log_warning("stdin закрыт, заявки отклоняются автоматически")
                    return False
                if answer == self.ACCEPT:
                    return True
                if answer == self.DECLINE:
                    return False
                print_invalid_choice(self._out)
