# src/console/prompt.py
"""
Асинхронное чтение строки из терминала.

input() выполняется в daemon-потоке, результат передаётся в Future
event loop. Отмена ожидания не держит завершение процесса: поток не
принадлежит executor'у по умолчанию, и asyncio.run его не ждёт.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable


ReadLine = Callable[[str], str]


async def read_console_line(read_line: ReadLine = input, prompt: str = "") -> str:
    """
    Читает одну строку, не блокируя event loop.

    Raises:
        EOFError: stdin закрыт
        asyncio.CancelledError: Ожидание отменено (поток чтения остаётся daemon)
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def _resolve(value: str | None, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value or "")

    def _worker() -> None:
        try:
            value, error = read_line(prompt), None
        except Exception as e:
            value, error = None, e
        try:
            loop.call_soon_threadsafe(_resolve, value, error)
        except RuntimeError:
            # Loop уже закрыт: ответ никому не нужен
            pass

    threading.Thread(target=_worker, name="console-input", daemon=True).start()
    return await future
