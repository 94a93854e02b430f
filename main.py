#!/usr/bin/env python3
# main.py
"""
Главная точка входа Ride Dispatch.
Запускает диспетчера или пассажира в зависимости от аргументов.
"""

from __future__ import annotations

import asyncio
import signal
import sys

from src.config import settings
from src.common.logger import setup_logging, log_info, log_error, log_warning
from src.common.localization import validate_lang_dict
from src.common.constants import ComponentMode, RideOutcome, TypeMsg
from src.protocol.errors import RideProtocolError


_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики сигналов для graceful shutdown."""

    def signal_handler(sig: int) -> None:
        """Отменяет запущенные задачи по SIGINT/SIGTERM."""
        print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
        for task in _running_tasks:
            if not task.done():
                task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


def interactive_mode_selection() -> str:
    """
    Интерактивный выбор роли процесса.

    Returns:
        Выбранный режим
    """
    print("\n" + "=" * 60)
    print(f"  RIDE DISPATCH v{settings.system.VERSION} — Выбор роли")
    print("=" * 60)
    print("  1. dispatcher   — диспетчер (сервер)")
    print("  2. passenger    — пассажир (клиент)")
    print("=" * 60)

    mode_map = {
        "1": ComponentMode.DISPATCHER.value,
        "2": ComponentMode.PASSENGER.value,
    }
    valid_modes = set(mode_map.values())

    while True:
        choice = input("\nВыберите роль (номер или название): ").strip().lower()
        if choice in mode_map:
            return mode_map[choice]
        if choice in valid_modes:
            return choice
        print("❌ Неверный выбор. Попробуйте снова.")


def resolve_mode(mode: str | None) -> str:
    """Режим: аргумент → COMPONENT_MODE → интерактивный выбор."""
    if mode:
        return mode
    component_mode = settings.system.COMPONENT_MODE
    if component_mode in {m.value for m in ComponentMode}:
        return component_mode
    return interactive_mode_selection()


async def run_dispatcher() -> None:
    """Запускает диспетчера."""
    from src.dispatch.app import run_dispatcher as start_dispatcher

    await log_info(
        f"Запуск диспетчера ({settings.network.IP_TYPE.value}, порт {settings.network.SERVER_PORT})...",
        type_msg=TypeMsg.INFO,
    )
    await start_dispatcher(settings)


async def run_passenger() -> RideOutcome | None:
    """Запускает пассажира."""
    from src.passenger.app import run_passenger as start_passenger

    await log_info(
        f"Запуск пассажира → {settings.network.SERVER_ADDRESS}:{settings.network.SERVER_PORT}",
        type_msg=TypeMsg.INFO,
    )
    return await start_passenger(settings)


async def main(mode: str | None = None) -> int:
    """
    Главная функция запуска.

    Args:
        mode: dispatcher | passenger. Если None, из настроек или интерактивно.

    Returns:
        Код завершения процесса
    """
    setup_logging()
    setup_signal_handlers()

    for problem in validate_lang_dict(settings.domain.SUPPORTED_LANGUAGES):
        await log_warning(f"Локализация: {problem}")

    mode = resolve_mode(mode)
    await log_info(
        f"Ride Dispatch v{settings.system.VERSION}: запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO,
    )

    if mode == ComponentMode.DISPATCHER.value:
        task = asyncio.create_task(run_dispatcher())
    elif mode == ComponentMode.PASSENGER.value:
        task = asyncio.create_task(run_passenger())
    else:
        await log_error(f"Неизвестный режим: {mode}")
        return 2

    _running_tasks.append(task)
    try:
        await task
    except asyncio.CancelledError:
        await log_info("Работа прервана", type_msg=TypeMsg.INFO)
    except RideProtocolError as e:
        # Диагностика указывает операцию: "recv(): connection closed prematurely"
        await log_error(f"{type(e).__name__}: {e}", extra={"operation": e.operation})
        return 1
    finally:
        _running_tasks.remove(task)

    return 0


if __name__ == "__main__":
    try:
        exit_code = asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
    except KeyboardInterrupt:
        exit_code = 130
    sys.exit(exit_code)
