# src/dispatch/app.py
"""
Запуск диспетчера из настроек.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from src.common.constants import RideOutcome, TypeMsg
from src.common.logger import log_info
from src.console.menus import print_server_waiting
from src.dispatch.decisions import ConsoleDecisionProvider, DecisionProvider, StaticDecisionProvider
from src.dispatch.server import DispatchServer
from src.dispatch.session import DispatchConfig, DispatchOutcome


def build_decision_provider(auto_decision: bool | None) -> DecisionProvider:
    """Если AUTO_DECISION задан, решение фиксированное, иначе спрашиваем оператора."""
    if auto_decision is None:
        return ConsoleDecisionProvider()
    return StaticDecisionProvider(accept=auto_decision)


def _show_waiting(outcome: Optional[DispatchOutcome]) -> None:
    arrived = outcome is not None and outcome.outcome == RideOutcome.ARRIVED
    print_server_waiting(driver_arrived=arrived)


def create_server(settings=None) -> DispatchServer:
    """
    Собирает сервер диспетчера из настроек.

    Args:
        settings: Настройки (из конфига если None)
    """
    if settings is None:
        from src.config import settings

    return DispatchServer(
        config=DispatchConfig.from_settings(settings),
        decision_provider=build_decision_provider(settings.dispatch.AUTO_DECISION),
        host=settings.network.bind_host,
        port=settings.network.SERVER_PORT,
        family=settings.network.family,
        backlog=settings.network.MAX_PENDING,
        on_session_done=_show_waiting,
    )


async def run_dispatcher(settings=None) -> None:
    """Запускает диспетчер и обслуживает соединения до отмены."""
    server = create_server(settings)
    await server.start()
    print_server_waiting(driver_arrived=False)
    try:
        await server.serve_forever()
    except asyncio.CancelledError:
        await log_info("Диспетчер: получен сигнал остановки", type_msg=TypeMsg.DEBUG)
        raise
    finally:
        await server.stop()
