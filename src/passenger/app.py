# src/passenger/app.py
"""
Запуск пассажира из настроек.
"""

from __future__ import annotations

from src.common.constants import RideOutcome
from src.passenger.client import PassengerClient
from src.passenger.menu import ConsoleMenuProvider, ConsoleRideObserver
from src.passenger.session import PassengerConfig


def create_client(settings=None) -> PassengerClient:
    """
    Собирает пассажира с консольным меню.

    Args:
        settings: Настройки (из конфига если None)
    """
    if settings is None:
        from src.config import settings

    return PassengerClient(
        config=PassengerConfig.from_settings(settings),
        menu=ConsoleMenuProvider(),
        observer=ConsoleRideObserver(),
    )


async def run_passenger(settings=None) -> RideOutcome | None:
    """Запускает цикл пассажира."""
    return await create_client(settings).run()
