# src/passenger/__init__.py
"""
Пассажир: заявка диспетчеру и отображение хода поездки.
"""

from src.passenger.client import PassengerClient
from src.passenger.menu import (
    ConsoleMenuProvider,
    ConsoleRideObserver,
    MenuProvider,
    RideObserver,
    ScriptedMenuProvider,
)
from src.passenger.session import PassengerConfig, PassengerSession

__all__ = [
    "PassengerClient",
    "ConsoleMenuProvider",
    "ConsoleRideObserver",
    "MenuProvider",
    "RideObserver",
    "ScriptedMenuProvider",
    "PassengerConfig",
    "PassengerSession",
]
