# src/console/__init__.py
"""
Консольный интерфейс оператора и пассажира.
"""

from src.console.menus import (
    print_client_menu,
    print_driver_arrived,
    print_driver_distance,
    print_invalid_choice,
    print_ride_available,
    print_server_waiting,
)

__all__ = [
    "print_client_menu",
    "print_driver_arrived",
    "print_driver_distance",
    "print_invalid_choice",
    "print_ride_available",
    "print_server_waiting",
]
