# src/core/geo/distance.py
"""
Расчёт расстояния между точками по формуле Haversine.
"""

from __future__ import annotations

import math
from typing import Callable

from src.protocol.models import Coordinate


EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Вычисляет расстояние между двумя точками (в км) по формуле Haversine.
    """
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(dlon / 2) ** 2)

    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_KM * c


def distance_meters(
    origin: Coordinate,
    target: Coordinate,
    oracle: Callable[[float, float, float, float], float] = haversine_km,
) -> int:
    """Расстояние между координатами (oracle возвращает км), округлённое до метров."""
    return round(oracle(origin.latitude, origin.longitude, target.latitude, target.longitude) * 1000)
