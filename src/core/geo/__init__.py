# src/core/geo/__init__.py
"""
Geo-утилиты.
Оракул расстояния для диспетчера.
"""

from src.core.geo.distance import distance_meters, haversine_km

__all__ = [
    "distance_meters",
    "haversine_km",
]
