# src/protocol/models.py
"""
Модели сообщений протокола вызова такси.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """Географическая точка (градусы). Диапазон не проверяется."""
    latitude: float = Field(..., allow_inf_nan=False)
    longitude: float = Field(..., allow_inf_nan=False)

    class Config:
        frozen = True


class Declined(BaseModel):
    """Диспетчер отказал. Терминальное сообщение."""
    kind: Literal["declined"] = "declined"

    class Config:
        frozen = True

    @property
    def is_terminal(self) -> bool:
        return True


class ProgressUpdate(BaseModel):
    """Оставшееся расстояние до пассажира, в метрах."""
    kind: Literal["progress"] = "progress"
    remaining_distance: int = Field(..., ge=0)

    class Config:
        frozen = True

    @property
    def is_terminal(self) -> bool:
        return False


class Arrived(BaseModel):
    """Водитель прибыл. Терминальное сообщение."""
    kind: Literal["arrived"] = "arrived"

    class Config:
        frozen = True

    @property
    def is_terminal(self) -> bool:
        return True


StatusMessage = Union[Declined, ProgressUpdate, Arrived]
