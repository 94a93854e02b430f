# src/dispatch/session.py
"""
Сессия диспетчера: конечный автомат одного соединения.

AWAITING_REQUEST → DECISION_PENDING → (DECLINING | STREAMING) → CLOSED

Соединение закрывается на любом пути выхода, включая ошибки.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, Field

from src.common.constants import DispatchState, RideOutcome, TypeMsg
from src.common.logger import log_info
from src.core.geo.distance import distance_meters, haversine_km
from src.dispatch.decisions import DecisionProvider
from src.protocol.framing import close_writer, read_request, send_status
from src.protocol.models import Arrived, Coordinate, Declined, ProgressUpdate


DistanceOracle = Callable[[float, float, float, float], float]
Sleep = Callable[[float], Awaitable[Any]]


class DispatchConfig(BaseModel):
    """Неизменяемая конфигурация сессий диспетчера."""
    base_coordinate: Coordinate
    meters_traveled: int = Field(default=400, gt=0)
    seconds_wait: float = Field(default=2.0, ge=0)
    request_timeout: float | None = None

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, settings: Any) -> "DispatchConfig":
        """Снимок настроек диспетчера на момент старта."""
        section = settings.dispatch
        return cls(
            base_coordinate=section.base_coordinate,
            meters_traveled=section.METERS_TRAVELED,
            seconds_wait=section.SECONDS_WAIT,
            request_timeout=section.REQUEST_TIMEOUT,
        )


@dataclass
class DispatchOutcome:
    """Итог сессии диспетчера."""
    outcome: RideOutcome
    request: Coordinate
    initial_distance: int | None = None
    updates_sent: list[int] = field(default_factory=list)


def format_peer(peername: Any) -> str:
    """host:port пира (или "unknown")."""
    if isinstance(peername, tuple) and len(peername) >= 2:
        return f"{peername[0]}:{peername[1]}"
    return str(peername) if peername else "unknown"


class DispatchSession:
    """Обслуживает ровно одну заявку на одном соединении."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        config: DispatchConfig,
        decision_provider: DecisionProvider,
        distance_oracle: DistanceOracle = haversine_km,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._config = config
        self._decisions = decision_provider
        self._oracle = distance_oracle
        self._sleep = sleep
        self.peer = format_peer(writer.get_extra_info("peername"))
        self.state = DispatchState.AWAITING_REQUEST

    async def _enter(self, state: DispatchState) -> None:
        self.state = state
        await log_info(
            f"Сессия {self.peer}: {state.value}",
            type_msg=TypeMsg.DEBUG,
            extra={"peer": self.peer, "state": state.value},
        )

    async def run(self) -> DispatchOutcome:
        """
        Проводит обмен до конца.

        Returns:
            Итог: отказ или прибытие водителя

        Raises:
            RideProtocolError: Транспортная ошибка или нарушение протокола
        """
        try:
            request = await read_request(self._reader, self._config.request_timeout)

            await self._enter(DispatchState.DECISION_PENDING)
            accepted = await self._decisions.decide(request)

            if not accepted:
                await self._enter(DispatchState.DECLINING)
                await send_status(self._writer, Declined())
                return DispatchOutcome(outcome=RideOutcome.DECLINED, request=request)

            await self._enter(DispatchState.STREAMING)
            return await self._stream(request)
        finally:
            self.state = DispatchState.CLOSED
            await close_writer(self._writer)

    async def _stream(self, request: Coordinate) -> DispatchOutcome:
        distance = distance_meters(request, self._config.base_coordinate, self._oracle)
        outcome = DispatchOutcome(outcome=RideOutcome.ARRIVED, request=request, initial_distance=distance)

        await log_info(
            f"Сессия {self.peer}: водитель выехал, {distance} м",
            type_msg=TypeMsg.INFO,
            extra={"peer": self.peer, "distance": distance},
        )

        while distance > 0:
            await send_status(self._writer, ProgressUpdate(remaining_distance=distance))
            outcome.updates_sent.append(distance)
            distance -= self._config.meters_traveled
            await self._sleep(self._config.seconds_wait)

        # Терминальное сообщение обязательно даже при нулевом начальном расстоянии
        await send_status(self._writer, Arrived())
        return outcome
