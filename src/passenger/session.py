# src/passenger/session.py
"""
Сессия пассажира: одна заявка на одном новом соединении.

CONNECTING → REQUEST_SENT → AWAITING_UPDATE (цикл) → IDLE | DONE
"""

from __future__ import annotations

import asyncio
import socket
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, Field

from src.common.constants import PassengerState, RideOutcome, TypeMsg
from src.common.logger import log_info
from src.passenger.menu import RideObserver
from src.protocol.errors import TransportError
from src.protocol.framing import close_writer, read_status, send_request
from src.protocol.models import Coordinate, Declined


Connector = Callable[..., Awaitable[tuple[asyncio.StreamReader, asyncio.StreamWriter]]]


class PassengerConfig(BaseModel):
    """Неизменяемая конфигурация пассажира."""
    coordinate: Coordinate
    host: str = "127.0.0.1"
    port: int = Field(default=51511, ge=0, le=65535)
    family: int = socket.AF_INET
    connect_timeout: float | None = 10.0

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, settings: Any) -> "PassengerConfig":
        """Снимок настроек пассажира на момент старта."""
        return cls(
            coordinate=settings.passenger.coordinate,
            host=settings.network.SERVER_ADDRESS,
            port=settings.network.SERVER_PORT,
            family=int(settings.network.family),
            connect_timeout=settings.network.CONNECT_TIMEOUT,
        )


class PassengerSession:
    """Проводит один обмен с диспетчером."""

    def __init__(
        self,
        config: PassengerConfig,
        observer: RideObserver,
        connector: Connector = asyncio.open_connection,
    ) -> None:
        self._config = config
        self._observer = observer
        self._connector = connector
        self.state = PassengerState.IDLE
        self.updates: list[int] = []

    async def _enter(self, state: PassengerState) -> None:
        self.state = state
        await log_info(
            f"Пассажир: {state.value}",
            type_msg=TypeMsg.DEBUG,
            extra={"state": state.value},
        )

    async def _connect(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        config = self._config
        try:
            return await asyncio.wait_for(
                self._connector(config.host, config.port, family=config.family),
                config.connect_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError("connect()", f"no answer from {config.host}:{config.port}") from e
        except OSError as e:
            raise TransportError("connect()", str(e) or type(e).__name__) from e

    async def run(self) -> RideOutcome:
        """
        Отправляет заявку и читает статусы до терминального.

        Returns:
            DECLINED или ARRIVED

        Raises:
            RideProtocolError: Транспортная ошибка или нарушение протокола
        """
        await self._enter(PassengerState.CONNECTING)
        reader, writer = await self._connect()
        try:
            await send_request(writer, self._config.coordinate)
            await self._enter(PassengerState.REQUEST_SENT)

            await self._enter(PassengerState.AWAITING_UPDATE)
            while True:
                message = await read_status(reader)

                if not message.is_terminal:
                    self.updates.append(message.remaining_distance)
                    self._observer.on_progress(message.remaining_distance)
                    continue

                if isinstance(message, Declined):
                    self._observer.on_declined()
                    await self._enter(PassengerState.IDLE)
                    return RideOutcome.DECLINED

                self._observer.on_arrived()
                await self._enter(PassengerState.DONE)
                return RideOutcome.ARRIVED
        finally:
            await close_writer(writer)
