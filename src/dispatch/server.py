# src/dispatch/server.py
"""
TCP-сервер диспетчера.
Каждое принятое соединение обслуживается независимой сессией в своей задаче.
"""

from __future__ import annotations

import asyncio
import socket
from dataclasses import dataclass
from typing import Callable, Optional

from src.common.constants import RideOutcome, TypeMsg
from src.common.logger import log_error, log_info
from src.core.geo.distance import haversine_km
from src.dispatch.decisions import DecisionProvider
from src.dispatch.session import DispatchConfig, DispatchOutcome, DispatchSession, DistanceOracle, Sleep
from src.protocol.errors import RideProtocolError, TransportError


@dataclass
class DispatchStats:
    """Счётчики сессий за время работы сервера."""
    served: int = 0
    declined: int = 0
    arrived: int = 0
    failed: int = 0


SessionCallback = Callable[[Optional[DispatchOutcome]], None]


class DispatchServer:
    """
    Сервер диспетчера.

    Общие для сессий данные: только неизменяемый DispatchConfig
    и поставщик решений; блокировок между сессиями нет.
    """

    def __init__(
        self,
        config: DispatchConfig,
        decision_provider: DecisionProvider,
        host: str = "0.0.0.0",
        port: int = 0,
        family: socket.AddressFamily = socket.AF_INET,
        backlog: int = 10,
        on_session_done: SessionCallback | None = None,
        distance_oracle: DistanceOracle = haversine_km,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self.decision_provider = decision_provider
        self.host = host
        self.port = port
        self.family = family
        self.backlog = backlog
        self.stats = DispatchStats()
        self._on_session_done = on_session_done
        self._oracle = distance_oracle
        self._sleep = sleep
        self._server: asyncio.AbstractServer | None = None
        self._sessions: set[asyncio.Task] = set()

    @property
    def active_sessions(self) -> int:
        """Количество сессий в работе."""
        return len(self._sessions)

    @property
    def bound_port(self) -> int:
        """Фактический порт (полезно при port=0)."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Сервер не запущен. Вызовите start() сначала.")
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """
        Открывает слушающий сокет.

        Raises:
            TransportError: Не удалось выполнить bind/listen
        """
        if self._server is not None:
            return
        try:
            self._server = await asyncio.start_server(
                self._handle_connection,
                host=self.host,
                port=self.port,
                family=self.family,
                backlog=self.backlog,
            )
        except OSError as e:
            raise TransportError("bind()", str(e) or type(e).__name__) from e

        await log_info(
            f"Диспетчер слушает {self.host}:{self.bound_port}",
            type_msg=TypeMsg.INFO,
        )

    async def serve_forever(self) -> None:
        """Обслуживает соединения до отмены."""
        await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def stop(self) -> None:
        """Закрывает слушающий сокет и отменяет незавершённые сессии."""
        server, self._server = self._server, None
        if server is not None:
            server.close()

        # wait_closed ждёт закрытия всех соединений: сначала отменяем сессии
        for task in list(self._sessions):
            task.cancel()
        if self._sessions:
            await asyncio.gather(*self._sessions, return_exceptions=True)
        self._sessions.clear()

        if server is not None:
            await server.wait_closed()

        await log_info(
            f"Диспетчер остановлен: обслужено {self.stats.served}, "
            f"отказов {self.stats.declined}, прибытий {self.stats.arrived}, "
            f"ошибок {self.stats.failed}",
            type_msg=TypeMsg.INFO,
        )

    async def _handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Обрабатывает одно соединение. Ошибка обрывает только эту сессию."""
        task = asyncio.current_task()
        if task is not None:
            self._sessions.add(task)

        session = DispatchSession(
            reader,
            writer,
            self.config,
            self.decision_provider,
            distance_oracle=self._oracle,
            sleep=self._sleep,
        )
        await log_info(f"Новое соединение {session.peer}", type_msg=TypeMsg.INFO, extra={"peer": session.peer})

        outcome: DispatchOutcome | None = None
        try:
            outcome = await session.run()
        except RideProtocolError as e:
            self.stats.failed += 1
            await log_error(
                f"Сессия {session.peer} прервана: {e}",
                extra={"peer": session.peer, "error": type(e).__name__, "operation": e.operation},
            )
        except Exception as e:
            self.stats.failed += 1
            await log_error(
                f"Непредвиденная ошибка в сессии {session.peer}: {e}",
                extra={"peer": session.peer},
                exc_info=True,
            )
        else:
            self.stats.served += 1
            if outcome.outcome == RideOutcome.DECLINED:
                self.stats.declined += 1
            else:
                self.stats.arrived += 1
            await log_info(
                f"Сессия {session.peer} завершена: {outcome.outcome.value}",
                type_msg=TypeMsg.INFO,
                extra={"peer": session.peer, "updates": len(outcome.updates_sent)},
            )
        finally:
            if task is not None:
                self._sessions.discard(task)

        if self._on_session_done is not None:
            self._on_session_done(outcome)
