# src/passenger/client.py
"""
Цикл пассажира: меню → заявка → статусы → снова меню или завершение.
"""

from __future__ import annotations

import asyncio

from src.common.constants import MenuChoice, PassengerState, RideOutcome, TypeMsg
from src.common.logger import log_info
from src.passenger.menu import MenuProvider, RideObserver
from src.passenger.session import Connector, PassengerConfig, PassengerSession


class PassengerClient:
    """
    Пассажир.

    Каждая заявка идёт по новому соединению; соединения не переиспользуются.
    Отказ возвращает в меню с пометкой "водитель не найден", прибытие
    водителя завершает работу. Ошибки протокола пробрасываются наружу.
    """

    def __init__(
        self,
        config: PassengerConfig,
        menu: MenuProvider,
        observer: RideObserver,
        connector: Connector = asyncio.open_connection,
    ) -> None:
        self.config = config
        self._menu = menu
        self._observer = observer
        self._connector = connector
        self.state = PassengerState.IDLE
        self.outcomes: list[RideOutcome] = []

    async def run(self) -> RideOutcome | None:
        """
        Работает до выбора "выход" или до прибытия водителя.

        Returns:
            ARRIVED, если водитель приехал; None, если пассажир вышел сам
        """
        driver_not_found = False
        while True:
            self.state = PassengerState.IDLE
            choice = await self._menu.choose(driver_not_found)
            if choice == MenuChoice.STOP:
                await log_info("Пассажир завершает работу", type_msg=TypeMsg.INFO)
                return None

            session = PassengerSession(self.config, self._observer, connector=self._connector)
            outcome = await session.run()
            self.outcomes.append(outcome)

            if outcome == RideOutcome.ARRIVED:
                self.state = PassengerState.DONE
                await log_info(
                    f"Водитель прибыл после {len(session.updates)} обновлений "
                    f"(заявок за сеанс: {len(self.outcomes)})",
                    type_msg=TypeMsg.INFO,
                )
                return outcome

            driver_not_found = True
            await log_info("Диспетчер отказал, возврат в меню", type_msg=TypeMsg.INFO)
