# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.pop("COMPONENT_MODE", None)
os.environ.pop("AUTO_DECISION", None)
for _name in ("IP_TYPE", "SERVER_ADDRESS", "SERVER_PORT"):
    os.environ.pop(_name, None)

from src.dispatch.session import DispatchConfig
from src.protocol.codec import FRAME_TERMINATOR
from src.protocol.models import Coordinate


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок config.json для тестов."""
    return {
        "_comment_system": "тестовая конфигурация",
        "PROJECT_NAME": "ride_dispatch_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FORMAT": "json",
        "IP_TYPE": "ipv6",
        "SERVER_ADDRESS": "::1",
        "SERVER_PORT": 6000,
        "MAX_PENDING": 5,
        "CONNECT_TIMEOUT": 3.0,
        "BASE_LATITUDE": -19.9227,
        "BASE_LONGITUDE": -43.9451,
        "METERS_TRAVELED": 250,
        "SECONDS_WAIT": 0.5,
        "REQUEST_TIMEOUT": 5.0,
        "AUTO_DECISION": True,
        "PASSENGER_LATITUDE": -19.93,
        "PASSENGER_LONGITUDE": -43.94,
        "DEFAULT_LANGUAGE": "en",
        "SUPPORTED_LANGUAGES": ["pt", "en"],
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ДОМЕНА
# =============================================================================

@pytest.fixture
def base_coordinate() -> Coordinate:
    """База диспетчера."""
    return Coordinate(latitude=-19.9227, longitude=-43.9451)


@pytest.fixture
def passenger_coordinate() -> Coordinate:
    """Позиция пассажира."""
    return Coordinate(latitude=-19.93, longitude=-43.94)


@pytest.fixture
def dispatch_config(base_coordinate: Coordinate) -> DispatchConfig:
    """Конфигурация диспетчера: шаг 400 м, интервал 2."""
    return DispatchConfig(base_coordinate=base_coordinate, meters_traveled=400, seconds_wait=2.0)


# =============================================================================
# ПОТОКИ И ЗАПИСЬ
# =============================================================================

class FakeWriter:
    """StreamWriter в памяти: копит отправленные байты."""

    def __init__(
        self,
        peername: Any = ("127.0.0.1", 40000),
        closing: bool = False,
        drain_error: BaseException | None = None,
    ) -> None:
        self.peername = peername
        self.buffer = bytearray()
        self.closed = False
        self.drain_calls = 0
        self._closing = closing
        self._drain_error = drain_error

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        return self.peername if name == "peername" else default

    def write(self, data: bytes) -> None:
        self.buffer.extend(data)

    async def drain(self) -> None:
        self.drain_calls += 1
        if self._drain_error is not None:
            raise self._drain_error

    def is_closing(self) -> bool:
        return self._closing or self.closed

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None

    def tokens(self) -> list[str]:
        """Отправленные статусы как список токенов."""
        data = bytes(self.buffer)
        assert data.endswith(FRAME_TERMINATOR) or not data
        return [part.decode("ascii") for part in data.split(FRAME_TERMINATOR)[:-1]]


@pytest.fixture
def make_writer() -> Callable[..., FakeWriter]:
    """Фабрика FakeWriter."""
    return FakeWriter


@pytest.fixture
def make_reader() -> Callable[..., asyncio.StreamReader]:
    """
    Фабрика StreamReader с заранее заданными данными.
    Вызывать внутри асинхронного теста (нужен запущенный loop).
    """

    def factory(data: bytes = b"", eof: bool = True) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        if data:
            reader.feed_data(data)
        if eof:
            reader.feed_eof()
        return reader

    return factory


class RecordingSleep:
    """Подмена asyncio.sleep: запоминает интервалы, не ждёт."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


class RecordingObserver:
    """Наблюдатель поездки, запоминающий события по порядку."""

    def __init__(self) -> None:
        self.events: list[tuple[str, int | None]] = []

    def on_progress(self, distance: int) -> None:
        self.events.append(("progress", distance))

    def on_arrived(self) -> None:
        self.events.append(("arrived", None))

    def on_declined(self) -> None:
        self.events.append(("declined", None))

    @property
    def distances(self) -> list[int]:
        return [d for kind, d in self.events if kind == "progress"]


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()
