# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины: config/config.json.
Адрес сервера и режим запуска переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
import socket
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from src.common.constants import IpType
from src.protocol.models import Coordinate


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _env_bool(name: str, default: bool | None) -> bool | None:
    """Читает булево значение из окружения ("1", "true", "yes")."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "ride_dispatch"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    COMPONENT_MODE: str = ""


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760


class NetworkSettings(BaseModel):
    """Сетевые настройки обеих ролей."""
    IP_TYPE: IpType = IpType.IPV4
    SERVER_ADDRESS: str = "127.0.0.1"
    SERVER_PORT: int = Field(default=51511, ge=0, le=65535)
    MAX_PENDING: int = Field(default=10, ge=1)
    CONNECT_TIMEOUT: float | None = 10.0

    @field_validator("IP_TYPE", mode="before")
    @classmethod
    def normalize_ip_type(cls, v: Any) -> Any:
        """Допускает "IPv4"/"IPV6" в любом регистре."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def family(self) -> socket.AddressFamily:
        """Семейство адресов для сокета."""
        return socket.AF_INET6 if self.IP_TYPE == IpType.IPV6 else socket.AF_INET

    @property
    def bind_host(self) -> str:
        """Адрес любого интерфейса для выбранного семейства."""
        return "::" if self.IP_TYPE == IpType.IPV6 else "0.0.0.0"


class DispatchSettings(BaseModel):
    """Настройки диспетчера (база водителя и симуляция движения)."""
    BASE_LATITUDE: float = -19.9227
    BASE_LONGITUDE: float = -43.9451
    METERS_TRAVELED: int = Field(default=400, gt=0)
    SECONDS_WAIT: float = Field(default=2.0, ge=0)
    REQUEST_TIMEOUT: float | None = None
    AUTO_DECISION: bool | None = None

    @property
    def base_coordinate(self) -> Coordinate:
        """Фиксированная позиция диспетчера."""
        return Coordinate(latitude=self.BASE_LATITUDE, longitude=self.BASE_LONGITUDE)


class PassengerSettings(BaseModel):
    """Настройки пассажира."""
    LATITUDE: float = -19.926639241000448
    LONGITUDE: float = -43.94068052574999

    @property
    def coordinate(self) -> Coordinate:
        """Собственная позиция пассажира."""
        return Coordinate(latitude=self.LATITUDE, longitude=self.LONGITUDE)


class DomainSettings(BaseModel):
    """Настройки локализации."""
    DEFAULT_LANGUAGE: str = "pt"
    SUPPORTED_LANGUAGES: list[str] = Field(default_factory=lambda: ["pt", "en", "ru"])


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    network: NetworkSettings = Field(default_factory=NetworkSettings)
    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)
    passenger: PassengerSettings = Field(default_factory=PassengerSettings)
    domain: DomainSettings = Field(default_factory=DomainSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_dict(cls, config_data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря config.json.
        Адрес, порт, семейство и режим переопределяются из окружения.
        """
        # Фильтруем комментарии (ключи, начинающиеся с _comment_)
        filtered_data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=filtered_data.get("PROJECT_NAME", "ride_dispatch"),
                VERSION=filtered_data.get("VERSION", "1.0.0"),
                DEBUG=filtered_data.get("DEBUG", True),
                ENVIRONMENT=filtered_data.get("ENVIRONMENT", "development"),
                COMPONENT_MODE=os.getenv("COMPONENT_MODE", filtered_data.get("COMPONENT_MODE", "")),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", filtered_data.get("LOG_LEVEL", "DEBUG")),
                LOG_TO_FILE=filtered_data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=filtered_data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=filtered_data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=filtered_data.get("LOG_MAX_BYTES", 10485760),
            ),
            network=NetworkSettings(
                IP_TYPE=os.getenv("IP_TYPE", filtered_data.get("IP_TYPE", "ipv4")),
                SERVER_ADDRESS=os.getenv("SERVER_ADDRESS", filtered_data.get("SERVER_ADDRESS", "127.0.0.1")),
                SERVER_PORT=int(os.getenv("SERVER_PORT", filtered_data.get("SERVER_PORT", 51511))),
                MAX_PENDING=filtered_data.get("MAX_PENDING", 10),
                CONNECT_TIMEOUT=filtered_data.get("CONNECT_TIMEOUT", 10.0),
            ),
            dispatch=DispatchSettings(
                BASE_LATITUDE=filtered_data.get("BASE_LATITUDE", -19.9227),
                BASE_LONGITUDE=filtered_data.get("BASE_LONGITUDE", -43.9451),
                METERS_TRAVELED=filtered_data.get("METERS_TRAVELED", 400),
                SECONDS_WAIT=filtered_data.get("SECONDS_WAIT", 2.0),
                REQUEST_TIMEOUT=filtered_data.get("REQUEST_TIMEOUT"),
                AUTO_DECISION=_env_bool("AUTO_DECISION", filtered_data.get("AUTO_DECISION")),
            ),
            passenger=PassengerSettings(
                LATITUDE=filtered_data.get("PASSENGER_LATITUDE", -19.926639241000448),
                LONGITUDE=filtered_data.get("PASSENGER_LONGITUDE", -43.94068052574999),
            ),
            domain=DomainSettings(
                DEFAULT_LANGUAGE=filtered_data.get("DEFAULT_LANGUAGE", "pt"),
                SUPPORTED_LANGUAGES=filtered_data.get("SUPPORTED_LANGUAGES", ["pt", "en", "ru"]),
            ),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """Создаёт объект Settings из config.json."""
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    # Загружаем .env файл
    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
