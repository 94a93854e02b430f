# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class IpType(str, Enum):
    """Семейство адресов сокета."""
    IPV4 = "ipv4"
    IPV6 = "ipv6"


class ComponentMode(str, Enum):
    """Роль процесса."""
    DISPATCHER = "dispatcher"
    PASSENGER = "passenger"


class DispatchState(str, Enum):
    """Состояния сессии диспетчера (одно соединение)."""
    AWAITING_REQUEST = "awaiting_request"
    DECISION_PENDING = "decision_pending"
    DECLINING = "declining"
    STREAMING = "streaming"
    CLOSED = "closed"


class PassengerState(str, Enum):
    """Состояния пассажира."""
    IDLE = "idle"
    CONNECTING = "connecting"
    REQUEST_SENT = "request_sent"
    AWAITING_UPDATE = "awaiting_update"
    DONE = "done"


class MenuChoice(str, Enum):
    """Выбор пассажира в меню."""
    STOP = "0"
    REQUEST_RIDE = "1"


class RideOutcome(str, Enum):
    """Итог одного обмена по соединению."""
    DECLINED = "declined"
    ARRIVED = "arrived"
