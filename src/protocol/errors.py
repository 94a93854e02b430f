# src/protocol/errors.py
"""
Ошибки протокола.

Транспортные ошибки (сбой ОС на сокете) и нарушения протокола
(битый кадр, преждевременное закрытие, неполная отправка) различаются,
даже если у них общая причина на уровне TCP.
"""

from __future__ import annotations


class RideProtocolError(Exception):
    """Базовая ошибка обмена по соединению."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}")


class TransportError(RideProtocolError):
    """Сбой сокета на уровне ОС (connect, send, recv, bind) или таймаут."""
    pass


class ProtocolViolationError(RideProtocolError):
    """Нарушение протокола обмена."""
    pass


class MalformedFrameError(ProtocolViolationError):
    """Кадр не удаётся декодировать."""

    def __init__(self, operation: str, detail: str, frame: bytes = b"") -> None:
        self.frame = frame
        super().__init__(operation, detail)


class PrematureTerminationError(ProtocolViolationError):
    """Соединение закрыто до полного кадра или до терминального сообщения."""

    def __init__(self, operation: str, detail: str = "connection closed prematurely") -> None:
        super().__init__(operation, detail)


class ShortWriteError(ProtocolViolationError):
    """Кадр не удалось передать целиком."""

    def __init__(self, operation: str, detail: str = "sent unexpected number of bytes") -> None:
        super().__init__(operation, detail)
