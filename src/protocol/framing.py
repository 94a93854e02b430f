# src/protocol/framing.py
"""
Чтение и запись кадров поверх asyncio-потоков.
Переводит исключения asyncio/ОС в ошибки протокола.
"""

from __future__ import annotations

import asyncio

from src.protocol.codec import (
    FRAME_TERMINATOR,
    REQUEST_FRAME_SIZE,
    decode_request,
    decode_status,
    encode_request,
    encode_status,
)
from src.protocol.errors import (
    MalformedFrameError,
    PrematureTerminationError,
    ShortWriteError,
    TransportError,
)
from src.protocol.models import Coordinate, StatusMessage


async def read_request(reader: asyncio.StreamReader, timeout: float | None = None) -> Coordinate:
    """
    Читает ровно один кадр запроса.
    Неполный кадр не декодируется.

    Raises:
        PrematureTerminationError: Пир закрыл соединение до полного кадра
        TransportError: Сбой сокета или истёк таймаут
        MalformedFrameError: Кадр не декодируется
    """
    try:
        frame = await asyncio.wait_for(reader.readexactly(REQUEST_FRAME_SIZE), timeout)
    except asyncio.IncompleteReadError as e:
        raise PrematureTerminationError("recv()") from e
    except asyncio.TimeoutError as e:
        raise TransportError("recv()", f"no request within {timeout}s") from e
    except OSError as e:
        raise TransportError("recv()", str(e) or type(e).__name__) from e
    return decode_request(frame)


async def read_status(reader: asyncio.StreamReader) -> StatusMessage:
    """
    Читает один кадр статуса (до NUL включительно).

    Raises:
        PrematureTerminationError: EOF до терминатора
        MalformedFrameError: Кадр превышает лимит буфера или не декодируется
        TransportError: Сбой сокета
    """
    try:
        frame = await reader.readuntil(FRAME_TERMINATOR)
    except asyncio.IncompleteReadError as e:
        raise PrematureTerminationError("recv()") from e
    except asyncio.LimitOverrunError as e:
        raise MalformedFrameError("recv()", "status frame without terminator") from e
    except OSError as e:
        raise TransportError("recv()", str(e) or type(e).__name__) from e
    return decode_status(frame)


async def write_frame(writer: asyncio.StreamWriter, frame: bytes) -> None:
    """
    Отправляет кадр целиком.

    Raises:
        ShortWriteError: Транспорт уже закрывается, кадр не уйдёт полностью
        TransportError: Сбой сокета при отправке
    """
    if writer.is_closing():
        raise ShortWriteError("send()")
    try:
        writer.write(frame)
        await writer.drain()
    except OSError as e:
        raise TransportError("send()", str(e) or type(e).__name__) from e


async def send_request(writer: asyncio.StreamWriter, coordinate: Coordinate) -> None:
    """Отправляет запрос пассажира."""
    await write_frame(writer, encode_request(coordinate))


async def send_status(writer: asyncio.StreamWriter, message: StatusMessage) -> None:
    """Отправляет статус диспетчера."""
    await write_frame(writer, encode_status(message))


async def close_writer(writer: asyncio.StreamWriter) -> None:
    """Закрывает соединение. Ошибки сброса при закрытии не важны."""
    if not writer.is_closing():
        writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
