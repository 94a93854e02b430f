# src/protocol/codec.py
"""
Кодек кадров протокола.

Запрос пассажира: ASCII-текст "(lat, lon)", дополненный NUL-байтами
до REQUEST_FRAME_SIZE. Ширина кадра является константой формата, обе стороны
обязаны её соблюдать.

Статус диспетчера: ASCII-токен с завершающим NUL. Токен это либо один из
двух сентинелов, либо десятичное число метров без знака и ведущих нулей.
"""

from __future__ import annotations

import math
import re

from src.protocol.errors import MalformedFrameError
from src.protocol.models import Arrived, Coordinate, Declined, ProgressUpdate, StatusMessage


WIRE_FORMAT_VERSION = 1
ENCODING = "ascii"

REQUEST_FRAME_SIZE = 64
FRAME_TERMINATOR = b"\x00"
MAX_STATUS_FRAME_SIZE = 40

DECLINED_TOKEN = "NO_DRIVER_FOUND"
ARRIVED_TOKEN = "DRIVER_ARRIVED"

_FLOAT = r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"
_REQUEST_RE = re.compile(rf"\(({_FLOAT}), ({_FLOAT})\)")
_DISTANCE_RE = re.compile(r"0|[1-9][0-9]*")

# Сентинелы не содержат цифр, поэтому никогда не совпадут с числовым токеном
for _sentinel in (DECLINED_TOKEN, ARRIVED_TOKEN):
    if any(ch.isdigit() for ch in _sentinel) or not _sentinel.isascii():
        raise RuntimeError(f"Недопустимый сентинел протокола: {_sentinel!r}")


# =============================================================================
# ЗАПРОС
# =============================================================================

def encode_request(coordinate: Coordinate) -> bytes:
    """
    Кодирует координату пассажира в кадр фиксированной ширины.

    Args:
        coordinate: Позиция пассажира

    Returns:
        Ровно REQUEST_FRAME_SIZE байт
    """
    text = f"({coordinate.latitude!r}, {coordinate.longitude!r})".encode(ENCODING)
    if len(text) > REQUEST_FRAME_SIZE:
        raise MalformedFrameError("encode_request", f"frame text exceeds {REQUEST_FRAME_SIZE} bytes", text)
    return text.ljust(REQUEST_FRAME_SIZE, FRAME_TERMINATOR)


def decode_request(frame: bytes) -> Coordinate:
    """
    Декодирует кадр запроса.

    Raises:
        MalformedFrameError: Неверный размер, содержимое или набивка кадра
    """
    if len(frame) != REQUEST_FRAME_SIZE:
        raise MalformedFrameError(
            "decode_request",
            f"expected {REQUEST_FRAME_SIZE} bytes, got {len(frame)}",
            frame,
        )

    text, _, padding = frame.partition(FRAME_TERMINATOR)
    if padding.strip(FRAME_TERMINATOR):
        raise MalformedFrameError("decode_request", "garbage after frame text", frame)

    try:
        decoded = text.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise MalformedFrameError("decode_request", "frame is not ASCII", frame) from e

    match = _REQUEST_RE.fullmatch(decoded)
    if match is None:
        raise MalformedFrameError("decode_request", f"unparsable coordinates {decoded!r}", frame)

    latitude, longitude = float(match.group(1)), float(match.group(2))
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise MalformedFrameError("decode_request", f"non-finite coordinates {decoded!r}", frame)

    return Coordinate(latitude=latitude, longitude=longitude)


# =============================================================================
# СТАТУС
# =============================================================================

def status_token(message: StatusMessage) -> str:
    """Возвращает текстовый токен статуса без терминатора."""
    if isinstance(message, Declined):
        return DECLINED_TOKEN
    if isinstance(message, Arrived):
        return ARRIVED_TOKEN
    if isinstance(message, ProgressUpdate):
        return str(message.remaining_distance)
    raise TypeError(f"Неизвестный тип статуса: {type(message).__name__}")


def parse_status_token(token: str) -> StatusMessage:
    """
    Разбирает токен статуса.
    Сентинелы сравниваются до попытки числового разбора.
    """
    if token == DECLINED_TOKEN:
        return Declined()
    if token == ARRIVED_TOKEN:
        return Arrived()
    if _DISTANCE_RE.fullmatch(token) is None:
        raise MalformedFrameError("decode_status", f"unexpected status token {token!r}", token.encode(ENCODING, "replace"))
    return ProgressUpdate(remaining_distance=int(token))


def encode_status(message: StatusMessage) -> bytes:
    """Кодирует статус в кадр: токен + NUL."""
    return status_token(message).encode(ENCODING) + FRAME_TERMINATOR


def decode_status(frame: bytes) -> StatusMessage:
    """
    Декодирует кадр статуса (токен с завершающим NUL).

    Raises:
        MalformedFrameError: Кадр пустой, слишком длинный, без терминатора или не ASCII
    """
    if len(frame) > MAX_STATUS_FRAME_SIZE:
        raise MalformedFrameError("decode_status", f"frame exceeds {MAX_STATUS_FRAME_SIZE} bytes", frame)
    if not frame.endswith(FRAME_TERMINATOR):
        raise MalformedFrameError("decode_status", "missing frame terminator", frame)

    body = frame[: -len(FRAME_TERMINATOR)]
    if not body or FRAME_TERMINATOR in body:
        raise MalformedFrameError("decode_status", "empty or split frame", frame)

    try:
        token = body.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise MalformedFrameError("decode_status", "frame is not ASCII", frame) from e

    return parse_status_token(token)
