# src/protocol/__init__.py
"""
Протокол обмена пассажир ↔ диспетчер поверх TCP.
Модели сообщений, кодек кадров и ошибки.
"""

from src.protocol.codec import (
    ARRIVED_TOKEN,
    DECLINED_TOKEN,
    REQUEST_FRAME_SIZE,
    WIRE_FORMAT_VERSION,
    decode_request,
    decode_status,
    encode_request,
    encode_status,
)
from src.protocol.errors import (
    MalformedFrameError,
    PrematureTerminationError,
    ProtocolViolationError,
    RideProtocolError,
    ShortWriteError,
    TransportError,
)
from src.protocol.models import Arrived, Coordinate, Declined, ProgressUpdate, StatusMessage

__all__ = [
    "ARRIVED_TOKEN",
    "DECLINED_TOKEN",
    "REQUEST_FRAME_SIZE",
    "WIRE_FORMAT_VERSION",
    "decode_request",
    "decode_status",
    "encode_request",
    "encode_status",
    "MalformedFrameError",
    "PrematureTerminationError",
    "ProtocolViolationError",
    "RideProtocolError",
    "ShortWriteError",
    "TransportError",
    "Arrived",
    "Coordinate",
    "Declined",
    "ProgressUpdate",
    "StatusMessage",
]
