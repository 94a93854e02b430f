# tests/dispatch/test_dispatch_session.py
"""
Тесты сессии диспетчера (src/dispatch/session.py).
"""

from __future__ import annotations

import math

import pytest

from src.common.constants import DispatchState, RideOutcome
from src.dispatch.decisions import StaticDecisionProvider
from src.dispatch.session import DispatchConfig, DispatchSession, format_peer
from src.protocol.codec import encode_request
from src.protocol.errors import (
    MalformedFrameError,
    PrematureTerminationError,
    ShortWriteError,
    TransportError,
)


class CountingOracle:
    """Оракул расстояния с фиксированным ответом в километрах."""

    def __init__(self, km: float) -> None:
        self.km = km
        self.calls: list[tuple[float, float, float, float]] = []

    def __call__(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        self.calls.append((lat1, lon1, lat2, lon2))
        return self.km


def make_session(reader, writer, config, accept=True, km=0.971, sleep=None):
    decisions = StaticDecisionProvider(accept=accept)
    oracle = CountingOracle(km)
    kwargs = {"distance_oracle": oracle}
    if sleep is not None:
        kwargs["sleep"] = sleep
    session = DispatchSession(reader, writer, config, decisions, **kwargs)
    return session, decisions, oracle


class TestDecline:
    """Отказ оператора."""

    @pytest.mark.asyncio
    async def test_sends_exactly_one_declined(
        self, make_reader, make_writer, dispatch_config, passenger_coordinate, recording_sleep
    ) -> None:
        writer = make_writer()
        session, decisions, oracle = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            dispatch_config,
            accept=False,
            sleep=recording_sleep,
        )

        result = await session.run()

        assert result.outcome == RideOutcome.DECLINED
        assert result.request == passenger_coordinate
        assert writer.tokens() == ["NO_DRIVER_FOUND"]
        assert decisions.requests == [passenger_coordinate]
        assert oracle.calls == []
        assert recording_sleep.calls == []
        assert writer.closed is True
        assert session.state == DispatchState.CLOSED


class TestAccept:
    """Принятая заявка: поток расстояний и прибытие."""

    @pytest.mark.asyncio
    async def test_streams_decreasing_distances_then_arrived(
        self, make_reader, make_writer, dispatch_config, passenger_coordinate, recording_sleep
    ) -> None:
        writer = make_writer()
        session, decisions, oracle = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            dispatch_config,
            km=0.971,
            sleep=recording_sleep,
        )

        result = await session.run()

        assert writer.tokens() == ["971", "571", "171", "DRIVER_ARRIVED"]
        assert result.outcome == RideOutcome.ARRIVED
        assert result.initial_distance == 971
        assert result.updates_sent == [971, 571, 171]
        assert recording_sleep.calls == [2.0, 2.0, 2.0]
        assert len(oracle.calls) == 1
        assert len(decisions.requests) == 1
        assert writer.closed is True

    @pytest.mark.asyncio
    async def test_oracle_gets_request_then_base(
        self, make_reader, make_writer, dispatch_config, passenger_coordinate, base_coordinate, recording_sleep
    ) -> None:
        session, _, oracle = make_session(
            make_reader(encode_request(passenger_coordinate)),
            make_writer(),
            dispatch_config,
            sleep=recording_sleep,
        )
        await session.run()
        assert oracle.calls == [
            (
                passenger_coordinate.latitude,
                passenger_coordinate.longitude,
                base_coordinate.latitude,
                base_coordinate.longitude,
            )
        ]

    @pytest.mark.parametrize("meters", [1, 399, 400, 401, 800, 801, 5000])
    @pytest.mark.asyncio
    async def test_update_count_is_ceiling(
        self, meters, make_reader, make_writer, dispatch_config, passenger_coordinate, recording_sleep
    ) -> None:
        """ceil(d0 / step) обновлений, строго убывающих и положительных."""
        writer = make_writer()
        session, _, _ = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            dispatch_config,
            km=meters / 1000,
            sleep=recording_sleep,
        )

        result = await session.run()

        updates = result.updates_sent
        assert len(updates) == math.ceil(meters / dispatch_config.meters_traveled)
        assert updates[0] == meters
        assert all(d > 0 for d in updates)
        assert all(a - b == dispatch_config.meters_traveled for a, b in zip(updates, updates[1:]))
        assert writer.tokens()[-1] == "DRIVER_ARRIVED"
        assert writer.tokens().count("DRIVER_ARRIVED") == 1

    @pytest.mark.parametrize("km", [0.0, 0.0004, -0.25])
    @pytest.mark.asyncio
    async def test_non_positive_distance_sends_only_arrived(
        self, km, make_reader, make_writer, dispatch_config, passenger_coordinate, recording_sleep
    ) -> None:
        """Нулевое расстояние: ни одного обновления, сразу прибытие."""
        writer = make_writer()
        session, _, _ = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            dispatch_config,
            km=km,
            sleep=recording_sleep,
        )

        result = await session.run()

        assert writer.tokens() == ["DRIVER_ARRIVED"]
        assert result.updates_sent == []
        assert recording_sleep.calls == []

    @pytest.mark.asyncio
    async def test_custom_step_and_wait(
        self, make_reader, make_writer, base_coordinate, passenger_coordinate, recording_sleep
    ) -> None:
        config = DispatchConfig(base_coordinate=base_coordinate, meters_traveled=250, seconds_wait=0.5)
        writer = make_writer()
        session, _, _ = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            config,
            km=0.6,
            sleep=recording_sleep,
        )

        await session.run()

        assert writer.tokens() == ["600", "350", "100", "DRIVER_ARRIVED"]
        assert recording_sleep.total == pytest.approx(1.5)


class TestFailures:
    """Ошибки обрывают сессию, соединение всегда закрывается."""

    @pytest.mark.asyncio
    async def test_premature_close_before_request(
        self, make_reader, make_writer, dispatch_config, passenger_coordinate
    ) -> None:
        writer = make_writer()
        session, decisions, _ = make_session(
            make_reader(encode_request(passenger_coordinate)[:10]),
            writer,
            dispatch_config,
        )

        with pytest.raises(PrematureTerminationError):
            await session.run()

        assert decisions.requests == []
        assert writer.buffer == bytearray()
        assert writer.closed is True
        assert session.state == DispatchState.CLOSED

    @pytest.mark.asyncio
    async def test_malformed_request(self, make_reader, make_writer, dispatch_config) -> None:
        writer = make_writer()
        session, decisions, _ = make_session(make_reader(b"\xff" * 64), writer, dispatch_config)

        with pytest.raises(MalformedFrameError):
            await session.run()

        assert decisions.requests == []
        assert writer.closed is True

    @pytest.mark.asyncio
    async def test_request_timeout(self, make_reader, make_writer, base_coordinate) -> None:
        config = DispatchConfig(base_coordinate=base_coordinate, request_timeout=0.01)
        writer = make_writer()
        session, _, _ = make_session(make_reader(b"", eof=False), writer, config)

        with pytest.raises(TransportError):
            await session.run()

        assert writer.closed is True

    @pytest.mark.asyncio
    async def test_send_failure_mid_stream(
        self, make_reader, make_writer, dispatch_config, passenger_coordinate, recording_sleep
    ) -> None:
        writer = make_writer(drain_error=BrokenPipeError("broken pipe"))
        session, _, _ = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            dispatch_config,
            sleep=recording_sleep,
        )

        with pytest.raises(TransportError) as exc_info:
            await session.run()

        assert exc_info.value.operation == "send()"
        assert recording_sleep.calls == []
        assert writer.closed is True

    @pytest.mark.asyncio
    async def test_closing_writer_is_short_write(
        self, make_reader, make_writer, dispatch_config, passenger_coordinate
    ) -> None:
        writer = make_writer(closing=True)
        session, _, _ = make_session(
            make_reader(encode_request(passenger_coordinate)),
            writer,
            dispatch_config,
            accept=False,
        )

        with pytest.raises(ShortWriteError):
            await session.run()


class TestFormatPeer:
    """Тесты format_peer."""

    @pytest.mark.parametrize(
        "peername, expected",
        [
            (("127.0.0.1", 40000), "127.0.0.1:40000"),
            (("::1", 51511, 0, 0), "::1:51511"),
            (None, "unknown"),
            ("/tmp/sock", "/tmp/sock"),
        ],
    )
    def test_formats(self, peername, expected) -> None:
        assert format_peer(peername) == expected
