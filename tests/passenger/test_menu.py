# tests/passenger/test_menu.py
"""
Тесты меню пассажира и консольного наблюдателя (src/passenger/menu.py).
"""

from __future__ import annotations

import asyncio
import io
import threading
import time

import pytest

from src.common.constants import MenuChoice
from src.common.localization import get_text
from src.passenger.menu import ConsoleMenuProvider, ConsoleRideObserver, ScriptedMenuProvider


class TestConsoleMenuProvider:
    """Тесты ConsoleMenuProvider."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer, expected", [("1", MenuChoice.REQUEST_RIDE), ("0", MenuChoice.STOP), (" 1\n", MenuChoice.REQUEST_RIDE)])
    async def test_valid_choice(self, answer: str, expected: MenuChoice) -> None:
        menu = ConsoleMenuProvider(read_line=lambda _prompt: answer, out=io.StringIO())
        assert await menu.choose(driver_not_found=False) == expected

    @pytest.mark.asyncio
    async def test_reprompts_until_valid(self) -> None:
        answers = iter(["x", "5", "1"])
        out = io.StringIO()
        menu = ConsoleMenuProvider(read_line=lambda _prompt: next(answers), out=out)

        assert await menu.choose(driver_not_found=False) == MenuChoice.REQUEST_RIDE
        assert out.getvalue().count(get_text("INVALID_CHOICE")) == 2

    @pytest.mark.asyncio
    async def test_shows_driver_not_found(self) -> None:
        out = io.StringIO()
        menu = ConsoleMenuProvider(read_line=lambda _prompt: "0", out=out)

        await menu.choose(driver_not_found=True)

        assert get_text("CLIENT_NO_DRIVER") in out.getvalue()

    @pytest.mark.asyncio
    async def test_no_notice_on_first_menu(self) -> None:
        out = io.StringIO()
        menu = ConsoleMenuProvider(read_line=lambda _prompt: "0", out=out)

        await menu.choose(driver_not_found=False)

        assert get_text("CLIENT_NO_DRIVER") not in out.getvalue()
        assert get_text("CLIENT_REQUEST_RIDE") in out.getvalue()

    @pytest.mark.asyncio
    async def test_closed_stdin_means_stop(self) -> None:
        """EOF на stdin (Ctrl-D, перенаправленный ввод) равносилен выбору "0"."""

        def closed_stdin(_prompt: str) -> str:
            raise EOFError

        menu = ConsoleMenuProvider(read_line=closed_stdin, out=io.StringIO())
        assert await menu.choose(driver_not_found=True) == MenuChoice.STOP


class TestScriptedMenuProvider:
    """Тесты ScriptedMenuProvider."""

    @pytest.mark.asyncio
    async def test_replays_then_stops(self) -> None:
        menu = ScriptedMenuProvider([MenuChoice.REQUEST_RIDE])
        assert await menu.choose(False) == MenuChoice.REQUEST_RIDE
        assert await menu.choose(True) == MenuChoice.STOP
        assert menu.prompts == [False, True]


class TestConsoleRideObserver:
    """Тесты ConsoleRideObserver."""

    def test_prints_distances_and_arrival(self) -> None:
        out = io.StringIO()
        observer = ConsoleRideObserver(out=out)

        observer.on_progress(971)
        observer.on_progress(571)
        observer.on_arrived()

        text = out.getvalue()
        assert get_text("DRIVER_DISTANCE", distance=971) in text
        assert get_text("DRIVER_DISTANCE", distance=571) in text
        assert get_text("CLIENT_DRIVER_ARRIVED") in text
        assert text.index("971") < text.index("571")

    def test_rule_only_before_first_distance(self) -> None:
        out = io.StringIO()
        observer = ConsoleRideObserver(out=out)

        observer.on_progress(971)
        observer.on_progress(571)

        lines = out.getvalue().splitlines()
        assert lines[0].startswith("---")
        assert not lines[2].startswith("---")

    def test_decline_prints_nothing(self) -> None:
        out = io.StringIO()
        ConsoleRideObserver(out=out).on_declined()
        assert out.getvalue() == ""


def test_cancelled_menu_does_not_delay_loop_shutdown() -> None:
    """Отмена ожидания выбора в меню не держит asyncio.run до ввода строки."""
    started = threading.Event()
    release = threading.Event()

    def waiting_passenger(_prompt: str) -> str:
        started.set()
        release.wait(timeout=10)
        return "1"

    async def scenario() -> None:
        menu = ConsoleMenuProvider(read_line=waiting_passenger, out=io.StringIO())
        pending = asyncio.create_task(menu.choose(driver_not_found=False))
        while not started.is_set():
            await asyncio.sleep(0.01)
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

    begin = time.monotonic()
    try:
        asyncio.run(scenario())
        elapsed = time.monotonic() - begin
    finally:
        release.set()

    assert elapsed < 2.0
