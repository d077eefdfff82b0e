"""Shared test fixtures — no microphone, network or event-loop timing needed."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from voxnav.bus import DispatchBus, HistoryNavigator, VoiceCommandEvent
from voxnav.core.types import Intent
from voxnav.session import SessionController


class FakeClock:
    """Monotonic milliseconds under test control."""

    def __init__(self, now: float = 10_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeSource:
    """Records start/stop calls made by the session controller."""

    def __init__(self) -> None:
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        self.starts += 1

    def stop(self) -> None:
        self.stops += 1


class RecordingFeedback:
    """Feedback surface that keeps every message and announcement."""

    def __init__(self) -> None:
        self.statuses: list[str] = []
        self.announced: list[Intent] = []

    @property
    def status(self) -> str:
        return self.statuses[-1] if self.statuses else ""

    def update_status(self, message: str) -> None:
        self.statuses.append(message)

    def announce_command(self, intent: Intent) -> None:
        self.announced.append(intent)


class FakeRemote:
    """Remote interpreter returning a canned intent."""

    def __init__(self, result: Intent | None = None) -> None:
        self.result = result
        self.calls: list[str] = []

    async def interpret(self, text: str) -> Intent | None:
        self.calls.append(text)
        return self.result


class EventLog:
    """Bus subscriber that records intents and optionally claims them."""

    def __init__(self, claim: bool = False) -> None:
        self.claim = claim
        self.intents: list[Intent] = []

    def __call__(self, event: VoiceCommandEvent) -> None:
        self.intents.append(event.intent)
        if self.claim:
            event.prevent_default()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch) -> None:
    """Never read the developer's real ~/.config/voxnav."""
    monkeypatch.setenv("VOXNAV_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def navigator() -> HistoryNavigator:
    return HistoryNavigator()


@pytest.fixture
def bus(navigator: HistoryNavigator) -> DispatchBus:
    return DispatchBus(navigator=navigator)


@pytest.fixture
def events(bus: DispatchBus) -> EventLog:
    log = EventLog()
    bus.subscribe(log)
    return log


@pytest.fixture
def make_session(
    bus: DispatchBus,
    feedback: RecordingFeedback,
    source: FakeSource,
    clock: FakeClock,
) -> Callable[..., SessionController]:
    def factory(**kwargs) -> SessionController:
        kwargs.setdefault("restart_delay_ms", 5)
        return SessionController(bus=bus, feedback=feedback, source=source, clock=clock, **kwargs)

    return factory


@pytest.fixture
def make_log() -> Callable[..., EventLog]:
    """Factory for extra bus subscribers: ``make_log(claim=True)``."""
    return EventLog


@pytest.fixture
def fake_remote_factory() -> Callable[..., FakeRemote]:
    """Factory for canned remote interpreters: ``fake_remote_factory(intent)``."""
    return FakeRemote
