"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from watchrun_engine.models import (  # noqa: E402
    Argv,
    ChangeEvent,
    CommandResult,
    EventKind,
    RunStatus,
    WatchConfig,
)
from watchrun_engine.watchers import EventChannel  # noqa: E402


def python_command(code: str) -> Argv:
    """Argv running a Python snippet with the current interpreter."""
    return Argv(sys.executable, ("-c", code))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """In-memory event source driven by the test."""

    def __init__(self):
        self.channel = EventChannel()
        self.started = False
        self.stopped = False

    def start(self, loop) -> None:
        self.channel.attach(loop)
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    async def recv(self, timeout: float) -> ChangeEvent:
        return await self.channel.recv(timeout)

    def emit(self, kind: EventKind, *paths: str) -> None:
        self.channel.send(ChangeEvent(kind, tuple(Path(p) for p in paths), 0.0))


class RecordingNotifier:
    """Records every notification as (name, payload)."""

    def __init__(self):
        self.calls: list[tuple[str, object]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def watching(self, config, shell) -> None:
        self.calls.append(("watching", config))

    def change_detected(self) -> None:
        self.calls.append(("change_detected", None))

    def output(self, line) -> None:
        self.calls.append(("output", line))

    def finished(self, result) -> None:
        self.calls.append(("finished", result))

    def waiting(self) -> None:
        self.calls.append(("waiting", None))


class FakeSupervisor:
    """Supervisor stand-in recording each run."""

    def __init__(self, status: RunStatus = RunStatus.SUCCESS, clock=None):
        self.status = status
        self.clock = clock
        self.runs: list[tuple[object, Path, float | None]] = []

    async def run(self, spec, working_dir) -> CommandResult:
        self.runs.append((spec, working_dir, self.clock() if self.clock else None))
        exit_code = 0 if self.status is RunStatus.SUCCESS else 1
        return CommandResult(status=self.status, exit_code=exit_code)


@pytest.fixture
def fake_clock():
    """A clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def fake_source():
    """An in-memory event source."""
    return FakeSource()


@pytest.fixture
def notifier():
    """A notifier that records calls."""
    return RecordingNotifier()


@pytest.fixture
def watch_config(tmp_path):
    """Config watching tmp_path for .txt files with a trivial command."""
    return WatchConfig(
        directory=tmp_path,
        command=python_command("print('ran')"),
        extensions=frozenset({"txt"}),
        quiet_period_ms=500,
        window_ms=1000,
        tick_ms=20,
    )
