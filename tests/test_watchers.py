"""Tests for EventChannel."""

import asyncio
import threading
from pathlib import Path

import pytest

from watchrun_engine.errors import WatchSourceDisconnected, WatchSourceError
from watchrun_engine.models import ChangeEvent, EventKind
from watchrun_engine.watchers import EventChannel


def make_event(name: str) -> ChangeEvent:
    return ChangeEvent(EventKind.CREATED, (Path(name),), 0.0)


@pytest.mark.asyncio
async def test_recv_times_out_when_empty():
    channel = EventChannel()
    channel.attach(asyncio.get_running_loop())

    with pytest.raises(TimeoutError):
        await channel.recv(0.01)


@pytest.mark.asyncio
async def test_events_received_in_order():
    channel = EventChannel()
    channel.attach(asyncio.get_running_loop())
    channel.send(make_event("a.txt"))
    channel.send(make_event("b.txt"))

    first = await channel.recv(1.0)
    second = await channel.recv(1.0)

    assert first.paths == (Path("a.txt"),)
    assert second.paths == (Path("b.txt"),)


@pytest.mark.asyncio
async def test_send_from_another_thread():
    channel = EventChannel()
    channel.attach(asyncio.get_running_loop())

    thread = threading.Thread(target=channel.send, args=(make_event("t.txt"),))
    thread.start()
    thread.join()

    event = await channel.recv(1.0)
    assert event.paths == (Path("t.txt"),)


@pytest.mark.asyncio
async def test_error_is_transient():
    channel = EventChannel()
    channel.attach(asyncio.get_running_loop())
    channel.send_error(OSError("inotify queue overflow"))
    channel.send(make_event("a.txt"))

    with pytest.raises(WatchSourceError, match="overflow"):
        await channel.recv(1.0)
    assert (await channel.recv(1.0)).paths == (Path("a.txt"),)


@pytest.mark.asyncio
async def test_close_drains_then_disconnects():
    channel = EventChannel()
    channel.attach(asyncio.get_running_loop())
    channel.send(make_event("a.txt"))
    channel.close()

    assert (await channel.recv(1.0)).paths == (Path("a.txt"),)
    with pytest.raises(WatchSourceDisconnected):
        await channel.recv(1.0)
    assert channel.is_disconnected
    with pytest.raises(WatchSourceDisconnected):
        await channel.recv(1.0)


def test_send_requires_attach():
    channel = EventChannel()
    with pytest.raises(RuntimeError, match="not attached"):
        channel.send(make_event("a.txt"))
