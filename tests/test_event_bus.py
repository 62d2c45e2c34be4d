import asyncio

import pytest

from selectkit.core.event_bus import EventBus


@pytest.mark.asyncio
async def test_publish_reaches_each_handler_once() -> None:
    bus = EventBus()
    received = []

    async def handler(payload):
        received.append(payload["n"])

    await bus.subscribe("numbers", handler)
    await bus.subscribe("numbers", handler)
    await bus.publish("numbers", {"n": 1})

    assert await bus.wait_until_idle(timeout=1.0)
    assert received == [1]
    assert bus.handler_count("numbers") == 1


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others() -> None:
    bus = EventBus()
    received = []

    async def broken(payload):
        raise RuntimeError("nope")

    async def working(payload):
        received.append(payload)

    await bus.subscribe("topic", broken)
    await bus.subscribe("topic", working)
    await bus.publish("topic", {"ok": True})

    assert await bus.wait_until_idle(timeout=1.0)
    assert received == [{"ok": True}]


@pytest.mark.asyncio
async def test_unsubscribe_and_clear() -> None:
    bus = EventBus()
    received = []

    async def handler(payload):
        received.append(payload)

    await bus.subscribe("a", handler)
    await bus.subscribe("b", handler)
    await bus.unsubscribe("a", handler)
    assert bus.topics() == ["b"]

    await bus.publish("a", {})
    bus.clear()
    await bus.publish("b", {})
    assert await bus.wait_until_idle(timeout=1.0)
    assert received == []


@pytest.mark.asyncio
async def test_wait_until_idle_times_out() -> None:
    bus = EventBus()
    release = asyncio.Event()

    async def slow(payload):
        await release.wait()

    await bus.subscribe("slow", slow)
    await bus.publish("slow", {})

    assert not await bus.wait_until_idle(timeout=0.05)
    release.set()
    assert await bus.wait_until_idle(timeout=1.0)
