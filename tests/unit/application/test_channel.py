"""Unit tests for InvalidationChannel."""

from __future__ import annotations

import asyncio
import json
from typing import Callable

import pytest

from authz_core.application.channel import ChannelState, InvalidationChannel
from authz_core.kernel.errors import ConflictError
from authz_core.kernel.messaging import PermissionUpdateEvent, user_topic
from authz_core.resilience.retry import ConstantBackoff
from authz_core.testing.fakes import InMemoryPermissionBroker


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TOPIC = user_topic("u1")


class _Recorder:
    def __init__(self) -> None:
        self.events: list[PermissionUpdateEvent] = []

    async def __call__(self, event: PermissionUpdateEvent) -> None:
        self.events.append(event)


def _channel(
    broker: InMemoryPermissionBroker, handler: Callable[..., object] | None = None
) -> tuple[InvalidationChannel, _Recorder]:
    recorder = _Recorder()
    channel = InvalidationChannel(broker, handler or recorder, backoff=ConstantBackoff(0))
    return channel, recorder


async def _eventually(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


# ---------------------------------------------------------------------------
# Subscribe / close
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_initial_state(self) -> None:
        channel, _ = _channel(InMemoryPermissionBroker())
        assert channel.state is ChannelState.DISCONNECTED
        assert channel.user_id is None

    def test_subscribe_connects_in_background(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, _ = _channel(broker)
            handle = await channel.subscribe("u1")
            assert handle.user_id == "u1"
            assert not handle.closed
            await asyncio.wait_for(channel.wait_subscribed(), 1.0)
            assert channel.state is ChannelState.SUBSCRIBED
            assert broker.subscriber_count(TOPIC) == 1
            await handle.close()

        asyncio.run(run())

    def test_handle_close_is_idempotent(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, _ = _channel(broker)
            handle = await channel.subscribe("u1")
            await channel.wait_subscribed()
            await handle.close()
            await handle.close()
            await channel.close()
            assert handle.closed
            assert channel.state is ChannelState.CLOSED
            assert broker.subscriber_count() == 0

        asyncio.run(run())

    def test_close_before_connected(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, _ = _channel(broker)
            await channel.subscribe("u1")
            await channel.close()
            await asyncio.sleep(0.01)
            assert channel.state is ChannelState.CLOSED
            assert broker.subscriber_count() == 0

        asyncio.run(run())

    def test_second_subscribe_rejected(self) -> None:
        async def run() -> None:
            channel, _ = _channel(InMemoryPermissionBroker())
            await channel.subscribe("u1")
            with pytest.raises(ConflictError):
                await channel.subscribe("u2")
            await channel.close()

        asyncio.run(run())

    def test_subscribe_after_close_rejected(self) -> None:
        async def run() -> None:
            channel, _ = _channel(InMemoryPermissionBroker())
            await channel.close()
            with pytest.raises(ConflictError):
                await channel.subscribe("u1")

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_own_event_delivered(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, recorder = _channel(broker)
            await channel.subscribe("u1")
            await channel.wait_subscribed()
            await broker.notify_user("u1")
            await _eventually(lambda: len(recorder.events) == 1)
            assert recorder.events[0] == PermissionUpdateEvent("u1")
            await channel.close()

        asyncio.run(run())

    def test_other_topics_not_delivered(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, recorder = _channel(broker)
            await channel.subscribe("u1")
            await channel.wait_subscribed()
            assert await broker.publish(user_topic("u2"), PermissionUpdateEvent("u2").encode()) == 0
            await asyncio.sleep(0.01)
            assert recorder.events == []
            await channel.close()

        asyncio.run(run())

    def test_bad_messages_skipped(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, recorder = _channel(broker)
            await channel.subscribe("u1")
            await channel.wait_subscribed()

            await broker.publish(TOPIC, b"not json")
            await broker.publish(TOPIC, b"[1, 2]")
            await broker.publish(TOPIC, json.dumps({"type": "PERMISSION_UPDATE"}))
            await broker.publish(TOPIC, json.dumps({"type": "HEARTBEAT"}))
            await broker.publish(TOPIC, PermissionUpdateEvent("u2").encode())
            await broker.publish(TOPIC, PermissionUpdateEvent("u1").encode())

            await _eventually(lambda: len(recorder.events) == 1)
            assert recorder.events == [PermissionUpdateEvent("u1")]
            assert channel.state is ChannelState.SUBSCRIBED
            await channel.close()

        asyncio.run(run())

    def test_handler_failure_keeps_listening(self) -> None:
        async def run() -> None:
            calls: list[str] = []

            async def flaky(event: PermissionUpdateEvent) -> None:
                calls.append(event.user_id)
                if len(calls) == 1:
                    raise RuntimeError("handler bug")

            broker = InMemoryPermissionBroker()
            channel, _ = _channel(broker, flaky)
            await channel.subscribe("u1")
            await channel.wait_subscribed()
            await broker.notify_user("u1")
            await broker.notify_user("u1")
            await _eventually(lambda: len(calls) == 2)
            assert channel.state is ChannelState.SUBSCRIBED
            await channel.close()

        asyncio.run(run())

    def test_handler_may_close_channel(self) -> None:
        async def run() -> None:
            holder: list[InvalidationChannel] = []

            async def closing(event: PermissionUpdateEvent) -> None:
                await holder[0].close()

            broker = InMemoryPermissionBroker()
            channel, _ = _channel(broker, closing)
            holder.append(channel)
            await channel.subscribe("u1")
            await channel.wait_subscribed()
            await broker.notify_user("u1")
            await _eventually(lambda: channel.state is ChannelState.CLOSED)
            await _eventually(lambda: broker.subscriber_count() == 0)

        asyncio.run(run())


# ---------------------------------------------------------------------------
# Reconnect
# ---------------------------------------------------------------------------


class TestReconnect:
    def test_failed_subscribes_are_retried(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            broker.fail_next_subscribes = 2
            channel, _ = _channel(broker)
            await channel.subscribe("u1")
            await asyncio.wait_for(channel.wait_subscribed(), 1.0)
            assert broker.subscribe_calls == 3
            assert broker.subscriber_count(TOPIC) == 1
            await channel.close()

        asyncio.run(run())

    def test_drop_reconnects_without_duplicates(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            channel, recorder = _channel(broker)
            await channel.subscribe("u1")
            await channel.wait_subscribed()

            for _ in range(3):
                broker.drop_connections()
                await _eventually(lambda: broker.subscriber_count(TOPIC) == 1)

            await broker.notify_user("u1")
            await _eventually(lambda: len(recorder.events) == 1)
            await asyncio.sleep(0.01)
            assert len(recorder.events) == 1
            assert broker.subscribe_calls == 4
            await channel.close()

        asyncio.run(run())

    def test_disconnected_state_while_waiting(self) -> None:
        async def run() -> None:
            broker = InMemoryPermissionBroker()
            broker.fail_next_subscribes = 1
            channel = InvalidationChannel(broker, _Recorder(), backoff=ConstantBackoff(10.0))
            await channel.subscribe("u1")
            await _eventually(lambda: channel.state is ChannelState.DISCONNECTED)
            await channel.close()
            assert channel.state is ChannelState.CLOSED

        asyncio.run(run())
