"""Application channel – InvalidationChannel and SubscriptionHandle.

One :class:`InvalidationChannel` listens on one user's topic. A background
task owns the transport subscription and walks the state machine::

    DISCONNECTED -> CONNECTING -> SUBSCRIBED
         ^                            |
         +------- (disconnect) -------+

Every disconnect or failed connect waits ``backoff.compute(attempt)`` and
reconnects. At most one transport subscription is open at any time, so a
reconnect never duplicates the handler. :meth:`InvalidationChannel.close`
moves to the terminal ``CLOSED`` state.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from authz_core.application.channel.state import ChannelState
from authz_core.kernel.errors import ChannelDisconnectedError, ConflictError, SerializationError
from authz_core.kernel.messaging import (
    ChannelSubscription,
    ChannelTransport,
    PermissionUpdateEvent,
    RawMessage,
    decode_event,
    user_topic,
)
from authz_core.observability.logging import get_logger
from authz_core.resilience.retry import BackoffStrategy, ConstantBackoff

logger = get_logger(__name__)

UpdateHandler = Callable[[PermissionUpdateEvent], Awaitable[None]]

DEFAULT_RECONNECT_DELAY = 5.0


class SubscriptionHandle:
    """Revocable handle returned by :meth:`InvalidationChannel.subscribe`."""

    def __init__(self, channel: "InvalidationChannel") -> None:
        self._channel = channel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def user_id(self) -> str | None:
        return self._channel.user_id

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._channel.close()


class InvalidationChannel:
    """Per-user listener for ``PERMISSION_UPDATE`` events.

    *on_update* is awaited for each event addressed to the subscribed user.
    Events for other users, malformed payloads and handler failures are
    logged and skipped; the listener keeps running.
    """

    def __init__(
        self,
        transport: ChannelTransport,
        on_update: UpdateHandler,
        *,
        backoff: BackoffStrategy | None = None,
    ) -> None:
        self._transport = transport
        self._on_update = on_update
        self._backoff = backoff or ConstantBackoff(DEFAULT_RECONNECT_DELAY)
        self._state = ChannelState.DISCONNECTED
        self._user_id: str | None = None
        self._task: asyncio.Task[None] | None = None
        self._subscription: ChannelSubscription | None = None
        self._connected = asyncio.Event()

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def user_id(self) -> str | None:
        return self._user_id

    async def subscribe(self, user_id: str) -> SubscriptionHandle:
        """Start listening on *user_id*'s topic.

        Returns immediately; the connection is established in the
        background. A channel serves a single subscription.
        """
        if self._state is ChannelState.CLOSED:
            raise ConflictError("Invalidation channel is closed", state=self._state.value)
        if self._task is not None:
            raise ConflictError(
                f"Invalidation channel already subscribed for user '{self._user_id}'",
                state=self._state.value,
            )
        self._user_id = user_id
        self._state = ChannelState.CONNECTING
        self._task = asyncio.create_task(self._listen(user_id), name=f"invalidation:{user_id}")
        return SubscriptionHandle(self)

    async def wait_subscribed(self) -> None:
        """Block until the transport subscription is live."""
        await self._connected.wait()

    async def close(self) -> None:
        """Stop listening. Idempotent; safe to call from the listener itself."""
        if self._state is ChannelState.CLOSED:
            return
        self._state = ChannelState.CLOSED
        self._connected.clear()
        logger.debug("channel.closed", user_id=self._user_id)
        task, self._task = self._task, None
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.close()
        if task is None or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    async def _listen(self, user_id: str) -> None:
        topic = user_topic(user_id)
        attempt = 0
        while self._state is not ChannelState.CLOSED:
            self._state = ChannelState.CONNECTING
            try:
                subscription = await self._transport.subscribe(topic)
            except ChannelDisconnectedError as exc:
                attempt += 1
                await self._wait_before_reconnect(topic, attempt, exc)
                continue

            if self._state is ChannelState.CLOSED:
                await subscription.close()
                return
            self._subscription = subscription
            self._state = ChannelState.SUBSCRIBED
            self._connected.set()
            attempt = 0
            logger.info("channel.subscribed", topic=topic)

            error: ChannelDisconnectedError | None = None
            try:
                async for raw in subscription:
                    await self._dispatch(raw, user_id)
            except ChannelDisconnectedError as exc:
                error = exc
            finally:
                self._connected.clear()
                if self._subscription is subscription:
                    self._subscription = None
                    await subscription.close()

            if self._state is ChannelState.CLOSED:
                return
            attempt += 1
            await self._wait_before_reconnect(topic, attempt, error)

    async def _wait_before_reconnect(
        self, topic: str, attempt: int, error: ChannelDisconnectedError | None
    ) -> None:
        self._state = ChannelState.DISCONNECTED
        delay = self._backoff.compute(attempt)
        logger.warning(
            "channel.reconnecting",
            topic=topic,
            attempt=attempt,
            delay=delay,
            error=str(error) if error is not None else None,
        )
        await asyncio.sleep(delay)

    async def _dispatch(self, raw: RawMessage, user_id: str) -> None:
        try:
            event = decode_event(raw)
        except SerializationError as exc:
            logger.warning("channel.malformed_message", user_id=user_id, error=exc.message)
            return
        if event is None:
            return
        if event.user_id != user_id:
            logger.debug("channel.foreign_event_ignored", user_id=user_id, event_user_id=event.user_id)
            return
        try:
            await self._on_update(event)
        except Exception:
            logger.exception("channel.handler_failed", user_id=user_id)


__all__ = ["DEFAULT_RECONNECT_DELAY", "InvalidationChannel", "SubscriptionHandle", "UpdateHandler"]
