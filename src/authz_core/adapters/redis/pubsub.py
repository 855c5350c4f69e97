"""Redis adapter – pub/sub transport and permission-update publisher."""
from __future__ import annotations

from typing import Any, AsyncIterator

from authz_core.kernel.errors import ChannelDisconnectedError
from authz_core.kernel.messaging import (
    ChannelSubscription,
    ChannelTransport,
    PermissionUpdateEvent,
    PermissionUpdatePublisher,
    RawMessage,
    user_topic,
)
from authz_core.observability.logging import get_logger

logger = get_logger(__name__)


def _require_redis() -> Any:
    try:
        import redis.asyncio as aioredis
        return aioredis
    except ImportError as exc:
        raise ImportError("Install 'authz-core[redis]' to use the Redis adapter") from exc


class RedisChannelSubscription(ChannelSubscription):
    """One ``redis.asyncio`` PubSub subscribed to a single channel."""

    def __init__(self, pubsub: Any, topic: str, error_types: tuple[type[BaseException], ...]) -> None:
        self._pubsub = pubsub
        self._topic = topic
        self._error_types = error_types
        self._closed = False

    async def __aiter__(self) -> AsyncIterator[RawMessage]:
        try:
            async for message in self._pubsub.listen():
                if self._closed:
                    return
                if message.get("type") != "message":
                    continue
                yield message["data"]
        except self._error_types as exc:
            if self._closed:
                return
            raise ChannelDisconnectedError(self._topic, str(exc), cause=exc) from exc
        if not self._closed:
            raise ChannelDisconnectedError(self._topic)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._pubsub.unsubscribe(self._topic)
        except self._error_types as exc:
            logger.debug("redis.unsubscribe_failed", topic=self._topic, error=str(exc))
        await self._pubsub.aclose()


class RedisChannelTransport(ChannelTransport):
    """Subscribe to per-user invalidation topics on Redis pub/sub."""

    def __init__(self, url: str, **kwargs: Any) -> None:
        aioredis = _require_redis()
        self._client = aioredis.from_url(url, **kwargs)
        self._error_types: tuple[type[BaseException], ...] = (aioredis.RedisError, OSError)

    async def subscribe(self, topic: str) -> ChannelSubscription:
        pubsub = self._client.pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(topic)
        except self._error_types as exc:
            await pubsub.aclose()
            raise ChannelDisconnectedError(topic, str(exc), cause=exc) from exc
        logger.debug("redis.subscribed", topic=topic)
        return RedisChannelSubscription(pubsub, topic, self._error_types)

    async def close(self) -> None:
        await self._client.aclose()


class RedisPermissionUpdatePublisher(PermissionUpdatePublisher):
    """Publish ``PERMISSION_UPDATE`` events for the role editor's backend."""

    def __init__(self, url: str, **kwargs: Any) -> None:
        aioredis = _require_redis()
        self._client = aioredis.from_url(url, **kwargs)
        self._error_types: tuple[type[BaseException], ...] = (aioredis.RedisError, OSError)

    async def notify_user(self, user_id: str) -> None:
        topic = user_topic(user_id)
        try:
            receivers = await self._client.publish(topic, PermissionUpdateEvent(user_id).encode())
        except self._error_types as exc:
            raise ChannelDisconnectedError(topic, str(exc), cause=exc) from exc
        logger.debug("redis.published", topic=topic, receivers=receivers)

    async def close(self) -> None:
        await self._client.aclose()


__all__ = [
    "RedisChannelSubscription",
    "RedisChannelTransport",
    "RedisPermissionUpdatePublisher",
]
