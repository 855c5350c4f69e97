"""Redis adapter – pub/sub invalidation transport and publisher."""
from authz_core.adapters.redis.pubsub import (
    RedisChannelSubscription,
    RedisChannelTransport,
    RedisPermissionUpdatePublisher,
)

__all__ = ["RedisChannelSubscription", "RedisChannelTransport", "RedisPermissionUpdatePublisher"]
