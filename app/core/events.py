import json
import logging
from typing import AsyncIterator

import redis
import redis.asyncio as aioredis

from app.core.config import settings

logger = logging.getLogger("events")

class CartEvents:
    """Redis pub/sub feed of cart-line changes, one channel per owner"""

    def __init__(self, url: str = None):
        self.url = url or settings.REDIS_URL
        self.redis_client = redis.Redis.from_url(
            self.url,
            decode_responses=True,
            retry_on_timeout=True
        )

    @staticmethod
    def channel(user_id: str) -> str:
        return f"cart:{user_id}"

    def publish(self, user_id: str, event: str, **data) -> bool:
        """Announce a change to the owner's cart; never fails the caller"""
        payload = json.dumps({"event": event, "user_id": user_id, **data}, default=str)
        try:
            self.redis_client.publish(self.channel(user_id), payload)
            return True
        except redis.RedisError as e:
            logger.warning(f"Cart event '{event}' for {user_id} not published: {e}")
            return False

    def subscriber(self) -> aioredis.Redis:
        """Async client for one stream; each listener gets its own connection"""
        return aioredis.Redis.from_url(self.url, decode_responses=True)

    async def listen(self, user_id: str) -> AsyncIterator[str]:
        """Yield raw event payloads for one owner until the client goes away"""
        client = self.subscriber()
        pubsub = client.pubsub()
        channel = self.channel(user_id)
        await pubsub.subscribe(channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") == "message":
                    yield message["data"]
        finally:
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()
            await client.aclose()

# Global publisher instance
cart_events = CartEvents()
