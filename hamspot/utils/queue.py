"""Outbound message queues shared by producers and the dispatcher."""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from loguru import logger

from hamspot.schemas import OutboundMessage


class OutboundQueue(ABC):
    """FIFO hand-off between spot producers and the single dispatcher."""

    @abstractmethod
    async def enqueue(self, message: OutboundMessage) -> None:
        """Append to the tail. Never waits on dispatcher progress."""
        pass

    @abstractmethod
    async def dequeue(self) -> Optional[OutboundMessage]:
        """Remove and return the head, or None when nothing is pending."""
        pass

    @abstractmethod
    async def depth(self) -> int:
        pass


class MemoryOutboundQueue(OutboundQueue):
    """Unbounded in-process queue."""

    def __init__(self):
        self._queue: asyncio.Queue[OutboundMessage] = asyncio.Queue()

    async def enqueue(self, message: OutboundMessage) -> None:
        self._queue.put_nowait(message)

    async def dequeue(self) -> Optional[OutboundMessage]:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    async def depth(self) -> int:
        return self._queue.qsize()


class RedisOutboundQueue(OutboundQueue):
    """Queue persisted as a Redis list of JSON documents."""

    def __init__(self, redis, key: str = "messages"):
        self._redis = redis
        self._key = key

    async def enqueue(self, message: OutboundMessage) -> None:
        await self._redis.rpush(self._key, message.model_dump_json())

    async def dequeue(self) -> Optional[OutboundMessage]:
        while True:
            raw = await self._redis.lpop(self._key)
            if raw is None:
                return None
            try:
                return OutboundMessage.model_validate_json(raw)
            except ValueError as e:
                logger.error(f"Unable to decode queued message - dropping: {e}")

    async def depth(self) -> int:
        return int(await self._redis.llen(self._key))
