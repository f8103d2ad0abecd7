"""Main orchestration engine."""

import asyncio
from typing import List, Optional

from loguru import logger
from redis.asyncio import Redis

from hamspot.collectors.hamalert import HamAlertReceiver
from hamspot.collectors.pota import PotaCollector
from hamspot.config import Settings
from hamspot.notifiers.base import ChatClient, ChatSendError
from hamspot.notifiers.discord import DiscordClient
from hamspot.notifiers.dispatcher import Dispatcher
from hamspot.processors.filter import FilterProcessor
from hamspot.services.members import MemberDirectory
from hamspot.services.relay import SpotRelay
from hamspot.utils.cache import DedupCache, MemoryDedupCache, RedisDedupCache
from hamspot.utils.queue import MemoryOutboundQueue, OutboundQueue, RedisOutboundQueue


class SpotEngine:
    """Wires the producers, shared cache and queue, and the dispatcher."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[ChatClient] = None,
        cache: Optional[DedupCache] = None,
        queue: Optional[OutboundQueue] = None,
        redis=None,
    ):
        self.settings = settings
        self._redis = redis
        if self._redis is None and settings.store.redis_url and (cache is None or queue is None):
            self._redis = Redis.from_url(settings.store.redis_url)
            logger.info(f"Using Redis at {settings.store.redis_addr} for dedup cache and queue")

        # 1. Shared state
        self.cache = cache or self._create_cache()
        self.queue = queue or self._create_queue()

        # 2. Chat platform
        self.client = client or DiscordClient(settings.discord.token, settings.discord.api_base)
        self.members = MemberDirectory(
            callsigns=settings.members.callsigns,
            client=self.client,
            group_id=settings.discord.guild,
            refresh_interval=settings.members.refresh_interval,
        )

        # 3. Decision path shared by both producers
        self.relay = SpotRelay(
            channel=settings.discord.channel,
            cache=self.cache,
            queue=self.queue,
            spot_filter=FilterProcessor(settings.filters.max_frequency, settings.filters.modes),
            ttl=settings.dedup.ttl,
        )

        # 4. Producers
        self.poller = PotaCollector(
            self.relay,
            url=settings.pota.url,
            poll_interval=settings.pota.poll_interval,
            max_spots=settings.pota.max_spots,
            timeout=settings.pota.timeout,
            is_member=self.members.is_member,
        )
        self.receiver = HamAlertReceiver(
            self.relay,
            max_inflight=settings.server.max_inflight,
            max_pending=settings.server.max_pending,
            is_member=self.members.is_member,
        )

        # 5. Consumer
        self.dispatcher = Dispatcher(
            self.queue,
            self.client,
            idle_interval=settings.dispatcher.idle_interval,
            max_attempts=settings.dispatcher.max_attempts,
            backoff_base=settings.dispatcher.backoff_base,
        )

        self._tasks: List[asyncio.Task] = []

    def _create_cache(self) -> DedupCache:
        if self._redis is not None:
            return RedisDedupCache(self._redis, ttl=self.settings.dedup.ttl)
        return MemoryDedupCache(ttl=self.settings.dedup.ttl)

    def _create_queue(self) -> OutboundQueue:
        if self._redis is not None:
            return RedisOutboundQueue(self._redis)
        return MemoryOutboundQueue()

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    async def start(self) -> None:
        logger.info("hamspot engine starting...")
        try:
            await self.client.connect()
        except ChatSendError as e:
            logger.error(f"Error connecting to chat platform: {e}")

        self._tasks = [
            asyncio.create_task(self.dispatcher.run(), name="dispatcher"),
            asyncio.create_task(self.poller.run(), name="pota-poller"),
            asyncio.create_task(self.members.run(), name="member-refresh"),
        ]

    async def stop(self) -> None:
        self.dispatcher.stop()
        self.members.stop()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        await self.receiver.drain()
        await self.poller.stop()
        await self.client.close()
        if self._redis is not None:
            await self._redis.aclose()
        logger.info("hamspot engine stopped")

    async def status(self) -> dict:
        return {
            "status": "running" if self.running else "stopped",
            "queue_depth": await self.queue.depth(),
            "dedup_entries": await self.cache.size(),
            "members": len(self.members),
            **self.dispatcher.stats(),
        }
