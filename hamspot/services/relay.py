"""Shared decision path from a normalized spot to a queued message."""

from typing import Optional

from loguru import logger

from hamspot.processors.base import ProcessorPipeline
from hamspot.processors.dedup import DedupProcessor
from hamspot.processors.filter import FilterProcessor
from hamspot.notifiers.template import SpotTemplate
from hamspot.schemas import OutboundMessage, Spot
from hamspot.utils.cache import DedupCache
from hamspot.utils.queue import OutboundQueue


class SpotRelay:
    """Filter, dedup, render and enqueue spots from any producer."""

    def __init__(
        self,
        channel: str,
        cache: DedupCache,
        queue: OutboundQueue,
        spot_filter: Optional[FilterProcessor] = None,
        ttl: Optional[float] = None,
    ):
        self.channel = channel
        self.cache = cache
        self.queue = queue
        self.ttl = ttl
        self.pipeline = ProcessorPipeline([
            spot_filter or FilterProcessor(),
            DedupProcessor(cache),
        ])

    async def submit(self, spot: Spot) -> bool:
        """Queue a notification for ``spot`` unless it is filtered or a repeat."""
        accepted = await self.pipeline.run(spot)
        if accepted is None:
            return False

        message = OutboundMessage(channel=self.channel, text=SpotTemplate.format(accepted))
        await self.queue.enqueue(message)
        logger.info(f"Queued message for {accepted.callsign} on {accepted.frequency}")

        await self.cache.mark_seen(accepted.dedup_key, self.ttl)
        return True
