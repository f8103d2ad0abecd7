"""Deduplication processor."""

from typing import Optional

from loguru import logger

from hamspot.schemas import Spot
from hamspot.utils.cache import DedupCache
from .base import BaseProcessor


class DedupProcessor(BaseProcessor):
    """Drops spots that have been notified recently.

    Only looks the key up; the relay marks it once the message is queued.
    """

    def __init__(self, cache: DedupCache):
        self.cache = cache

    async def process(self, spot: Spot) -> Optional[Spot]:
        if await self.cache.seen_recently(spot.dedup_key):
            logger.info(f"Already have {spot.callsign} on {spot.frequency} with mode {spot.mode}, skipping")
            return None
        return spot
