"""POTA spot poller."""

import asyncio
from enum import Enum
from typing import AsyncIterator, List, Optional

import aiohttp
from loguru import logger
from pydantic import ValidationError

from hamspot.processors.normalize import MemberCheck, from_pota, no_members
from hamspot.schemas import POTASpot, Spot
from hamspot.services.relay import SpotRelay
from .base import BaseCollector

POTA_SPOT_URL = "https://api.pota.app/spot/"


class PotaFetchError(Exception):
    """The POTA listing could not be fetched or decoded."""


class PollerState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"


class PotaCollector(BaseCollector):
    """Periodically fetch the POTA spot listing and relay new activations."""

    def __init__(
        self,
        relay: SpotRelay,
        url: str = POTA_SPOT_URL,
        poll_interval: float = 60,
        max_spots: int = 100,
        timeout: float = 30,
        is_member: MemberCheck = no_members,
    ):
        self.relay = relay
        self.url = url
        self.poll_interval = poll_interval
        self.max_spots = max_spots
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.is_member = is_member
        self.state = PollerState.IDLE
        self._running = False
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Start the collector."""
        headers = {"User-Agent": "hamspot/0.1", "Accept": "application/json"}
        self._session = aiohttp.ClientSession(headers=headers, timeout=self.timeout)
        self._running = True
        logger.info("POTA collector started")

    async def stop(self) -> None:
        """Stop the collector."""
        self._running = False
        if self._session:
            await self._session.close()
            self._session = None
        logger.info("POTA collector stopped")

    async def fetch(self) -> List[POTASpot]:
        """Fetch the current spot listing."""
        if not self._session:
            await self.start()

        async with self._session.get(self.url) as response:
            if response.status != 200:
                raise PotaFetchError(f"Failed to get POTA spots: HTTP {response.status}")
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                raise PotaFetchError(f"Failed to decode POTA spots: {e}") from e

        if not isinstance(data, list):
            raise PotaFetchError(f"Unexpected POTA response type: {type(data).__name__}")

        entries = []
        for raw in data:
            try:
                entries.append(POTASpot.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed POTA entry: {e.error_count()} error(s)")
        return entries

    async def collect(self) -> AsyncIterator[Spot]:
        """Yield normalized spots from one fetch, in listing order."""
        entries = await self.fetch()
        if len(entries) > self.max_spots:
            logger.debug(f"Processing first {self.max_spots} of {len(entries)} POTA spots")

        for entry in entries[:self.max_spots]:
            spot = from_pota(entry, self.is_member)
            if spot is not None:
                yield spot

    async def poll_once(self) -> int:
        """Run one cycle, returning the number of spots queued."""
        self.state = PollerState.FETCHING
        queued = 0
        try:
            async for spot in self.collect():
                try:
                    if await self.relay.submit(spot):
                        queued += 1
                except Exception as e:
                    logger.error(f"Error relaying POTA spot {spot.callsign}: {e}")
        except (PotaFetchError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error getting POTA activations, skipping cycle: {e}")
        finally:
            self.state = PollerState.IDLE
        return queued

    async def run(self) -> None:
        """Poll immediately and then every ``poll_interval`` seconds."""
        if not self._session:
            await self.start()

        logger.info(f"Starting POTA collection loop (interval: {self.poll_interval}s)")
        try:
            while self._running:
                try:
                    queued = await self.poll_once()
                    if queued:
                        logger.info(f"Queued {queued} POTA spot(s)")
                except Exception as e:
                    logger.error(f"Error in POTA loop: {e}")
                await asyncio.sleep(self.poll_interval)
        finally:
            await self.stop()
