"""Community member roster."""

import asyncio
from typing import Iterable, Optional, Set

from loguru import logger

from hamspot.notifiers.base import ChatClient

PAGE_SIZE = 1000


class MemberDirectory:
    """Case-insensitive set of member callsigns.

    Combines the configured callsigns with the usernames of the chat
    group, which members set to their callsign.
    """

    def __init__(
        self,
        callsigns: Iterable[str] = (),
        client: Optional[ChatClient] = None,
        group_id: Optional[str] = None,
        refresh_interval: float = 3600,
    ):
        self._static: Set[str] = {c.upper() for c in callsigns}
        self._roster: Set[str] = set()
        self.client = client
        self.group_id = group_id
        self.refresh_interval = refresh_interval
        self._running = False

    def is_member(self, callsign: str) -> bool:
        callsign = callsign.strip().upper()
        return callsign in self._static or callsign in self._roster

    def __len__(self) -> int:
        return len(self._static | self._roster)

    @property
    def enabled(self) -> bool:
        return self.client is not None and bool(self.group_id)

    async def refresh(self) -> bool:
        """Reload the roster from the chat group; keeps the old one on failure."""
        if not self.enabled:
            return False

        roster: Set[str] = set()
        cursor: Optional[str] = None
        try:
            while True:
                members, cursor = await self.client.list_members(self.group_id, cursor, PAGE_SIZE)
                roster.update(m.username.upper() for m in members)
                if not cursor:
                    break
        except Exception as e:
            logger.error(f"Error retrieving group members: {e}")
            return False

        self._roster = roster
        logger.info(f"Loaded {len(roster)} group members")
        return True

    async def run(self) -> None:
        """Refresh now and then every ``refresh_interval`` seconds."""
        if not self.enabled:
            logger.info("No member group configured, roster refresh disabled")
            return

        self._running = True
        while self._running:
            await self.refresh()
            await asyncio.sleep(self.refresh_interval)

    def stop(self) -> None:
        self._running = False
