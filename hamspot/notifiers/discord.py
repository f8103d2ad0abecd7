"""Discord REST client."""

from typing import Any, List, Optional, Tuple

import aiohttp
from loguru import logger

from .base import ChatClient, ChatSendError, Member


class DiscordClient(ChatClient):
    """Minimal Discord bot client over the REST API."""

    def __init__(self, token: str, api_base: str = "https://discord.com/api/v10", timeout: float = 30):
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bot {self.token}",
                    "User-Agent": "hamspot (https://github.com/hamspot, 0.1.0)",
                },
                timeout=self.timeout,
            )
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        session = await self._get_session()
        try:
            async with session.request(method, f"{self.api_base}{path}", **kwargs) as response:
                if response.status == 429:
                    body = await response.json(content_type=None)
                    retry_after = float((body or {}).get("retry_after", 1))
                    raise ChatSendError(f"Rate limited on {path}", retry_after=retry_after)
                if response.status >= 400:
                    error = await response.text()
                    raise ChatSendError(f"Discord {method} {path} failed: HTTP {response.status} - {error}")
                return await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ChatSendError(f"Discord {method} {path} failed: {e}") from e

    async def connect(self) -> None:
        me = await self._request("GET", "/users/@me")
        logger.info(f"Connected to discord as {me.get('username')}")

    async def send_message(self, channel_id: str, text: str) -> str:
        data = await self._request("POST", f"/channels/{channel_id}/messages", json={"content": text})
        return str(data["id"])

    async def list_members(
        self, group_id: str, after: Optional[str] = None, limit: int = 1000
    ) -> Tuple[List[Member], Optional[str]]:
        params = {"limit": str(limit)}
        if after:
            params["after"] = after
        data = await self._request("GET", f"/guilds/{group_id}/members", params=params)

        members = [
            Member(id=str(m["user"]["id"]), username=m["user"]["username"])
            for m in data
            if m.get("user")
        ]
        # A short page is the last one
        next_cursor = members[-1].id if len(data) >= limit and members else None
        return members, next_cursor
