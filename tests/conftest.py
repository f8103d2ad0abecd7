"""Shared test fakes."""

import fnmatch
import time
from typing import Dict, List, Optional, Tuple

import pytest

from hamspot.notifiers.base import ChatClient, ChatSendError, Member
from hamspot.schemas import HamAlertPayload, POTASpot


class FakeChatClient(ChatClient):
    """Records sends; fails the first ``fail_times`` of them."""

    def __init__(self, fail_times: int = 0, retry_after: Optional[float] = None):
        self.sent: List[Tuple[str, str]] = []
        self.attempts = 0
        self.fail_times = fail_times
        self.retry_after = retry_after
        self.connected = False
        self.closed = False
        self.pages: List[List[Member]] = []
        self.member_calls: List[Optional[str]] = []

    async def connect(self) -> None:
        self.connected = True

    async def send_message(self, channel_id: str, text: str) -> str:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise ChatSendError("boom", retry_after=self.retry_after)
        self.sent.append((channel_id, text))
        return str(len(self.sent))

    async def list_members(self, group_id, after=None, limit=1000):
        self.member_calls.append(after)
        index = len(self.member_calls) - 1
        members = self.pages[index] if index < len(self.pages) else []
        next_cursor = members[-1].id if index + 1 < len(self.pages) else None
        return members, next_cursor

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """The handful of redis.asyncio calls the Redis-backed stores use."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._values: Dict[str, Tuple[object, Optional[float]]] = {}
        self._lists: Dict[str, List[bytes]] = {}
        self.closed = False

    def _alive(self, key: str) -> bool:
        item = self._values.get(key)
        if item is None:
            return False
        _, expires_at = item
        if expires_at is not None and expires_at <= self._clock():
            del self._values[key]
            return False
        return True

    async def exists(self, key: str) -> int:
        return int(self._alive(key))

    async def set(self, key: str, value, px: Optional[int] = None):
        expires_at = self._clock() + px / 1000 if px else None
        self._values[key] = (value, expires_at)
        return True

    async def scan_iter(self, match: str = "*"):
        for key in list(self._values):
            if self._alive(key) and fnmatch.fnmatch(key, match):
                yield key

    async def rpush(self, key: str, value) -> int:
        if isinstance(value, str):
            value = value.encode()
        self._lists.setdefault(key, []).append(value)
        return len(self._lists[key])

    async def lpop(self, key: str):
        items = self._lists.get(key)
        if not items:
            return None
        return items.pop(0)

    async def llen(self, key: str) -> int:
        return len(self._lists.get(key, []))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def chat_client():
    return FakeChatClient()


@pytest.fixture
def pota_entry():
    def make(**overrides) -> POTASpot:
        data = {
            "spotId": 1,
            "spotTime": "2024-10-26T15:00:00",
            "activator": "W3LBY",
            "frequency": "14250000",
            "mode": "SSB",
            "reference": "US-1234",
            "spotter": "K1ABC",
            "comments": None,
            "name": "Test State Park",
            "locationDesc": "US-PA",
        }
        data.update(overrides)
        return POTASpot.model_validate(data)
    return make


@pytest.fixture
def hamalert_payload():
    def make(**overrides) -> HamAlertPayload:
        data = {
            "fullCallsign": "K2XYZ",
            "callsign": "K2XYZ",
            "frequency": "7200000",
            "band": "40m",
            "mode": "ssb",
            "source": "RBN",
            "comment": "cq cq",
        }
        data.update(overrides)
        return HamAlertPayload.model_validate(data)
    return make


@pytest.fixture
def env(monkeypatch):
    """Minimal valid environment."""
    monkeypatch.setenv("HAM_DISCORD_SPOTTING_BOT_TOKEN", "token")
    monkeypatch.setenv("HAM_DISCORD_SPOTTING_BOT_CHANNEL", "1234")
    monkeypatch.delenv("HAM_DISCORD_SPOTTING_BOT_REDIS_ADDR", raising=False)
    monkeypatch.delenv("HAM_DISCORD_SPOTTING_BOT_GUILD", raising=False)
    return monkeypatch
