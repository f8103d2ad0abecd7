"""Test the Discord client without the network."""

import pytest

from hamspot.notifiers.discord import DiscordClient


def fake_request(responses, calls):
    async def request(method, path, **kwargs):
        calls.append((method, path, kwargs))
        return responses.pop(0)
    return request


@pytest.mark.asyncio
async def test_send_message():
    calls = []
    client = DiscordClient("token")
    client._request = fake_request([{"id": 987}], calls)

    assert await client.send_message("1234", "hello") == "987"
    assert calls == [("POST", "/channels/1234/messages", {"json": {"content": "hello"}})]


@pytest.mark.asyncio
async def test_list_members_cursor():
    calls = []
    full_page = [{"user": {"id": str(i), "username": f"user{i}"}} for i in range(2)]
    client = DiscordClient("token")
    client._request = fake_request([full_page, full_page[:1]], calls)

    members, cursor = await client.list_members("guild", limit=2)
    assert [m.username for m in members] == ["user0", "user1"]
    assert cursor == "1"

    members, cursor = await client.list_members("guild", after=cursor, limit=2)
    assert cursor is None
    assert calls[1][2]["params"] == {"limit": "2", "after": "1"}
