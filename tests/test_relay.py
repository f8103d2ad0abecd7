"""Test the shared spot relay."""

import pytest

from hamspot.notifiers.template import MEMBER_HEADER, SPOT_HEADER, SpotTemplate
from hamspot.processors.normalize import from_pota
from hamspot.schemas import Spot, SpotSource
from hamspot.services.relay import SpotRelay
from hamspot.utils.cache import MemoryDedupCache
from hamspot.utils.queue import MemoryOutboundQueue


@pytest.fixture
def relay(clock):
    return SpotRelay(
        channel="1234",
        cache=MemoryDedupCache(ttl=4 * 60 * 60, clock=clock),
        queue=MemoryOutboundQueue(),
    )


def make_spot(**overrides):
    data = dict(callsign="K2XYZ", mode="SSB", frequency="7200000", source=SpotSource.HAMALERT)
    data.update(overrides)
    return Spot(**data)


@pytest.mark.asyncio
async def test_submit_queues_and_marks(relay):
    assert await relay.submit(make_spot()) is True

    message = await relay.queue.dequeue()
    assert message.channel == "1234"
    assert "**Callsign:** [K2XYZ](https://www.qrz.com/db/K2XYZ)" in message.text
    assert await relay.cache.seen_recently(("K2XYZ", "ssb", "7200000"))


@pytest.mark.asyncio
async def test_same_spot_twice_within_ttl(relay, clock):
    assert await relay.submit(make_spot()) is True
    # Case differences map onto the same key
    assert await relay.submit(make_spot(callsign="k2xyz", mode="ssb")) is False
    assert await relay.queue.depth() == 1

    clock.advance(4 * 60 * 60 + 1)
    assert await relay.submit(make_spot()) is True
    assert await relay.queue.depth() == 2


@pytest.mark.asyncio
async def test_irrelevant_spot_leaves_no_trace(relay):
    assert await relay.submit(make_spot(mode="FT8")) is False
    assert await relay.queue.depth() == 0
    assert await relay.cache.size() == 0


def test_template_member_header(pota_entry):
    spot = from_pota(pota_entry(), lambda call: call.upper() == "W3LBY")
    text = SpotTemplate.format(spot)
    assert text.startswith(MEMBER_HEADER)
    assert "**Frequency:** 14250000" in text
    assert "**Mode:** SSB" in text
    assert "**Park:** 🏞️ [US-1234](https://pota.app/#/park/US-1234) (Test State Park - US-PA)" in text


def test_template_plain_header():
    text = SpotTemplate.format(make_spot())
    assert text.startswith(SPOT_HEADER)
    assert "**Park:**" not in text
