"""Test processors."""

import pytest
from pydantic import ValidationError

from hamspot.processors import (
    DedupProcessor,
    FilterProcessor,
    ProcessorPipeline,
    from_hamalert,
    from_pota,
    is_relevant,
)
from hamspot.schemas import Spot, SpotSource
from hamspot.utils.cache import MemoryDedupCache


def make_spot(mode="ssb", frequency="14250000", callsign="w3lby"):
    return Spot(callsign=callsign, mode=mode, frequency=frequency, source=SpotSource.HAMALERT)


@pytest.mark.parametrize("mode", ["ssb", "SSB", "phone", "LSB", "usb", "", "(ssb)", "(LSB)", "(usb)", "(phone)"])
def test_voice_modes_are_relevant(mode):
    assert is_relevant(make_spot(mode=mode))
    assert is_relevant(make_spot(mode=mode, frequency="54000000"))


@pytest.mark.parametrize("mode", ["ssb", "", "ft8"])
def test_above_six_metres_is_rejected(mode):
    assert not is_relevant(make_spot(mode=mode, frequency="54000001"))
    assert not is_relevant(make_spot(mode=mode, frequency="144300000"))


@pytest.mark.parametrize("mode", ["ft8", "CW", "rtty", "(cw)", "ssbx"])
def test_other_modes_are_rejected(mode):
    assert not is_relevant(make_spot(mode=mode))


@pytest.mark.parametrize("frequency", ["", "abc", "14.2.5", "NaN"])
def test_non_numeric_frequency_is_rejected(frequency):
    assert not is_relevant(make_spot(frequency=frequency))


def test_spot_normalization():
    spot = make_spot(mode=" SSB ", frequency=" 14250000 ", callsign=" w3lby ")
    assert spot.callsign == "W3LBY"
    assert spot.frequency_hz == 14_250_000
    assert spot.dedup_key == ("W3LBY", "ssb", "14250000")


def test_spot_is_immutable():
    spot = make_spot()
    with pytest.raises(ValidationError):
        spot.callsign = "K1ABC"


def test_from_pota(pota_entry):
    spot = from_pota(pota_entry(), lambda call: call == "W3LBY")
    assert spot.source == SpotSource.POTA
    assert spot.callsign == "W3LBY"
    assert spot.mode == "SSB"
    assert spot.member is True
    assert spot.park == "US-1234"
    assert spot.region == "Test State Park"
    assert spot.description == "US-PA"


def test_from_pota_missing_mode(pota_entry):
    spot = from_pota(pota_entry(mode=None))
    assert spot.mode == ""
    assert spot.member is False
    assert is_relevant(spot)


@pytest.mark.parametrize("comment", ["QRT at 1500Z", "going qrt, thanks all", "Qrt"])
def test_from_pota_suppresses_qrt(pota_entry, comment):
    assert from_pota(pota_entry(comments=comment)) is None


def test_from_hamalert(hamalert_payload):
    spot = from_hamalert(hamalert_payload())
    assert spot.source == SpotSource.HAMALERT
    assert spot.callsign == "K2XYZ"
    assert spot.frequency == "7200000"
    assert spot.park is None


@pytest.mark.parametrize("source", ["POTA", "pota"])
def test_from_hamalert_suppresses_pota(hamalert_payload, source):
    assert from_hamalert(hamalert_payload(source=source)) is None


@pytest.mark.asyncio
async def test_filter_processor():
    processor = FilterProcessor(max_frequency=30_000_000, modes=["ssb"])
    assert await processor.process(make_spot(frequency="21300000")) is not None
    assert await processor.process(make_spot(frequency="50125000")) is None
    assert await processor.process(make_spot(mode="(ssb)")) is not None
    assert await processor.process(make_spot(mode="usb")) is None


@pytest.mark.asyncio
async def test_dedup_processor(clock):
    cache = MemoryDedupCache(ttl=60, clock=clock)
    processor = DedupProcessor(cache)
    spot = make_spot()

    # Lookup alone does not mark
    assert await processor.process(spot) is spot
    assert await processor.process(spot) is spot

    await cache.mark_seen(spot.dedup_key)
    assert await processor.process(make_spot(mode="SSB", callsign="W3LBY")) is None


@pytest.mark.asyncio
async def test_pipeline_stops_at_first_drop(clock):
    cache = MemoryDedupCache(ttl=60, clock=clock)
    pipeline = ProcessorPipeline([FilterProcessor(), DedupProcessor(cache)])

    assert await pipeline.run(make_spot(mode="ft8")) is None
    assert await pipeline.run(make_spot()) is not None
