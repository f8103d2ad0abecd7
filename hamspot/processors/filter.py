"""Relevance filter."""

from typing import Iterable, Optional

from loguru import logger

from hamspot.schemas import Spot
from .base import BaseProcessor

# HF and lower VHF only
MAX_FREQUENCY_HZ = 54_000_000

VOICE_MODES = ("ssb", "phone", "lsb", "usb", "")


def accepted_modes(modes: Iterable[str] = VOICE_MODES) -> frozenset:
    """Expand a mode list with the parenthesized forms some spotters send, e.g. ``(ssb)``."""
    accepted = set()
    for mode in modes:
        mode = mode.strip().lower()
        accepted.add(mode)
        if mode:
            accepted.add(f"({mode})")
    return frozenset(accepted)


DEFAULT_MODES = accepted_modes()


def is_relevant(
    spot: Spot,
    max_frequency: int = MAX_FREQUENCY_HZ,
    modes: frozenset = DEFAULT_MODES,
) -> bool:
    """True when the spot is a voice-mode spot at or below ``max_frequency`` Hz."""
    freq = spot.frequency_hz
    if freq is None or freq > max_frequency:
        return False
    return spot.normalized_mode in modes


class FilterProcessor(BaseProcessor):
    """Drops spots outside the band and mode policy."""

    def __init__(self, max_frequency: int = MAX_FREQUENCY_HZ, modes: Optional[Iterable[str]] = None):
        self.max_frequency = max_frequency
        self.modes = accepted_modes(VOICE_MODES if modes is None else modes)

    async def process(self, spot: Spot) -> Optional[Spot]:
        if is_relevant(spot, self.max_frequency, self.modes):
            logger.info(f"Mode {spot.mode} for Callsign {spot.callsign} on {spot.frequency} is interesting")
            return spot

        if spot.frequency_hz is None:
            logger.info(f"Frequency {spot.frequency!r} for Callsign {spot.callsign} is not numeric, ignoring")
        elif spot.frequency_hz > self.max_frequency:
            logger.info(f"Frequency is too high: {spot.frequency}")
        else:
            logger.info(f"Mode ({spot.mode}) for Callsign ({spot.callsign}) on {spot.frequency} was not interesting, ignoring")
        return None
