"""Map source payloads onto the canonical Spot record."""

from typing import Callable, Optional

from loguru import logger

from hamspot.schemas import HamAlertPayload, POTASpot, Spot, SpotSource

MemberCheck = Callable[[str], bool]


def no_members(callsign: str) -> bool:
    return False


def is_qrt(comment: Optional[str]) -> bool:
    """True when a free-text comment says the operator is going QRT."""
    return bool(comment) and "qrt" in comment.lower()


def from_pota(entry: POTASpot, is_member: MemberCheck = no_members) -> Optional[Spot]:
    """Build a Spot from a POTA listing entry; None for QRT withdrawals."""
    if is_qrt(entry.comments):
        logger.debug(f"{entry.activator} is QRT at {entry.reference}, ignoring")
        return None

    return Spot(
        callsign=entry.activator,
        mode=entry.mode or "",
        frequency=entry.frequency,
        source=SpotSource.POTA,
        member=is_member(entry.activator),
        park=entry.reference,
        region=entry.name,
        description=entry.location_desc,
    )


def from_hamalert(payload: HamAlertPayload, is_member: MemberCheck = no_members) -> Optional[Spot]:
    """Build a Spot from a HamAlert webhook; None for POTA-sourced alerts.

    POTA activations arrive through the poller, so accepting them here
    would notify twice.
    """
    if payload.source.strip().upper() == "POTA":
        logger.info("Got a POTA spot. Ignoring as we shouldn't get this from ham alert")
        return None

    return Spot(
        callsign=payload.callsign,
        mode=payload.mode,
        frequency=payload.frequency,
        source=SpotSource.HAMALERT,
        member=is_member(payload.callsign),
    )
