"""Spot message template."""

from hamspot.schemas import Spot

SPOT_EMOJI = "<:hamspot:1299208521316962376>"
MEMBER_HEADER = f"# {SPOT_EMOJI}__**MEMBER SPOTTED**__{SPOT_EMOJI}"
SPOT_HEADER = f"## {SPOT_EMOJI} New Spot"


class SpotTemplate:
    """Format spots as Discord markdown."""

    @staticmethod
    def header(spot: Spot) -> str:
        return MEMBER_HEADER if spot.member else SPOT_HEADER

    @staticmethod
    def format(spot: Spot) -> str:
        lines = [
            SpotTemplate.header(spot),
            f"**Callsign:** [{spot.callsign}](https://www.qrz.com/db/{spot.callsign})",
            f"**Frequency:** {spot.frequency}",
            f"**Mode:** {spot.mode}",
        ]
        if spot.is_pota:
            lines.append(
                f"**Park:** 🏞️ [{spot.park}](https://pota.app/#/park/{spot.park}) "
                f"({spot.region or ''} - {spot.description or ''})"
            )
        return "\n".join(lines) + "\n"
