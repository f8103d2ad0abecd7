"""Core data models."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SpotSource(str, Enum):
    """Where a spot came from."""
    POTA = "pota"          # polled
    HAMALERT = "hamalert"  # pushed


DedupKey = Tuple[str, str, str]


class Spot(BaseModel):
    """Canonical spot record, built once per raw source event."""
    model_config = ConfigDict(frozen=True)

    callsign: str = Field(..., description="Uppercase callsign of the heard station")
    mode: str = Field("", description="Mode as reported upstream")
    frequency: str = Field(..., description="Frequency string, integer Hz for range checks")
    source: SpotSource
    member: bool = Field(False, description="Callsign belongs to a community member")

    # Park activation metadata
    park: Optional[str] = None
    region: Optional[str] = None
    description: Optional[str] = None

    @field_validator("callsign")
    @classmethod
    def _upper_callsign(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("mode", "frequency", mode="before")
    @classmethod
    def _strip(cls, v) -> str:
        return "" if v is None else str(v).strip()

    @property
    def is_pota(self) -> bool:
        return self.source == SpotSource.POTA

    @property
    def normalized_mode(self) -> str:
        return self.mode.lower()

    @property
    def frequency_hz(self) -> Optional[int]:
        """Frequency as an integer count of Hz, or None when it is not numeric."""
        try:
            value = Decimal(self.frequency)
        except InvalidOperation:
            return None
        if not value.is_finite():
            return None
        return int(value)

    @property
    def dedup_key(self) -> DedupKey:
        return (self.callsign, self.normalized_mode, self.frequency)


class OutboundMessage(BaseModel):
    """A rendered message waiting for delivery to the chat channel."""
    model_config = ConfigDict(frozen=True)

    channel: str
    text: str


class POTASpot(BaseModel):
    """One entry of the POTA ``/spot/`` listing."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    spot_id: Optional[int] = Field(None, alias="spotId")
    spot_time: Optional[str] = Field(None, alias="spotTime")
    activator: str
    frequency: str
    mode: Optional[str] = None
    reference: str = ""
    spotter: Optional[str] = None
    source: Optional[str] = None
    comments: Optional[str] = None
    name: Optional[str] = None
    location_desc: Optional[str] = Field(None, alias="locationDesc")

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency_str(cls, v) -> str:
        return str(v)


class HamAlertPayload(BaseModel):
    """Body of a HamAlert webhook POST."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    full_callsign: str = Field("", alias="fullCallsign")
    callsign: str
    frequency: str
    band: str = ""
    mode: str = ""
    mode_detail: str = Field("", alias="modeDetail")
    time: str = ""
    spotter: str = ""
    raw_text: str = Field("", alias="rawText")
    title: str = ""
    comment: str = ""
    source: str = ""
    wwff_ref: str = Field("", alias="wwffRef")
    wwff_division: str = Field("", alias="wwffDivision")
    wwff_name: str = Field("", alias="wwffName")
    trigger_comment: str = Field("", alias="triggerComment")

    @field_validator(
        "full_callsign", "band", "mode", "mode_detail", "time", "spotter", "raw_text", "title",
        "comment", "source", "wwff_ref", "wwff_division", "wwff_name", "trigger_comment",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency_str(cls, v) -> str:
        return str(v)


class DeadLetter(BaseModel):
    """A message that exhausted its send attempts."""
    message: OutboundMessage
    error: str
    attempts: int
    failed_at: datetime = Field(default_factory=datetime.utcnow)
