"""
Data models for FleetView assets and advertisements.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional, Union

from .constants import (
    DEFAULT_LABEL,
    MATCH_MANUFACTURER,
    MATCH_SERVICE,
    SIGNAL_HISTORY_CAPACITY,
)


class MatchKind(str, Enum):
    """How a profile recognizes a device."""
    SERVICE = MATCH_SERVICE
    MANUFACTURER = MATCH_MANUFACTURER

    def __str__(self) -> str:
        return self.value


class FreshnessBand(str, Enum):
    """Recency of the last observation."""
    FRESH = 'fresh'
    STALE = 'stale'
    LOST = 'lost'

    def __str__(self) -> str:
        return self.value


class SignalBand(str, Enum):
    """Signal quality derived from RSSI."""
    STRONG = 'strong'
    MEDIUM = 'medium'
    WEAK = 'weak'

    def __str__(self) -> str:
        return self.value


class ConditionKind(str, Enum):
    """Non-fatal conditions reported to the presentation layer."""
    CONFIGURATION_ERROR = 'configuration_error'
    CAPABILITY_UNAVAILABLE = 'capability_unavailable'
    USER_DECLINED = 'user_declined'
    SCAN_FAILED = 'scan_failed'
    STOP_FAILED = 'stop_failed'
    SWEEP_FAILED = 'sweep_failed'
    MATCH_EXTRACTION_WARNING = 'match_extraction_warning'
    INVALID_LABEL = 'invalid_label'
    PERSISTENCE_WARNING = 'persistence_warning'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DeviceProfile:
    """
    A configured rule for recognizing a class of devices.

    match_kind is kept as a plain string so that unrecognized kinds can be
    carried through configuration and skipped with a warning at match time.
    """
    name: str
    match_kind: str
    match_key: Union[str, int, None] = None

    @property
    def is_recognized(self) -> bool:
        return self.match_kind in (MatchKind.SERVICE.value, MatchKind.MANUFACTURER.value)


@dataclass(frozen=True)
class RawAdvertisement:
    """A single advertisement packet as delivered by the scan source."""
    identity: str
    signal_strength: int
    service_data: Mapping[str, bytes] = field(default_factory=dict)
    manufacturer_data: Mapping[int, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class MatchResult:
    """Payload extracted for the first matching profile."""
    payload_hex: str
    profile: DeviceProfile


@dataclass(frozen=True)
class ScanFilter:
    """One filter entry handed to the scan source."""
    profile_name: str
    service_uuid: Optional[str] = None
    company_id: Optional[int] = None


@dataclass
class Asset:
    """
    Registry record for one recognized physical device.

    matched_profile_name is assigned once at creation and never reassigned.
    """
    identity: str
    last_signal_strength: int
    last_seen_at: datetime
    last_payload_hex: str
    matched_profile_name: str
    label: str = DEFAULT_LABEL
    seen_count: int = 1
    signal_history: deque = field(
        default_factory=lambda: deque(maxlen=SIGNAL_HISTORY_CAPACITY)
    )

    def __post_init__(self) -> None:
        if not self.signal_history:
            self.signal_history.append(self.last_signal_strength)


@dataclass(frozen=True)
class AssetSnapshot:
    """Immutable view of an asset handed to the presentation layer."""
    identity: str
    label: str
    signal_strength: int
    freshness: FreshnessBand
    signal_band: SignalBand
    last_seen_at: datetime
    payload: str
    payload_preview: str
    signal_history: tuple
    matched_profile_name: str
    seen_count: int
    signal_percent: float
    last_seen_text: str


@dataclass(frozen=True)
class Condition:
    """A reported, non-fatal failure."""
    kind: ConditionKind
    message: str
    identity: Optional[str] = None
