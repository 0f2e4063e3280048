"""
Profile matching for raw advertisements.

Walks the configured profiles in declared order and returns the payload of
the first one whose service UUID or company identifier is present in the
advertisement.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional

from .config import normalize_service_uuid
from .constants import EMPTY_PAYLOAD, HEX_PREFIX
from .events import EventSink
from .models import (
    Condition,
    ConditionKind,
    DeviceProfile,
    MatchKind,
    MatchResult,
    RawAdvertisement,
    ScanFilter,
)


def to_hex_string(data) -> str:
    """
    Render a byte sequence as ``0x04 37 4E``.

    Empty or missing data renders as the EMPTY_PAYLOAD sentinel. Raises
    TypeError when the data is not bytes, bytearray or memoryview.
    """
    if data is None:
        return EMPTY_PAYLOAD
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected a byte sequence, got {type(data).__name__}")
    raw = bytes(data)
    if not raw:
        return EMPTY_PAYLOAD
    return HEX_PREFIX + ' '.join(f'{b:02X}' for b in raw)


def _find_service_data(service_data: Mapping[str, bytes], uuid: str):
    """Look up service data by UUID, tolerating short or upper-case keys."""
    if uuid in service_data:
        return True, service_data[uuid]
    for key, value in service_data.items():
        try:
            normalized = normalize_service_uuid(key)
        except ValueError:
            # Not a UUID; cannot be the configured service
            continue
        if normalized == uuid:
            return True, value
    return False, None


class ProfileMatcher:
    """
    Classifies advertisements against an ordered list of device profiles.

    Match failures are never fatal: unrecognized profile kinds and malformed
    payloads are reported as warnings and the next profile is tried.
    """

    def __init__(
        self,
        profiles: Iterable[DeviceProfile],
        sink: Optional[EventSink] = None,
        on_condition: Optional[Callable[[Condition], None]] = None,
    ):
        self.profiles = tuple(profiles)
        self._sink = sink or EventSink()
        self._on_condition = on_condition
        self._warned_profiles: set[str] = set()

    def match(self, advertisement: RawAdvertisement) -> Optional[MatchResult]:
        """
        Find the first profile matching an advertisement.

        Returns:
            MatchResult with the rendered payload, or None when nothing matches.
        """
        for profile in self.profiles:
            if not profile.is_recognized:
                self._warn_unrecognized(profile)
                continue

            try:
                if profile.match_kind == MatchKind.SERVICE.value:
                    found, data = _find_service_data(
                        advertisement.service_data, profile.match_key
                    )
                else:
                    found = profile.match_key in advertisement.manufacturer_data
                    data = advertisement.manufacturer_data.get(profile.match_key)

                if not found:
                    continue

                return MatchResult(payload_hex=to_hex_string(data), profile=profile)

            except (TypeError, ValueError, AttributeError) as e:
                message = f"Payload extraction failed for {profile.name}: {e}"
                self._sink.warning(
                    'match_extraction_failed',
                    profile=profile.name,
                    identity=advertisement.identity,
                    error=str(e),
                )
                if self._on_condition:
                    self._on_condition(Condition(
                        kind=ConditionKind.MATCH_EXTRACTION_WARNING,
                        message=message,
                        identity=advertisement.identity,
                    ))

        return None

    def build_filters(self) -> list[ScanFilter]:
        """Build one scan filter per usable profile."""
        filters = []
        for profile in self.profiles:
            if not profile.is_recognized:
                self._warn_unrecognized(profile)
                continue
            if profile.match_key is None:
                self._sink.warning('profile_missing_key', profile=profile.name)
                continue

            if profile.match_kind == MatchKind.SERVICE.value:
                filters.append(ScanFilter(profile.name, service_uuid=profile.match_key))
            else:
                filters.append(ScanFilter(profile.name, company_id=profile.match_key))
        return filters

    def _warn_unrecognized(self, profile: DeviceProfile) -> None:
        # Once per profile; match() runs for every advertisement
        if profile.name in self._warned_profiles:
            return
        self._warned_profiles.add(profile.name)
        self._sink.warning(
            'profile_kind_unrecognized',
            profile=profile.name,
            kind=profile.match_kind,
        )
