"""
Configuration loader for FleetView.

Defaults come from ``fleetview.constants``. A JSON file (passed explicitly or
named by the FLEETVIEW_CONFIG environment variable) can override them. The
file shape is described by pydantic models; ``FleetConfig`` is the flattened,
validated result handed to the rest of the package.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional, Union

from bleak.uuids import normalize_uuid_str
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .constants import (
    ACTIVE_WINDOW_MS,
    APP_TITLE,
    CONFIG_ENV_VAR,
    DEFAULT_DB_PATH,
    DEFAULT_PROFILES,
    INACTIVE_WINDOW_MS,
    MATCH_MANUFACTURER,
    MATCH_SERVICE,
    RSSI_STRONG,
    RSSI_WEAK,
    SCAN_ACCEPT_ALL_ADVERTISEMENTS,
    SCAN_KEEP_REPEATED_DEVICES,
    TICKER_INTERVAL_MS,
)
from .exceptions import ConfigurationError
from .models import DeviceProfile


def normalize_service_uuid(uuid: str) -> str:
    """
    Normalize a service UUID to the 128-bit lowercase form.

    Accepts 16/32-bit short forms with or without a ``0x`` prefix. Raises
    ValueError for strings that are not UUIDs.
    """
    uuid = uuid.strip()
    if uuid.lower().startswith('0x'):
        uuid = uuid[2:]
    return normalize_uuid_str(uuid)


def parse_company_id(value: Any) -> int:
    """Parse a company identifier given as int or as a hex/decimal string."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid company_id: {value!r}")
    if isinstance(value, int):
        company_id = value
    elif isinstance(value, str):
        try:
            company_id = int(value, 0)
        except ValueError:
            raise ConfigurationError(f"Invalid company_id: {value!r}") from None
    else:
        raise ConfigurationError(f"Invalid company_id: {value!r}")

    if not 0 <= company_id <= 0xFFFF:
        raise ConfigurationError(f"company_id out of range: {value!r}")
    return company_id


# =============================================================================
# VALIDATED CONFIGURATION
# =============================================================================

class ScanOptions(BaseModel):
    """Options passed through to the scan source."""
    model_config = ConfigDict(frozen=True)

    keep_repeated_devices: bool = SCAN_KEEP_REPEATED_DEVICES
    accept_all_advertisements: bool = SCAN_ACCEPT_ALL_ADVERTISEMENTS


class FleetConfig(BaseModel):
    """Static configuration for one FleetView process."""
    model_config = ConfigDict(frozen=True)

    profiles: tuple = ()
    app_title: str = APP_TITLE
    sweep_period_ms: int = TICKER_INTERVAL_MS
    active_window_ms: int = ACTIVE_WINDOW_MS
    inactive_window_ms: int = INACTIVE_WINDOW_MS
    strong_threshold: int = RSSI_STRONG
    weak_threshold: int = RSSI_WEAK
    scan_options: ScanOptions = Field(default_factory=ScanOptions)
    db_path: str = DEFAULT_DB_PATH

    @model_validator(mode='after')
    def _check_ranges(self) -> 'FleetConfig':
        if self.sweep_period_ms <= 0:
            raise ConfigurationError(
                f"sweep_period_ms must be positive, got {self.sweep_period_ms}"
            )
        if not 0 <= self.active_window_ms < self.inactive_window_ms:
            raise ConfigurationError(
                f"active_window_ms ({self.active_window_ms}) must be below "
                f"inactive_window_ms ({self.inactive_window_ms})"
            )
        if self.strong_threshold <= self.weak_threshold:
            raise ConfigurationError(
                f"strong_threshold ({self.strong_threshold}) must be above "
                f"weak_threshold ({self.weak_threshold})"
            )
        return self

    @property
    def sweep_period_seconds(self) -> float:
        return self.sweep_period_ms / 1000


# =============================================================================
# CONFIG FILE SHAPE
# =============================================================================

class ProfileEntry(BaseModel):
    """
    One entry of the ``profiles`` list.

    ``{"name": ..., "type": "service", "uuid": "0xfcf1"}`` or
    ``{"name": ..., "type": "manufacturer", "company_id": "0xA212"}``. Entries
    of an unknown type are kept; they are skipped with a warning when scanning.
    """
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    uuid: Optional[str] = None
    company_id: Union[int, str, None] = None

    @model_validator(mode='after')
    def _normalize_key(self) -> 'ProfileEntry':
        if self.type == MATCH_SERVICE:
            uuid = (self.uuid or '').strip()
            self.uuid = normalize_service_uuid(uuid) if uuid else None
        elif self.type == MATCH_MANUFACTURER and self.company_id is not None:
            self.company_id = parse_company_id(self.company_id)
        return self

    def to_profile(self) -> DeviceProfile:
        if self.type == MATCH_SERVICE:
            key = self.uuid
        elif self.type == MATCH_MANUFACTURER:
            key = self.company_id
        else:
            key = self.uuid if self.uuid is not None else self.company_id
        return DeviceProfile(name=self.name, match_kind=self.type, match_key=key)


class FreshnessSection(BaseModel):
    active_window_ms: int = ACTIVE_WINDOW_MS
    inactive_window_ms: int = INACTIVE_WINDOW_MS


class SignalSection(BaseModel):
    strong_threshold: int = RSSI_STRONG
    weak_threshold: int = RSSI_WEAK


def _default_profile_entries() -> list:
    return [ProfileEntry.model_validate(entry) for entry in DEFAULT_PROFILES]


class ConfigFile(BaseModel):
    """Shape of a FleetView JSON config document."""
    app_title: str = APP_TITLE
    ticker_interval_ms: int = TICKER_INTERVAL_MS
    profiles: list[ProfileEntry] = Field(default_factory=_default_profile_entries)
    freshness: FreshnessSection = Field(default_factory=FreshnessSection)
    signal: SignalSection = Field(default_factory=SignalSection)
    scan_options: ScanOptions = Field(default_factory=ScanOptions)
    db_path: str = DEFAULT_DB_PATH

    def to_config(self) -> FleetConfig:
        return FleetConfig(
            profiles=tuple(entry.to_profile() for entry in self.profiles),
            app_title=self.app_title,
            sweep_period_ms=self.ticker_interval_ms,
            active_window_ms=self.freshness.active_window_ms,
            inactive_window_ms=self.freshness.inactive_window_ms,
            strong_threshold=self.signal.strong_threshold,
            weak_threshold=self.signal.weak_threshold,
            scan_options=self.scan_options,
            db_path=self.db_path,
        )


# =============================================================================
# LOADERS
# =============================================================================

def profile_from_dict(entry: dict) -> DeviceProfile:
    """Build a DeviceProfile from a single config entry."""
    try:
        return ProfileEntry.model_validate(entry).to_profile()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid profile entry {entry!r}: {e}") from e


def config_from_dict(data: dict) -> FleetConfig:
    """Build a FleetConfig from a parsed JSON document."""
    try:
        return ConfigFile.model_validate(data).to_config()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config: {e}") from e


def default_config() -> FleetConfig:
    """Configuration built from the packaged defaults."""
    return config_from_dict({})


def load_config(path: Optional[str] = None) -> FleetConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Config file path. Falls back to $FLEETVIEW_CONFIG, then defaults.

    Returns:
        The validated FleetConfig.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return default_config()

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    return config_from_dict(data)
