"""
Freshness and signal-quality classification for assets.

Provides the time-based fresh/stale/lost bands, RSSI-based signal bands,
and the display values derived from them. Nothing here is cached on the
asset; every call recomputes from the raw inputs.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from .constants import (
    ACTIVE_WINDOW_MS,
    INACTIVE_WINDOW_MS,
    RSSI_METER_CEILING,
    RSSI_METER_FLOOR,
    RSSI_STRONG,
    RSSI_WEAK,
)
from .models import Asset, FreshnessBand, SignalBand

_ONE_MS = timedelta(milliseconds=1)


def elapsed_ms(last_seen_at: datetime, now: datetime) -> int:
    """Whole milliseconds between last observation and now."""
    return (now - last_seen_at) // _ONE_MS


def classify_freshness(
    last_seen_at: datetime,
    now: datetime,
    active_window_ms: int = ACTIVE_WINDOW_MS,
    inactive_window_ms: int = INACTIVE_WINDOW_MS,
) -> FreshnessBand:
    """
    Classify how recently an asset was seen.

    Args:
        last_seen_at: Timestamp of the last observation.
        now: Current time.
        active_window_ms: Below this elapsed time the asset is fresh.
        inactive_window_ms: At or above this elapsed time the asset is lost.

    Returns:
        The FreshnessBand for the elapsed time.
    """
    elapsed = elapsed_ms(last_seen_at, now)
    if elapsed < active_window_ms:
        return FreshnessBand.FRESH
    if elapsed < inactive_window_ms:
        return FreshnessBand.STALE
    return FreshnessBand.LOST


def classify_signal(
    signal_strength: int,
    strong_threshold: int = RSSI_STRONG,
    weak_threshold: int = RSSI_WEAK,
) -> SignalBand:
    """Classify RSSI into strong (> strong), weak (< weak) or medium."""
    if signal_strength > strong_threshold:
        return SignalBand.STRONG
    if signal_strength < weak_threshold:
        return SignalBand.WEAK
    return SignalBand.MEDIUM


def signal_percent(signal_strength: int) -> float:
    """Map RSSI onto a 0-100 meter (-100 dBm -> 0, -30 dBm -> 100)."""
    span = RSSI_METER_CEILING - RSSI_METER_FLOOR
    percent = (signal_strength - RSSI_METER_FLOOR) / span * 100
    return max(0.0, min(100.0, percent))


def last_seen_text(
    last_seen_at: datetime,
    now: datetime,
    active_window_ms: int = ACTIVE_WINDOW_MS,
    inactive_window_ms: int = INACTIVE_WINDOW_MS,
) -> str:
    """Human-readable recency, e.g. 'just now', '12s ago', 'lost (>30s)'."""
    band = classify_freshness(last_seen_at, now, active_window_ms, inactive_window_ms)
    if band == FreshnessBand.LOST:
        return f"lost (>{inactive_window_ms // 1000}s)"

    seconds = round(elapsed_ms(last_seen_at, now) / 1000)
    if band == FreshnessBand.FRESH and seconds == 0:
        return 'just now'
    return f"{seconds}s ago"


class FreshnessClassifier:
    """Classifier bound to a configured set of thresholds."""

    def __init__(
        self,
        active_window_ms: int = ACTIVE_WINDOW_MS,
        inactive_window_ms: int = INACTIVE_WINDOW_MS,
        strong_threshold: int = RSSI_STRONG,
        weak_threshold: int = RSSI_WEAK,
    ):
        self.active_window_ms = active_window_ms
        self.inactive_window_ms = inactive_window_ms
        self.strong_threshold = strong_threshold
        self.weak_threshold = weak_threshold

    @classmethod
    def from_config(cls, config) -> 'FreshnessClassifier':
        return cls(
            active_window_ms=config.active_window_ms,
            inactive_window_ms=config.inactive_window_ms,
            strong_threshold=config.strong_threshold,
            weak_threshold=config.weak_threshold,
        )

    def freshness(self, asset: Asset, now: Optional[datetime] = None) -> FreshnessBand:
        return classify_freshness(
            asset.last_seen_at,
            now or datetime.now(),
            self.active_window_ms,
            self.inactive_window_ms,
        )

    def signal(self, asset: Asset) -> SignalBand:
        return classify_signal(
            asset.last_signal_strength,
            self.strong_threshold,
            self.weak_threshold,
        )

    def last_seen_text(self, asset: Asset, now: Optional[datetime] = None) -> str:
        return last_seen_text(
            asset.last_seen_at,
            now or datetime.now(),
            self.active_window_ms,
            self.inactive_window_ms,
        )
