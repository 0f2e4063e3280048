"""
Asset registry.

Authoritative in-memory map of recognized devices keyed by identity. Handles
create/update semantics for matched observations and label edits.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional

from .classifier import FreshnessClassifier, signal_percent
from .constants import DEFAULT_LABEL, PAYLOAD_PREVIEW_LENGTH
from .events import EventSink
from .exceptions import AssetNotFound, InvalidLabel
from .label_store import LabelStore
from .models import (
    Asset,
    AssetSnapshot,
    Condition,
    ConditionKind,
    DeviceProfile,
)
from .presenter import Presenter


class AssetRegistry:
    """
    Registry of assets keyed by device identity.

    Entries are created on the first matched observation and live until the
    registry is torn down. Only their displayed status decays.
    """

    def __init__(
        self,
        label_store: Optional[LabelStore] = None,
        presenter: Optional[Presenter] = None,
        classifier: Optional[FreshnessClassifier] = None,
        sink: Optional[EventSink] = None,
    ):
        self._assets: dict[str, Asset] = {}
        self._label_store = label_store or LabelStore()
        self._presenter = presenter or Presenter()
        self._classifier = classifier or FreshnessClassifier()
        self._sink = sink or EventSink()

    def apply_observation(
        self,
        identity: str,
        signal_strength: int,
        timestamp: datetime,
        payload_hex: str,
        profile: DeviceProfile,
    ) -> Asset:
        """
        Create or update the asset for a matched observation.

        Args:
            identity: Device identity from the scan source.
            signal_strength: RSSI in dBm.
            timestamp: Observation time.
            payload_hex: Rendered payload of the matched profile.
            profile: The profile that matched. Only used on creation.

        Returns:
            The created or updated Asset.
        """
        asset = self._assets.get(identity)

        if asset is None:
            asset = Asset(
                identity=identity,
                last_signal_strength=signal_strength,
                last_seen_at=timestamp,
                last_payload_hex=payload_hex,
                matched_profile_name=profile.name,
                label=self._label_store.get(identity) or DEFAULT_LABEL,
            )
            self._assets[identity] = asset

            self._sink.info(
                'asset_created',
                identity=identity,
                profile=profile.name,
                label=asset.label,
            )
            self._presenter.on_asset_created(self.snapshot(asset, timestamp))
            return asset

        asset.last_signal_strength = signal_strength
        asset.last_seen_at = timestamp
        asset.last_payload_hex = payload_hex
        asset.signal_history.append(signal_strength)
        asset.seen_count += 1

        self._presenter.on_asset_updated(self.snapshot(asset, timestamp))
        return asset

    def relabel(self, identity: str, new_label: str) -> Asset:
        """
        Give an asset a new display label and persist it.

        Raises:
            InvalidLabel: The label is empty or whitespace-only.
            AssetNotFound: No asset has this identity.
        """
        asset = self._assets.get(identity)
        if asset is None:
            raise AssetNotFound(identity)

        label = (new_label or '').strip()
        if not label:
            raise InvalidLabel("Label must not be empty")

        asset.label = label

        if self._label_store.set(identity, label):
            self._sink.info('label_saved', identity=identity, label=label)
        else:
            self._sink.error('label_save_failed', identity=identity, label=label)
            self._presenter.on_condition(Condition(
                kind=ConditionKind.PERSISTENCE_WARNING,
                message=f"Saving label for {identity} failed",
                identity=identity,
            ))

        self._presenter.on_asset_updated(self.snapshot(asset))
        return asset

    def get(self, identity: str) -> Optional[Asset]:
        """Get an asset by identity."""
        return self._assets.get(identity)

    def all(self) -> list[Asset]:
        """All assets, in no particular order."""
        return list(self._assets.values())

    def snapshot(self, asset: Asset, now: Optional[datetime] = None) -> AssetSnapshot:
        """Build the presentation snapshot of an asset at a given time."""
        now = now or datetime.now()
        payload = asset.last_payload_hex
        return AssetSnapshot(
            identity=asset.identity,
            label=asset.label,
            signal_strength=asset.last_signal_strength,
            freshness=self._classifier.freshness(asset, now),
            signal_band=self._classifier.signal(asset),
            last_seen_at=asset.last_seen_at,
            payload=payload,
            payload_preview=f"{payload[:PAYLOAD_PREVIEW_LENGTH]}...",
            signal_history=tuple(asset.signal_history),
            matched_profile_name=asset.matched_profile_name,
            seen_count=asset.seen_count,
            signal_percent=signal_percent(asset.last_signal_strength),
            last_seen_text=self._classifier.last_seen_text(asset, now),
        )

    def clear(self) -> None:
        """Drop every asset. Only used on teardown."""
        self._assets.clear()

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, identity: object) -> bool:
        return identity in self._assets

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._assets.values()))
