"""
Fleet context: the owned bundle of registry, matcher and classifier.

One context exists per scanning session. It is built from a FleetConfig,
handed to the ScanController, and torn down with close().
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .classifier import FreshnessClassifier
from .config import FleetConfig, default_config
from .events import EventSink, LoggingEventSink
from .exceptions import InvalidLabel
from .label_store import LabelStore
from .matcher import ProfileMatcher
from .models import Asset, Condition, ConditionKind, RawAdvertisement, ScanFilter
from .presenter import Presenter
from .registry import AssetRegistry

# Conditions that are reported at error level; everything else is a warning
_ERROR_CONDITIONS = (
    ConditionKind.CONFIGURATION_ERROR,
    ConditionKind.SCAN_FAILED,
    ConditionKind.STOP_FAILED,
    ConditionKind.SWEEP_FAILED,
)


class FleetContext:
    """Holds all mutable state of a FleetView session."""

    def __init__(
        self,
        config: Optional[FleetConfig] = None,
        label_store: Optional[LabelStore] = None,
        presenter: Optional[Presenter] = None,
        sink: Optional[EventSink] = None,
    ):
        self.config = config or default_config()
        self.label_store = label_store or LabelStore()
        self.presenter = presenter or Presenter()
        self.sink = sink or LoggingEventSink()

        self.classifier = FreshnessClassifier.from_config(self.config)
        self.matcher = ProfileMatcher(
            self.config.profiles,
            sink=self.sink,
            on_condition=self.presenter.on_condition,
        )
        self.registry = AssetRegistry(
            label_store=self.label_store,
            presenter=self.presenter,
            classifier=self.classifier,
            sink=self.sink,
        )
        self._closed = False

    def build_filters(self) -> list[ScanFilter]:
        return self.matcher.build_filters()

    def handle_advertisement(
        self,
        advertisement: RawAdvertisement,
        now: Optional[datetime] = None,
    ) -> Optional[Asset]:
        """
        Process one advertisement to completion.

        Match, registry update and the inline status refresh for the touched
        asset all happen before this returns. Unmatched advertisements are
        discarded without side effects.

        Returns:
            The touched Asset, or None if the advertisement was discarded.
        """
        result = self.matcher.match(advertisement)
        if result is None:
            return None

        now = now or datetime.now()
        asset = self.registry.apply_observation(
            identity=advertisement.identity,
            signal_strength=advertisement.signal_strength,
            timestamp=now,
            payload_hex=result.payload_hex,
            profile=result.profile,
        )
        self.refresh_status(asset, now)
        return asset

    def refresh_status(self, asset: Asset, now: Optional[datetime] = None) -> None:
        """Recompute and publish the status of a single asset."""
        self.presenter.on_status_recomputed(self.registry.snapshot(asset, now))

    def sweep(self, now: Optional[datetime] = None) -> int:
        """
        Recompute the status of every asset.

        Returns:
            Number of assets refreshed.
        """
        now = now or datetime.now()
        assets = self.registry.all()
        for asset in assets:
            self.refresh_status(asset, now)
        return len(assets)

    def relabel(self, identity: str, new_label: str) -> Asset:
        """Relabel an asset, reporting rejected labels as a condition."""
        try:
            return self.registry.relabel(identity, new_label)
        except InvalidLabel as e:
            self.report(ConditionKind.INVALID_LABEL, str(e), identity=identity)
            raise

    def report(self, kind: ConditionKind, message: str, identity: Optional[str] = None) -> Condition:
        """Report a non-fatal condition to the sink and the presenter."""
        condition = Condition(kind=kind, message=message, identity=identity)
        if kind in _ERROR_CONDITIONS:
            self.sink.error(kind.value, message=message)
        else:
            self.sink.warning(kind.value, message=message)
        self.presenter.on_condition(condition)
        return condition

    def close(self) -> None:
        """Tear down the session: drop assets and release the label store."""
        if self._closed:
            return
        self._closed = True
        self.registry.clear()
        self.label_store.close()

    def __enter__(self) -> 'FleetContext':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
