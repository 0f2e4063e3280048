"""
Presentation layer interface.

The core pushes snapshots and conditions here; it never reads anything back.
Render state (the presentation handle) is owned by the presenter and keyed by
asset identity.
"""

from __future__ import annotations

import logging
from typing import Optional

from .logging import get_logger
from .models import AssetSnapshot, Condition


class Presenter:
    """Receives registry and controller signals. The base class ignores them."""

    def on_asset_created(self, snapshot: AssetSnapshot) -> None:
        pass

    def on_asset_updated(self, snapshot: AssetSnapshot) -> None:
        pass

    def on_status_recomputed(self, snapshot: AssetSnapshot) -> None:
        pass

    def on_condition(self, condition: Condition) -> None:
        pass

    def on_state_changed(self, state: str) -> None:
        pass


class LogPresenter(Presenter):
    """
    Renders one status line per asset to a logger.

    Keeps the last rendered line per identity as its handle and only logs
    status lines that changed, so the periodic sweep stays quiet for assets
    whose band and recency text did not move.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or get_logger('fleetview.presenter')
        self._handles: dict[str, str] = {}

    def render(self, snapshot: AssetSnapshot) -> str:
        return (
            f"[{snapshot.freshness}] {snapshot.label} ({snapshot.identity}) "
            f"{snapshot.signal_strength} dBm {snapshot.signal_band} "
            f"{snapshot.payload_preview} {snapshot.last_seen_text} "
            f"(seen {snapshot.seen_count}x)"
        )

    def handle_for(self, identity: str) -> Optional[str]:
        return self._handles.get(identity)

    def on_asset_created(self, snapshot: AssetSnapshot) -> None:
        self._logger.info(
            f"New asset: {snapshot.identity[:8]}... ({snapshot.matched_profile_name})"
        )
        self._draw(snapshot)

    def on_asset_updated(self, snapshot: AssetSnapshot) -> None:
        self._draw(snapshot)

    def on_status_recomputed(self, snapshot: AssetSnapshot) -> None:
        self._draw(snapshot)

    def on_condition(self, condition: Condition) -> None:
        self._logger.warning(f"{condition.kind}: {condition.message}")

    def on_state_changed(self, state: str) -> None:
        self._logger.info(f"Scan state: {state}")

    def _draw(self, snapshot: AssetSnapshot) -> None:
        line = self.render(snapshot)
        if self._handles.get(snapshot.identity) == line:
            return
        self._handles[snapshot.identity] = line
        self._logger.info(line)
