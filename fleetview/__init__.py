"""
FleetView asset tracking package.

Ingests Bluetooth LE advertisements, matches them against configured device
profiles, and keeps a live registry of assets with freshness and signal
quality state.
"""

from .classifier import (
    FreshnessClassifier,
    classify_freshness,
    classify_signal,
    signal_percent,
)
from .config import FleetConfig, ScanOptions, default_config, load_config
from .context import FleetContext
from .controller import ScanController, ScanState
from .events import EventSink, LoggingEventSink
from .exceptions import (
    AssetNotFound,
    CapabilityUnavailable,
    ConfigurationError,
    FleetViewError,
    InvalidLabel,
    NoValidProfiles,
    ScanSourceError,
    UserDeclined,
)
from .label_store import LabelStore, SQLiteLabelStore
from .matcher import ProfileMatcher, to_hex_string
from .models import (
    Asset,
    AssetSnapshot,
    Condition,
    ConditionKind,
    DeviceProfile,
    FreshnessBand,
    MatchKind,
    MatchResult,
    RawAdvertisement,
    ScanFilter,
    SignalBand,
)
from .presenter import LogPresenter, Presenter
from .registry import AssetRegistry
from .scan_source import BleakScanSource, ScanHandle, ScanSource

__all__ = [
    # Context and controller
    'FleetContext',
    'ScanController',
    'ScanState',

    # Configuration
    'FleetConfig',
    'ScanOptions',
    'default_config',
    'load_config',

    # Models
    'Asset',
    'AssetSnapshot',
    'Condition',
    'ConditionKind',
    'DeviceProfile',
    'FreshnessBand',
    'MatchKind',
    'MatchResult',
    'RawAdvertisement',
    'ScanFilter',
    'SignalBand',

    # Core components
    'AssetRegistry',
    'ProfileMatcher',
    'FreshnessClassifier',
    'classify_freshness',
    'classify_signal',
    'signal_percent',
    'to_hex_string',

    # Collaborators
    'EventSink',
    'LoggingEventSink',
    'LabelStore',
    'SQLiteLabelStore',
    'Presenter',
    'LogPresenter',
    'ScanSource',
    'ScanHandle',
    'BleakScanSource',

    # Exceptions
    'FleetViewError',
    'ConfigurationError',
    'NoValidProfiles',
    'ScanSourceError',
    'CapabilityUnavailable',
    'UserDeclined',
    'InvalidLabel',
    'AssetNotFound',
]
