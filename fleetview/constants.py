"""
FleetView constants and defaults.
"""

from __future__ import annotations

# =============================================================================
# APPLICATION
# =============================================================================

APP_TITLE = 'BeaconBay FleetView'

# Environment variable pointing at a JSON config file
CONFIG_ENV_VAR = 'FLEETVIEW_CONFIG'

# Default SQLite database for persisted labels
DEFAULT_DB_PATH = 'fleetview.db'

# =============================================================================
# SWEEP SETTINGS
# =============================================================================

# Interval between full-registry status sweeps (milliseconds)
TICKER_INTERVAL_MS = 2000

# =============================================================================
# FRESHNESS THRESHOLDS
# =============================================================================

# Seen within this window -> fresh
ACTIVE_WINDOW_MS = 5000

# Seen within this window -> stale, older -> lost
INACTIVE_WINDOW_MS = 30000

# =============================================================================
# SIGNAL THRESHOLDS (dBm)
# =============================================================================

RSSI_STRONG = -75   # > -75 dBm -> strong
RSSI_WEAK = -88     # < -88 dBm -> weak

# Range mapped onto the 0-100 signal meter
RSSI_METER_FLOOR = -100
RSSI_METER_CEILING = -30

# =============================================================================
# ASSET SETTINGS
# =============================================================================

# Maximum RSSI samples kept per asset
SIGNAL_HISTORY_CAPACITY = 20

# Label given to assets that were never named
DEFAULT_LABEL = 'Unnamed asset'

# Characters of the payload shown in previews
PAYLOAD_PREVIEW_LENGTH = 20

# Label store key namespace
LABEL_KEY_PREFIX = 'nickname_'

# =============================================================================
# PAYLOAD RENDERING
# =============================================================================

HEX_PREFIX = '0x'
EMPTY_PAYLOAD = 'N/A (empty payload)'

# =============================================================================
# PROFILE MATCH KINDS
# =============================================================================

MATCH_SERVICE = 'service'
MATCH_MANUFACTURER = 'manufacturer'

# =============================================================================
# DEFAULT PROFILES
# =============================================================================

DEFAULT_PROFILES = [
    {
        'name': 'AGV charging station (type A)',
        'type': MATCH_SERVICE,
        'uuid': '0xfcf1',
    },
    {
        'name': 'AGV "M." (type B)',
        'type': MATCH_MANUFACTURER,
        'company_id': 0xA212,
    },
]

# =============================================================================
# SCAN OPTIONS
# =============================================================================

# Keep reporting advertisements from already-seen devices (RSSI updates)
SCAN_KEEP_REPEATED_DEVICES = True

# Only advertisements matching the profile filters are wanted
SCAN_ACCEPT_ALL_ADVERTISEMENTS = False
