"""
Exceptions raised by the FleetView core.
"""

from __future__ import annotations


class FleetViewError(Exception):
    """Base exception for FleetView errors."""
    pass


class ConfigurationError(FleetViewError):
    """Configuration is invalid or incomplete."""
    pass


class NoValidProfiles(ConfigurationError):
    """Configured profiles yield no usable scan filters."""
    pass


class ScanSourceError(FleetViewError):
    """The scan source failed to start or stop."""
    pass


class CapabilityUnavailable(ScanSourceError):
    """The host has no usable Bluetooth LE scanning capability."""
    pass


class UserDeclined(ScanSourceError):
    """The user or OS declined the scan permission request."""
    pass


class InvalidLabel(FleetViewError, ValueError):
    """Label is empty or whitespace-only."""
    pass


class AssetNotFound(FleetViewError, LookupError):
    """No asset with the given identity is in the registry."""
    pass
