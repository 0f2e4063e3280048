"""
Scan sources producing raw advertisements.

BleakScanSource wraps bleak's BleakScanner. Every advertisement is converted
to a RawAdvertisement and handed to the callback on the event loop thread.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from bleak import BleakScanner
from bleak.exc import BleakError

from .config import ScanOptions
from .exceptions import CapabilityUnavailable, ScanSourceError, UserDeclined
from .logging import get_logger
from .models import RawAdvertisement, ScanFilter

logger = get_logger('fleetview.scan_source')

AdvertisementCallback = Callable[[RawAdvertisement], None]

# Substrings of bleak error messages meaning there is no usable adapter
_UNAVAILABLE_HINTS = ('no bluetooth', 'not found', 'adapter', 'powered off', 'not available')


class ScanHandle:
    """A running scan that can be halted."""

    @property
    def active(self) -> bool:
        return False

    async def stop(self) -> None:
        pass


class ScanSource:
    """Produces advertisements for a set of filters."""

    async def request_scan(
        self,
        filters: Sequence[ScanFilter],
        options: ScanOptions,
        on_advertisement: AdvertisementCallback,
    ) -> ScanHandle:
        """
        Start scanning.

        Raises:
            CapabilityUnavailable: No usable scanning capability on this host.
            UserDeclined: The permission request was declined.
            ScanSourceError: Any other start failure.
        """
        raise NotImplementedError


def to_raw_advertisement(device, advertisement_data) -> RawAdvertisement:
    """
    Convert a bleak device/advertisement pair into a RawAdvertisement.

    Service UUID keys are passed through as bleak reports them; the matcher
    compares them in normalized form.
    """
    return RawAdvertisement(
        identity=device.address,
        signal_strength=advertisement_data.rssi,
        service_data={
            uuid: bytes(data)
            for uuid, data in (advertisement_data.service_data or {}).items()
        },
        manufacturer_data={
            company_id: bytes(data)
            for company_id, data in (advertisement_data.manufacturer_data or {}).items()
        },
    )


def translate_start_error(error: Exception) -> ScanSourceError:
    """Map a scanner start failure onto the FleetView error taxonomy."""
    if isinstance(error, PermissionError):
        return UserDeclined(f"Bluetooth permission denied: {error}")

    reason = getattr(error, 'reason', None)
    if reason is not None:
        # bleak's "Bluetooth not available" error carries a reason enum
        reason_name = str(getattr(reason, 'name', reason)).upper()
        if 'DENIED' in reason_name:
            return UserDeclined(f"Bluetooth access denied: {error}")
        return CapabilityUnavailable(f"Bluetooth not available: {error}")

    if isinstance(error, FileNotFoundError):
        return CapabilityUnavailable(f"Bluetooth stack not reachable: {error}")

    message = str(error).lower()
    if any(hint in message for hint in _UNAVAILABLE_HINTS):
        return CapabilityUnavailable(f"Bluetooth not available: {error}")

    return ScanSourceError(f"Scan failed: {error}")


class BleakScanHandle(ScanHandle):
    """Handle for a running BleakScanner."""

    def __init__(self, scanner: BleakScanner):
        self._scanner = scanner
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    async def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        try:
            await self._scanner.stop()
        except (BleakError, OSError) as e:
            raise ScanSourceError(f"Failed to stop scan: {e}") from e


class BleakScanSource(ScanSource):
    """
    Cross-platform BLE scan source using bleak.

    bleak reports every advertisement (including repeats from known devices)
    through the detection callback, which is what keep_repeated_devices asks
    for. Filtering by profile happens in the matcher; the service UUID list
    is only passed down when every filter is a service filter, since the OS
    filter would otherwise hide manufacturer-only devices.
    """

    def __init__(self, adapter: Optional[str] = None):
        self.adapter = adapter

    def _scanner_kwargs(self, filters: Sequence[ScanFilter], options: ScanOptions) -> dict:
        kwargs = {}
        if self.adapter:
            kwargs['adapter'] = self.adapter

        if not options.accept_all_advertisements and filters and all(
            f.service_uuid is not None for f in filters
        ):
            kwargs['service_uuids'] = [f.service_uuid for f in filters]
        return kwargs

    async def request_scan(
        self,
        filters: Sequence[ScanFilter],
        options: ScanOptions,
        on_advertisement: AdvertisementCallback,
    ) -> ScanHandle:
        def detection_callback(device, advertisement_data):
            on_advertisement(to_raw_advertisement(device, advertisement_data))

        kwargs = self._scanner_kwargs(filters, options)
        logger.info(f"Starting BLE scan with bleak ({len(filters)} filters)")

        try:
            scanner = BleakScanner(detection_callback=detection_callback, **kwargs)
            await scanner.start()
        except (BleakError, OSError) as e:
            raise translate_start_error(e) from e

        return BleakScanHandle(scanner)
