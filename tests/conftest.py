"""Shared fixtures for FleetView tests."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from fleetview.config import FleetConfig
from fleetview.events import EventSink
from fleetview.label_store import LabelStore
from fleetview.models import DeviceProfile, RawAdvertisement
from fleetview.presenter import Presenter

SERVICE_UUID = '0000fcf1-0000-1000-8000-00805f9b34fb'
OTHER_SERVICE_UUID = '0000feaa-0000-1000-8000-00805f9b34fb'
COMPANY_ID = 0xA212


@pytest.fixture
def service_profile():
    return DeviceProfile(name='Charging station', match_kind='service', match_key=SERVICE_UUID)


@pytest.fixture
def manufacturer_profile():
    return DeviceProfile(name='AGV M', match_kind='manufacturer', match_key=COMPANY_ID)


@pytest.fixture
def profiles(service_profile, manufacturer_profile):
    return (service_profile, manufacturer_profile)


@pytest.fixture
def config(profiles):
    return FleetConfig(profiles=profiles)


@pytest.fixture
def presenter():
    return MagicMock(spec=Presenter)


@pytest.fixture
def sink():
    return MagicMock(spec=EventSink)


@pytest.fixture
def label_store():
    store = MagicMock(spec=LabelStore)
    store.get.return_value = None
    store.set.return_value = True
    return store


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, 0)


def make_advertisement(
    identity='AA:BB:CC:DD:EE:01',
    rssi=-60,
    service_data=None,
    manufacturer_data=None,
):
    """Build a RawAdvertisement with sensible defaults."""
    return RawAdvertisement(
        identity=identity,
        signal_strength=rssi,
        service_data=service_data or {},
        manufacturer_data=manufacturer_data or {},
    )
