"""Tests for configuration loading and validation."""

import json

import pytest
from pydantic import ValidationError

from fleetview.config import (
    FleetConfig,
    config_from_dict,
    default_config,
    load_config,
    normalize_service_uuid,
    parse_company_id,
    profile_from_dict,
)
from fleetview.constants import CONFIG_ENV_VAR
from fleetview.exceptions import ConfigurationError

from conftest import COMPANY_ID, SERVICE_UUID


class TestDefaults:
    """Tests for the packaged defaults."""

    def test_default_values(self):
        """Test the default timing, threshold and scan option values."""
        config = default_config()

        assert config.sweep_period_ms == 2000
        assert config.sweep_period_seconds == 2.0
        assert config.active_window_ms == 5000
        assert config.inactive_window_ms == 30000
        assert config.strong_threshold == -75
        assert config.weak_threshold == -88
        assert config.scan_options.keep_repeated_devices is True
        assert config.scan_options.accept_all_advertisements is False

    def test_default_profiles(self):
        """Test the two packaged profiles and their normalized keys."""
        profiles = default_config().profiles

        assert [p.match_kind for p in profiles] == ['service', 'manufacturer']
        assert profiles[0].match_key == SERVICE_UUID
        assert profiles[1].match_key == COMPANY_ID

    def test_no_env_var_uses_defaults(self, monkeypatch):
        """Test loading without a path or env var gives the defaults."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_config() == default_config()


class TestProfiles:
    """Tests for profile entries."""

    @pytest.mark.parametrize('uuid', ['0xfcf1', 'FCF1', '0xFCF1', SERVICE_UUID.upper()])
    def test_service_uuid_forms(self, uuid):
        """Test short and long UUID forms normalize to one value."""
        assert normalize_service_uuid(uuid) == SERVICE_UUID

    @pytest.mark.parametrize('value', [0xA212, 41490, '0xA212', '41490'])
    def test_company_id_forms(self, value):
        """Test company ids given as ints or hex/decimal strings."""
        assert parse_company_id(value) == COMPANY_ID

    @pytest.mark.parametrize('value', [-1, 0x10000, 'zz', None, True])
    def test_invalid_company_id(self, value):
        """Test out-of-range or non-numeric company ids are rejected."""
        with pytest.raises(ConfigurationError):
            parse_company_id(value)

    def test_service_profile(self):
        """Test a service entry becomes a recognized profile."""
        profile = profile_from_dict({'name': 'Charger', 'type': 'service', 'uuid': '0xfcf1'})

        assert profile.match_key == SERVICE_UUID
        assert profile.is_recognized

    def test_unknown_type_kept(self):
        """Test entries of an unknown type are kept but unrecognized."""
        profile = profile_from_dict({'name': 'Beacon', 'type': 'eddystone', 'uuid': 'x'})

        assert profile.match_kind == 'eddystone'
        assert not profile.is_recognized

    def test_missing_key_kept_without_key(self):
        """Test a manufacturer entry without a company id has no key."""
        profile = profile_from_dict({'name': 'AGV', 'type': 'manufacturer'})
        assert profile.match_key is None

    def test_missing_name(self):
        """Test an entry without a name is rejected."""
        with pytest.raises(ConfigurationError):
            profile_from_dict({'type': 'service', 'uuid': '0xfcf1'})


class TestLoadConfig:
    """Tests for JSON config files."""

    def test_load_file(self, tmp_path):
        """Test every section of a config file is applied."""
        path = tmp_path / 'fleet.json'
        path.write_text(json.dumps({
            'app_title': 'Depot 4',
            'ticker_interval_ms': 500,
            'freshness': {'active_window_ms': 1000, 'inactive_window_ms': 10000},
            'signal': {'strong_threshold': -70, 'weak_threshold': -90},
            'profiles': [{'name': 'AGV', 'type': 'manufacturer', 'company_id': '0xA212'}],
        }))

        config = load_config(str(path))

        assert config.app_title == 'Depot 4'
        assert config.sweep_period_ms == 500
        assert config.active_window_ms == 1000
        assert config.inactive_window_ms == 10000
        assert config.strong_threshold == -70
        assert config.weak_threshold == -90
        assert [p.name for p in config.profiles] == ['AGV']

    def test_env_var(self, tmp_path, monkeypatch):
        """Test the env var names the config file."""
        path = tmp_path / 'fleet.json'
        path.write_text(json.dumps({'app_title': 'From env'}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_config().app_title == 'From env'

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / 'missing.json'))

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises ConfigurationError."""
        path = tmp_path / 'fleet.json'
        path.write_text('{not json')

        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_bad_service_uuid(self):
        """Test a service entry with a non-UUID key is rejected."""
        with pytest.raises(ConfigurationError):
            config_from_dict({'profiles': [{'name': 'X', 'type': 'service', 'uuid': 'nope'}]})

    def test_profiles_must_be_list(self):
        """Test a non-list profiles value is rejected."""
        with pytest.raises(ConfigurationError):
            config_from_dict({'profiles': {'name': 'X'}})


    @pytest.mark.parametrize('raw, expected', [
        ('false', False),
        ('true', True),
        (0, False),
        (True, True),
    ])
    def test_scan_option_booleans_coerced(self, raw, expected):
        """Test boolean scan options given as strings or ints are coerced."""
        config = config_from_dict({'scan_options': {'accept_all_advertisements': raw}})

        assert config.scan_options.accept_all_advertisements is expected

    def test_numeric_strings_coerced(self):
        """Test numeric strings are accepted for integer settings."""
        config = config_from_dict({'ticker_interval_ms': '500'})

        assert config.sweep_period_ms == 500

    @pytest.mark.parametrize('data', [
        {'ticker_interval_ms': 'abc'},
        {'scan_options': {'keep_repeated_devices': 'sometimes'}},
        {'freshness': {'active_window_ms': [1]}},
        {'signal': 'loud'},
    ])
    def test_wrong_types_rejected(self, data):
        """Test values of the wrong type raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            config_from_dict(data)

    def test_file_ranges_validated(self):
        """Test range checks apply to values read from a file."""
        with pytest.raises(ConfigurationError):
            config_from_dict({'freshness': {'active_window_ms': 9000, 'inactive_window_ms': 1000}})

class TestValidation:
    """Tests for FleetConfig invariants."""

    def test_windows_must_be_ordered(self):
        """Test the active window must be below the inactive window."""
        with pytest.raises(ConfigurationError):
            FleetConfig(active_window_ms=30000, inactive_window_ms=5000)

    def test_thresholds_must_be_ordered(self):
        """Test the strong threshold must be above the weak threshold."""
        with pytest.raises(ConfigurationError):
            FleetConfig(strong_threshold=-90, weak_threshold=-80)

    def test_sweep_period_positive(self):
        """Test the sweep period must be positive."""
        with pytest.raises(ConfigurationError):
            FleetConfig(sweep_period_ms=0)

    def test_config_is_frozen(self):
        """Test a built config cannot be modified."""
        config = default_config()

        with pytest.raises(ValidationError):
            config.sweep_period_ms = 10
