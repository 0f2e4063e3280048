"""Tests for the command-line runner."""

from unittest.mock import AsyncMock, patch

from fleetview.__main__ import main, parse_args
from fleetview.exceptions import UserDeclined
from fleetview.models import ConditionKind


class TestCommandLine:
    """Tests for argument parsing and exit codes."""

    def test_defaults(self):
        """Test argument defaults."""
        args = parse_args([])

        assert args.config is None
        assert args.duration is None
        assert args.log_level == 'INFO'

    def test_options(self):
        """Test adapter, duration and database options are parsed."""
        args = parse_args(['--adapter', 'hci1', '--duration', '2.5', '--db', 'x.db'])

        assert args.adapter == 'hci1'
        assert args.duration == 2.5
        assert args.db == 'x.db'

    def test_bad_config_exits_2(self, tmp_path):
        """Test an unreadable config exits with status 2."""
        path = tmp_path / 'fleet.json'
        path.write_text('{broken')

        assert main(['--config', str(path), '--db', str(tmp_path / 'labels.db')]) == 2

    def test_declined_scan_exits_1(self, tmp_path):
        """Test a declined scan is reported and exits with status 1."""
        with patch('fleetview.__main__.BleakScanSource') as source_cls:
            source_cls.return_value.request_scan = AsyncMock(side_effect=UserDeclined('declined'))
            with patch('fleetview.presenter.LogPresenter.on_condition') as on_condition:
                code = main(['--db', str(tmp_path / 'labels.db'), '--duration', '0'])

        assert code == 1
        assert on_condition.call_args.args[0].kind == ConditionKind.USER_DECLINED
