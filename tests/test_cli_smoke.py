"""Smoke tests for CLI commands.

Tests that CLI commands parse correctly and don't crash. Uses Click's
CliRunner for testing without actually running the full bridge.
"""

import json
import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from wnpbridge.cli.main import cli
from wnpbridge.exceptions import TransportError
from wnpbridge.mock_device import MockDevice


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    """Point the default config file at a temp location."""
    path = tmp_path / "config.json"
    with patch("wnpbridge.models.config.DEFAULT_CONFIG_PATH", path):
        yield path


@pytest.fixture
def device():
    with MockDevice(pixel_count=3, port=0) as device:
        yield device


@pytest.fixture
def restore_root_logger():
    """setup_logging adds handlers to the root logger; remove them afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        """Test main CLI help displays."""
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'WiFi NeoPixel bridge' in result.output
        assert '--host' in result.output
        assert '--code' in result.output

    def test_version_flag(self, runner):
        """Test --version flag works."""
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_cli_commands_dont_crash_on_help(self, runner):
        """Test that all commands can show help without crashing."""
        commands = [
            ['device'], ['device', 'states'], ['device', 'set'], ['mock-device'],
            ['config'], ['config', 'set'],
        ]

        for cmd in commands:
            result = runner.invoke(cli, cmd + ['--help'])
            assert result.exit_code == 0, f"Command '{' '.join(cmd)} --help' failed"

    def test_unknown_command_shows_error(self, runner):
        result = runner.invoke(cli, ['nonexistent'])
        assert result.exit_code != 0


@pytest.mark.integration
@pytest.mark.usefixtures("restore_root_logger")
class TestRunCommand:
    """Test the default bridge command."""

    def test_overrides_reach_the_app(self, runner, config_path, tmp_path):
        with patch('wnpbridge.app.BridgeApp') as app_cls:
            result = runner.invoke(
                cli,
                ['--host', 'http://10.0.0.5:8888', '--name', 'Desk', '--code', '111-22-333',
                 '--log-file', str(tmp_path / 'bridge.log')],
            )

        assert result.exit_code == 0, result.output
        config = app_cls.call_args.args[0]
        assert config.host_url == 'http://10.0.0.5:8888'
        assert config.accessory_name == 'Desk'
        assert config.setup_code == '11122333'
        app_cls.return_value.run.assert_called_once()
        app_cls.return_value.shutdown.assert_called_once()

    def test_metrics_addr_reaches_the_app(self, runner, config_path, tmp_path):
        with patch('wnpbridge.app.BridgeApp') as app_cls:
            result = runner.invoke(
                cli, ['--metrics-addr', ':9100', '--log-file', str(tmp_path / 'bridge.log')]
            )

        assert result.exit_code == 0, result.output
        assert app_cls.call_args.args[0].metrics_addr == ':9100'

    def test_invalid_metrics_addr_is_reported(self, runner, config_path, tmp_path):
        with patch('wnpbridge.app.BridgeApp') as app_cls:
            result = runner.invoke(
                cli, ['--metrics-addr', 'nope', '--log-file', str(tmp_path / 'bridge.log')]
            )

        assert result.exit_code == 1
        assert "'metrics_addr'" in result.output
        app_cls.assert_not_called()

    def test_invalid_code_is_reported(self, runner, config_path, tmp_path):
        with patch('wnpbridge.app.BridgeApp') as app_cls:
            result = runner.invoke(cli, ['--code', '12', '--log-file', str(tmp_path / 'bridge.log')])

        assert result.exit_code == 1
        assert "ERROR: Invalid configuration value for 'setup_code'" in result.output
        app_cls.assert_not_called()

    def test_startup_failure_exits_cleanly(self, runner, config_path, tmp_path):
        with patch('wnpbridge.app.BridgeApp') as app_cls:
            app_cls.return_value.run.side_effect = TransportError("Could not connect to the LED strip")
            result = runner.invoke(
                cli, ['--host', 'http://10.0.0.5', '--log-file', str(tmp_path / 'bridge.log')]
            )

        assert result.exit_code == 1
        assert 'ERROR: Could not connect to the LED strip' in result.output
        assert 'wnpbridge device states' in result.output
        app_cls.return_value.shutdown.assert_called_once()


@pytest.mark.integration
class TestDeviceCommands:
    """Test direct strip commands against the mock device."""

    def test_states(self, runner, config_path, device):
        device.states = [0xFFFF0000, 0, 0xFF00FF00]

        result = runner.invoke(cli, ['device', 'states', '--host', device.url])

        assert result.exit_code == 0, result.output
        assert '3 pixel(s)' in result.output
        assert '#FF0000' in result.output
        assert '#00FF00' in result.output

    def test_size(self, runner, config_path, device):
        result = runner.invoke(cli, ['device', 'size', '--host', device.url])
        assert result.exit_code == 0
        assert result.output.strip() == '3'

    def test_set_hue(self, runner, config_path, device):
        result = runner.invoke(cli, ['device', 'set', '--host', device.url, '--hue', '240'])

        assert result.exit_code == 0, result.output
        assert device.states == [0xFF0000FF] * 3

    def test_set_hex(self, runner, config_path, device):
        result = runner.invoke(cli, ['device', 'set', '--host', device.url, '--hex', '#00ff00'])

        assert result.exit_code == 0, result.output
        assert device.states == [0xFF00FF00] * 3

    def test_set_requires_one_color(self, runner, config_path, device):
        result = runner.invoke(cli, ['device', 'set', '--host', device.url])
        assert result.exit_code == 2
        assert device.states == [0] * 3

    def test_on_off_clear(self, runner, config_path, device):
        assert runner.invoke(cli, ['device', 'on', '--host', device.url]).exit_code == 0
        assert device.states == [0xFFFF0000] * 3

        assert runner.invoke(cli, ['device', 'off', '--host', device.url]).exit_code == 0
        assert device.states == [0] * 3

        device.states = [1, 2, 3]
        assert runner.invoke(cli, ['device', 'clear', '--host', device.url]).exit_code == 0
        assert device.states == [0] * 3

    def test_on_keeps_lit_colors(self, runner, config_path, device):
        device.states = [0xFF0000FF, 0xFF00FF00, 0xFFFF0000]
        assert runner.invoke(cli, ['device', 'on', '--host', device.url]).exit_code == 0
        assert device.states == [0xFF0000FF, 0xFF00FF00, 0xFFFF0000]

    def test_on_help_describes_dark_strip(self, runner):
        result = runner.invoke(cli, ['device', 'on', '--help'])
        text = ' '.join(result.output.split())
        assert 'A dark strip turns solid red' in text
        assert 'Restore' not in text

    def test_unreachable_device(self, runner, config_path, device):
        url = device.url
        device.stop()

        result = runner.invoke(cli, ['device', 'states', '--host', url])

        assert result.exit_code == 1
        assert 'ERROR: Could not connect to the LED strip' in result.output

    def test_malformed_host(self, runner, config_path):
        result = runner.invoke(cli, ['device', 'size', '--host', 'not-a-url'])
        assert result.exit_code == 1
        assert "Invalid configuration value for 'host_url'" in result.output


@pytest.mark.integration
class TestConfigCommands:
    """Test config-related CLI commands."""

    def test_config_show_runs(self, runner, config_path):
        result = runner.invoke(cli, ['config'])
        assert result.exit_code == 0
        assert 'accessory_name: WiFi NeoPixel' in result.output

    def test_config_show_field(self, runner, config_path):
        result = runner.invoke(cli, ['config', 'show', '--field', 'port'])
        assert result.exit_code == 0
        assert result.output.strip() == 'port: 51826'

    def test_config_set_saves(self, runner, config_path):
        result = runner.invoke(cli, ['config', 'set', 'host_url', 'http://10.0.0.5:8888/'])

        assert result.exit_code == 0, result.output
        assert json.loads(config_path.read_text())['host_url'] == 'http://10.0.0.5:8888'

    def test_config_set_none_clears(self, runner, config_path):
        runner.invoke(cli, ['config', 'set', 'request_timeout', '2.5'])
        result = runner.invoke(cli, ['config', 'set', 'request_timeout', 'none'])

        assert result.exit_code == 0
        assert json.loads(config_path.read_text())['request_timeout'] is None

    def test_config_set_invalid_value(self, runner, config_path):
        result = runner.invoke(cli, ['config', 'set', 'setup_code', 'abc'])

        assert result.exit_code == 1
        assert 'ERROR' in result.output
        assert not config_path.exists()

    def test_config_reset(self, runner, config_path):
        runner.invoke(cli, ['config', 'set', 'port', '1234'])
        result = runner.invoke(cli, ['config', 'reset', '--field', 'port', '--yes'])

        assert result.exit_code == 0
        assert json.loads(config_path.read_text())['port'] == 51826

    def test_config_path(self, runner):
        result = runner.invoke(cli, ['config', 'path'])
        assert result.exit_code == 0
        assert result.output.strip().endswith('config.json')

    def test_config_restore(self, runner, config_path):
        runner.invoke(cli, ['config', 'set', 'port', '1234'])
        runner.invoke(cli, ['config', 'set', 'port', '5678'])

        result = runner.invoke(cli, ['config', 'restore', '--yes'])

        assert result.exit_code == 0, result.output
        assert json.loads(config_path.read_text())['port'] == 1234

    def test_config_restore_without_backup(self, runner, config_path):
        result = runner.invoke(cli, ['config', 'restore', '--yes'])
        assert result.exit_code == 1
