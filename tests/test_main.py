"""Tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from temporal_tui.__main__ import main, parse_args


class TestParseArgs:
    def test_defaults_leave_settings_alone(self):
        args = parse_args([])
        assert args.config is None
        assert args.server_url is None
        assert args.namespace is None
        assert args.page_size is None
        assert args.debug is None

    def test_flags(self):
        args = parse_args(["--server", "http://t:7243", "-n", "orders", "--page-size", "10", "--debug"])
        assert args.server_url == "http://t:7243"
        assert args.namespace == "orders"
        assert args.page_size == 10
        assert args.debug is True

    def test_config_path(self):
        assert parse_args(["--config", "/tmp/c.yaml"]).config == Path("/tmp/c.yaml")


class TestMain:
    def test_bad_config_exits_with_usage_error(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("colour: blue\n")

        with pytest.raises(SystemExit) as exc:
            main(["--config", str(config)])

        assert exc.value.code == 2
        assert "Unknown configuration keys" in capsys.readouterr().err

    def test_runs_dashboard_with_settings(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(f"log_path: {tmp_path / 'logs' / 'tui.log'}\n")

        with patch("temporal_tui.__main__.TemporalDashboard") as dashboard, \
                patch("temporal_tui.__main__.logging.basicConfig"):
            main(["--config", str(config), "-n", "orders", "--page-size", "7"])

        _, kwargs = dashboard.call_args
        assert kwargs == {"namespace": "orders", "page_size": 7}
        sdk = dashboard.call_args[0][0]
        assert sdk.namespace == "orders"
        dashboard.return_value.run.assert_called_once_with()
        assert (tmp_path / "logs").is_dir()
