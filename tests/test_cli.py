"""Tests for the command-line interface."""

from unittest.mock import AsyncMock, MagicMock, patch

import yaml
from click.testing import CliRunner

from kubebigbrother import __version__
from kubebigbrother.cli import main


def _write(temp_dir, data, name="config.yaml"):
    path = temp_dir / name
    path.write_text(yaml.dump(data))
    return str(path)


class TestCheck:
    def test_valid_config(self, temp_dir, sample_config_data):
        result = CliRunner().invoke(main, ["check", "--config", _write(temp_dir, sample_config_data)])
        assert result.exit_code == 0, result.output
        assert "Effective policies" in result.output
        assert "3 resources, 4 channels" in result.output

    def test_invalid_config(self, temp_dir, sample_config_data):
        sample_config_data["defaultChannelNames"] = ["ghost"]
        result = CliRunner().invoke(main, ["check", "--config", _write(temp_dir, sample_config_data)])
        assert result.exit_code == 1
        assert "ghost" in result.output

    def test_unsupported_extension(self, temp_dir, sample_config_data):
        path = _write(temp_dir, sample_config_data, name="config.txt")
        result = CliRunner().invoke(main, ["check", "--config", path])
        assert result.exit_code == 1
        assert "unsupported file type" in result.output

    def test_empty_recipient_list(self, temp_dir, sample_config_data):
        sample_config_data["channels"]["bot"]["telegram"]["chats"] = []
        result = CliRunner().invoke(main, ["check", "--config", _write(temp_dir, sample_config_data)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert __version__ in result.output


class TestNotify:
    def test_sends_sample_event(self, temp_dir, sample_config_data):
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(return_value=mock_resp)
        mock_client.aclose = AsyncMock()

        with patch("kubebigbrother.notifications.channel.httpx.AsyncClient", return_value=mock_client):
            result = CliRunner().invoke(
                main,
                ["notify", "--config", _write(temp_dir, sample_config_data), "--channel", "hook"],
            )

        assert result.exit_code == 0, result.output
        payload = mock_client.post.call_args[1]["json"]
        assert payload["attachments"][0]["title"] == "ConfigMap default/kubebigbrother-test added"

    def test_delivery_failure(self, temp_dir, sample_config_data):
        mock_resp = MagicMock()
        mock_resp.status_code = 503
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(return_value=mock_resp)
        mock_client.aclose = AsyncMock()

        with patch("kubebigbrother.notifications.channel.httpx.AsyncClient", return_value=mock_client):
            result = CliRunner().invoke(
                main,
                ["notify", "--config", _write(temp_dir, sample_config_data), "--channel", "hook"],
            )

        assert result.exit_code == 1
        assert "503" in result.output

    def test_unknown_channel(self, temp_dir, sample_config_data):
        result = CliRunner().invoke(
            main,
            ["notify", "--config", _write(temp_dir, sample_config_data), "--channel", "nope"],
        )
        assert result.exit_code == 1
        assert "nope" in result.output
