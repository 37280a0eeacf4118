"""Tests for the perforce-bridge command line."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from perforce_bridge.__main__ import main
from perforce_bridge.models.commands import ClientCommand
from perforce_bridge.models.connection import ConnectionConfig
from perforce_bridge.models.entries import DirectoryEntry, FileEntry
from perforce_bridge.p4.exceptions import P4ConnectionError
from perforce_bridge.utils.debug import DebugLogger


@pytest.fixture
def provider():
    mock = MagicMock()
    mock.config = ConnectionConfig(client_name="ws")
    return mock


@pytest.fixture
def create_provider(provider):
    with patch("perforce_bridge.__main__.create_provider", return_value=provider) as factory:
        yield factory


@pytest.fixture
def runner(monkeypatch, tmp_path):
    for name in ("P4USER", "P4PASSWD", "P4CLIENT", "P4PORT", "P4BRIDGE_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_connection_flags_become_overrides(runner, create_provider, provider):
    result = runner.invoke(main, ["--user", "builder", "--client", "build-ws", "--force-sync", "validate"])

    assert result.exit_code == 0
    _settings, overrides = create_provider.call_args[0]
    assert overrides["user_name"] == "builder"
    assert overrides["client_name"] == "build-ws"
    assert overrides["use_force_sync"] is True
    assert overrides["password"] is None
    provider.validate_connection.assert_called_once_with()
    assert "Connection OK" in result.output


def test_debug_flag_enables_capture(runner, create_provider, tmp_path):
    result = runner.invoke(main, ["--debug", "--data-dir", str(tmp_path / "data"), "validate"])

    assert result.exit_code == 0
    assert DebugLogger.is_enabled() is True
    assert (tmp_path / "data" / "logs").is_dir()


def test_get_latest(runner, create_provider, provider, tmp_path):
    target = tmp_path / "out"

    result = runner.invoke(main, ["get-latest", "depot/proj", str(target)])

    assert result.exit_code == 0
    provider.get_latest.assert_called_once_with("depot/proj", str(target))
    assert "//depot/proj/..." in result.output


def test_get_labeled(runner, create_provider, provider, tmp_path):
    target = tmp_path / "out"

    result = runner.invoke(main, ["get-labeled", "REL-1", "depot/proj", str(target)])

    assert result.exit_code == 0
    provider.get_labeled.assert_called_once_with("REL-1", "depot/proj", str(target))


def test_label(runner, create_provider, provider):
    result = runner.invoke(main, ["label", "REL-1", "depot/proj"])

    assert result.exit_code == 0
    provider.apply_label.assert_called_once_with("REL-1", "depot/proj")


def test_errors_exit_with_status_one(runner, create_provider, provider):
    provider.apply_label.side_effect = P4ConnectionError("label REL-1 unknown\n", severity=3)

    result = runner.invoke(main, ["label", "REL-1", "depot/proj"])

    assert result.exit_code == 1
    assert "REL-1 unknown" in result.output


def test_browse_renders_table(runner, create_provider, provider):
    provider.get_directory_entry_info.return_value = DirectoryEntry(
        name="proj",
        path="depot/proj",
        subdirectories=[DirectoryEntry(name="src", path="depot/proj/src")],
        files=[FileEntry(name="README", path="depot/proj/README")],
    )

    result = runner.invoke(main, ["browse", "depot/proj"])

    assert result.exit_code == 0
    provider.get_directory_entry_info.assert_called_once_with("depot/proj")
    assert "src" in result.output
    assert "README" in result.output


def test_browse_defaults_to_depots(runner, create_provider, provider):
    provider.get_directory_entry_info.return_value = DirectoryEntry(
        name="", path="", subdirectories=[DirectoryEntry(name="depot", path="depot")], files=[]
    )

    result = runner.invoke(main, ["browse"])

    assert result.exit_code == 0
    provider.get_directory_entry_info.assert_called_once_with("")
    assert "Depots" in result.output


def test_cat_writes_raw_bytes(runner, create_provider, provider):
    provider.get_file_contents.return_value = b"\x00\x01binary"

    result = runner.invoke(main, ["cat", "depot/proj/lib.bin"])

    assert result.exit_code == 0
    assert result.stdout_bytes == b"\x00\x01binary"


def test_commands_lists_catalog(runner, create_provider, provider):
    provider.get_available_commands.return_value = [ClientCommand(name="sync", description="Synchronize")]

    result = runner.invoke(main, ["commands"])

    assert result.exit_code == 0
    assert "sync" in result.output


def test_help_prints_text(runner, create_provider, provider):
    provider.get_client_command_help.return_value = "sync -- Synchronize the client\n"

    result = runner.invoke(main, ["help", "sync"])

    assert result.exit_code == 0
    assert "sync -- Synchronize the client" in result.output


def test_help_missing(runner, create_provider, provider):
    provider.get_client_command_help.return_value = None

    result = runner.invoke(main, ["help", "nosuch"])

    assert result.exit_code == 1
    assert "nosuch" in result.output


def test_exec_passes_unknown_options_through(runner, create_provider, provider):
    result = runner.invoke(main, ["exec", "changes", "-m", "5", "//depot/..."])

    assert result.exit_code == 0
    provider.execute_client_command.assert_called_once_with("changes", "-m 5 //depot/...")


def test_exec_keeps_quoted_arguments_together(runner, create_provider, provider):
    result = runner.invoke(main, ["exec", "changes", "-m", "5", "-u", "release builder"])

    assert result.exit_code == 0
    provider.execute_client_command.assert_called_once_with("changes", '-m 5 -u "release builder"')


def test_exec_missing_executable_exits_cleanly(runner, create_provider, provider):
    provider.execute_client_command.side_effect = P4ConnectionError("Unable to run p4: not found")

    result = runner.invoke(main, ["exec", "changes"])

    assert result.exit_code == 1
    assert "Unable to run p4" in result.output


def test_preview(runner, create_provider, provider):
    provider.get_client_command_preview.return_value = '-c "ws" -P "XXXXXXX" '

    result = runner.invoke(main, ["preview"])

    assert result.exit_code == 0
    assert "XXXXXXX" in result.output
