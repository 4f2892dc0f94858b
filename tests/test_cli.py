"""Tests for the command-line interface."""

from types import SimpleNamespace

import pytest
import yaml
from typer.testing import CliRunner

from nexus_flow import __version__
from nexus_flow.cli import main
from nexus_flow.notifications import NotificationCategory, NotificationType
from nexus_flow.notifications.store import Notification

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_config(config, monkeypatch):
    monkeypatch.setattr(main, "get_config", lambda: config)
    return config


def test_version():
    """Test the version command."""
    result = runner.invoke(main.app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_config_show(cli_config):
    """Test that config show masks secrets."""
    cli_config.auth_secret = "s3cret"

    result = runner.invoke(main.app, ["config", "show"])

    assert result.exit_code == 0
    assert "Nexus Flow Configuration" in result.output
    assert "s3cret" not in result.output


def test_config_save(tmp_path):
    """Test writing the configuration to a chosen path."""
    target = tmp_path / "out.yaml"

    result = runner.invoke(main.app, ["config", "save", "--path", str(target)])

    assert result.exit_code == 0
    assert yaml.safe_load(target.read_text())["web"]["port"] == 3001


def test_init_db(cli_config):
    """Test that init-db creates the database file."""
    result = runner.invoke(main.app, ["init-db"])

    assert result.exit_code == 0
    assert "Database ready" in result.output
    assert cli_config.data_dir.is_dir()


def test_alerts_lists_notifications(monkeypatch):
    """Test the alerts table using a stubbed controller."""

    class StubController:
        def __init__(self):
            self.tasks = self.finance = SimpleNamespace(error=None)
            self.notifications = SimpleNamespace(notifications=[
                Notification(
                    key="task-overdue-1",
                    title="Task Overdue",
                    message="late",
                    type=NotificationType.CRITICAL,
                    category=NotificationCategory.TASK,
                )
            ])

        @classmethod
        def from_config(cls, config):
            return cls()

        async def load(self):
            pass

        async def close(self):
            pass

    monkeypatch.setattr("nexus_flow.client.controller.AppController", StubController)

    result = runner.invoke(main.app, ["alerts"])

    assert result.exit_code == 0
    assert "Task Overdue" in result.output
