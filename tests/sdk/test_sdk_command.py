"""
Unit tests for SDK subcommand routing.
"""

import logging
from unittest.mock import MagicMock

import pytest

from crosskit.core.exceptions import UsageError
from crosskit.sdk import SdkCommand, SdkDescriptor, SdkLifecycleManager

DESCRIPTOR = SdkDescriptor(name="demosdk", title="Demo SDK", command="demo", version="1.0")


@pytest.fixture
def manager():
    mock = MagicMock(spec=SdkLifecycleManager)
    mock.install.return_value = "/sdks/demosdk"
    return mock


@pytest.fixture
def command(manager):
    manager_class = MagicMock(return_value=manager)
    return SdkCommand(DESCRIPTOR, manager_class)


class TestMetadata:
    def test_name_and_summary(self, command):
        assert command.name == "demo"
        assert command.summary == "Install and manage the Demo SDK"

    def test_help_lists_subcommands(self, command):
        lines = command.help()

        assert "crosskit demo install [version]" in lines
        assert "crosskit demo update" in lines
        assert "crosskit demo uninstall" in lines
        assert "crosskit demo list" in lines
        assert any("default version: 1.0" in line for line in lines)

    def test_manager_gets_shared_collaborators(self, project, linux_host, available_tools):
        manager_class = MagicMock()
        confirm = MagicMock()
        command = SdkCommand(DESCRIPTOR, manager_class, available_tools, confirm, linux_host)

        command.manager(project)

        manager_class.assert_called_once_with(
            DESCRIPTOR, project, tools=available_tools, confirm=confirm, host=linux_host
        )


class TestRouting:
    """Test SdkCommand.run()."""

    def test_install_default(self, command, manager, project, caplog):
        with caplog.at_level(logging.INFO):
            command.run(project, ["install"])

        manager.install.assert_called_once_with(None)
        assert "Demo SDK installed to /sdks/demosdk" in caplog.text

    def test_install_version(self, command, manager, project):
        command.run(project, ["install", "2.0"])

        manager.install.assert_called_once_with("2.0")

    @pytest.mark.parametrize(
        "subcommand, method",
        [
            ("update", "update"),
            ("uninstall", "uninstall"),
            ("list", "list_versions"),
        ],
    )
    def test_no_arg_subcommands(self, command, manager, project, subcommand, method):
        command.run(project, [subcommand])

        getattr(manager, method).assert_called_once_with()

    def test_missing_subcommand(self, command, manager, project):
        with pytest.raises(UsageError, match="expects a subcommand") as exc_info:
            command.run(project, [])

        assert "crosskit help demo" in str(exc_info.value)
        manager.install.assert_not_called()

    def test_unknown_subcommand(self, command, project):
        with pytest.raises(UsageError, match="unknown subcommand 'demo frobnicate'"):
            command.run(project, ["frobnicate"])

    def test_install_too_many_arguments(self, command, manager, project):
        with pytest.raises(UsageError, match="at most one version"):
            command.run(project, ["install", "1.0", "2.0"])

        manager.install.assert_not_called()

    def test_unexpected_arguments(self, command, manager, project):
        with pytest.raises(UsageError, match="unexpected argument"):
            command.run(project, ["uninstall", "--force"])

        manager.uninstall.assert_not_called()
