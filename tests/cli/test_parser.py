"""
Tests for CLI argument parser and command dispatch.
"""

import logging
from unittest.mock import patch

import pytest

from crosskit.cli.parser import CLI
from crosskit.core.exceptions import SubprocessExitError
from crosskit.toolchains import IosPlugin


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI.run() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli(linux_host):
    return CLI(host_platform=linux_host)


@pytest.fixture
def run_cli(cli, project_root):
    """Run the CLI against the test project."""

    def run(*args):
        return cli.run(["--project-root", str(project_root), *args])

    return run


@pytest.fixture
def wasi_installed(project_root):
    (project_root / ".crosskit" / "sdks" / "wasisdk").mkdir(parents=True)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, run_cli, capsys):
        """Test that running without command shows help."""
        assert run_cli() == 1

        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()
        assert "wasisdk" in captured.out

    def test_version_flag(self, run_cli, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("--version")

        assert exc_info.value.code == 0
        assert "crosskit" in capsys.readouterr().out

    def test_unknown_command(self, run_cli):
        """Test argparse rejects unknown commands."""
        with pytest.raises(SystemExit) as exc_info:
            run_cli("frobnicate")

        assert exc_info.value.code == 2

    def test_unrecognized_builtin_argument(self, run_cli):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("configs", "--bogus")

        assert exc_info.value.code == 2

    def test_custom_plugins(self, project_root, linux_host, capsys):
        cli = CLI(plugins=lambda: [IosPlugin()], host_platform=linux_host)

        assert cli.run(["--project-root", str(project_root), "configs"]) == 0

        out = capsys.readouterr().out
        assert "ios-xcode-debug" in out
        assert "wasi" not in out

    def test_keyboard_interrupt(self, run_cli):
        with patch("crosskit.plugins.host.Host.validate", side_effect=KeyboardInterrupt):
            assert run_cli("validate", "wasi-make-debug") == 130

    def test_project_file(self, run_cli, project_root, capsys):
        (project_root / "crosskit.yaml").write_text(
            "configs:\n  - name: wasi-tiny\n    inherits: wasi-make-release\n"
        )

        assert run_cli("configs") == 0

        assert "wasi-tiny" in capsys.readouterr().out

    def test_project_file_bad_shape(self, run_cli, project_root, capsys):
        (project_root / "crosskit.yaml").write_text(
            "configs:\n  - name: wasi-tiny\n    cmake_variables: FOO\n"
        )

        assert run_cli("configs") == 1

        err = capsys.readouterr().err
        assert "config 'wasi-tiny': cmake_variables must be a mapping" in err

    def test_explicit_config_file_missing(self, run_cli, project_root, capsys):
        assert run_cli("--config", str(project_root / "nope.yaml"), "configs") == 1

        assert "not found" in capsys.readouterr().err


class TestHelp:
    """Test 'crosskit help'."""

    def test_general_help(self, run_cli, capsys):
        assert run_cli("help") == 0

        assert "usage:" in capsys.readouterr().out

    def test_plugin_command_help(self, run_cli, capsys):
        assert run_cli("help", "wasisdk") == 0

        out = capsys.readouterr().out
        assert "Install and manage the WASI SDK" in out
        assert "crosskit wasisdk install [version]" in out

    def test_plugin_command_dash_help(self, run_cli, capsys):
        assert run_cli("emsdk", "--help") == 0

        assert "crosskit emsdk update" in capsys.readouterr().out

    def test_builtin_command_help(self, run_cli, capsys):
        assert run_cli("help", "run") == 0

        out = capsys.readouterr().out
        assert "usage:" in out
        assert "--artifact" in out

    def test_unknown_topic(self, run_cli, capsys):
        assert run_cli("help", "nope") == 1

        assert "unknown command 'nope'" in capsys.readouterr().err


class TestSdkCommands:
    """Test plugin SDK commands through the CLI."""

    def test_missing_subcommand(self, run_cli, capsys):
        """Test usage errors exit 1 and show how to get help."""
        assert run_cli("wasisdk") == 1

        err = capsys.readouterr().err
        assert "'wasisdk' expects a subcommand" in err
        assert "crosskit help wasisdk" in err

    def test_unknown_subcommand(self, run_cli, capsys):
        assert run_cli("wasisdk", "frobnicate") == 1

        assert "unknown subcommand 'wasisdk frobnicate'" in capsys.readouterr().err

    def test_install_already_installed(self, run_cli, wasi_installed, capsys):
        assert run_cli("wasisdk", "install") == 1

        assert "WASI SDK already installed" in capsys.readouterr().err

    def test_uninstall_with_yes(self, run_cli, wasi_installed, project_root):
        assert run_cli("--yes", "wasisdk", "uninstall") == 0

        assert not (project_root / ".crosskit" / "sdks" / "wasisdk").exists()

    def test_uninstall_declined(self, run_cli, wasi_installed, project_root):
        with patch("builtins.input", return_value="n"):
            assert run_cli("wasisdk", "uninstall") == 0

        assert (project_root / ".crosskit" / "sdks" / "wasisdk").is_dir()

    def test_yes_after_subcommand(self, run_cli, wasi_installed, project_root):
        """Test a global option given after the subcommand still applies."""
        assert run_cli("wasisdk", "uninstall", "-y") == 0

        assert not (project_root / ".crosskit" / "sdks" / "wasisdk").exists()

    def test_version_after_global_option(self, run_cli):
        with patch("crosskit.sdk.archive.ArchiveSdk.install") as mock_install:
            assert run_cli("wasisdk", "install", "--verbose", "24") == 0

        mock_install.assert_called_once_with("24")

    @patch("crosskit.sdk.repository.git_update")
    def test_update_with_yes(self, mock_update, run_cli, project_root):
        (project_root / ".crosskit" / "sdks" / "emsdk").mkdir(parents=True)

        assert run_cli("-y", "emsdk", "update") == 0

        mock_update.assert_called_once()

    @patch("crosskit.sdk.repository.git_update")
    def test_update_prompts(self, mock_update, run_cli, project_root):
        """Test update asks first and defaults to no."""
        (project_root / ".crosskit" / "sdks" / "emsdk").mkdir(parents=True)

        with patch("builtins.input", return_value="") as mock_input:
            assert run_cli("emsdk", "update") == 0

        mock_input.assert_called_once()
        mock_update.assert_not_called()


class TestBuiltinCommands:
    """Test configs, validate, flags and run through the CLI."""

    def test_validate_not_installed(self, run_cli, capsys):
        assert run_cli("validate", "wasi-make-debug") == 1

        out = capsys.readouterr().out
        assert "wasi-make-debug: not usable" in out
        assert "WASI SDK not installed (run 'crosskit wasisdk install')" in out

    def test_validate_installed(self, run_cli, wasi_installed, capsys):
        assert run_cli("validate", "wasi-make-debug") == 0

        assert "wasi-make-debug: valid" in capsys.readouterr().out

    def test_validate_unknown(self, run_cli, capsys):
        assert run_cli("validate", "nope") == 1

        assert "unknown config 'nope'" in capsys.readouterr().err

    def test_flags(self, run_cli, wasi_installed, capsys):
        assert run_cli("flags", "wasi-ninja-release") == 0

        out = capsys.readouterr().out
        assert "-G Ninja" in out
        assert "-DCMAKE_BUILD_TYPE=Release" in out
        assert "wasi-sdk.cmake" in out
        assert "-Wl,-z,stack-size=65536" in out

    def test_flags_invalid_config(self, run_cli, capsys):
        assert run_cli("flags", "wasi-ninja-release") == 1

        assert "is not usable" in capsys.readouterr().err

    @patch("crosskit.tools.probe.probe_process", return_value=True)
    @patch("crosskit.runners.base.run_process")
    def test_run(self, mock_run, mock_probe, run_cli, wasi_installed, project_root):
        assert run_cli("run", "wasi-make-debug", "hello", "--", "--flag") == 0

        cmd, args = mock_run.call_args[0]
        assert cmd == "wasmtime"
        assert args[0].endswith("hello.wasm")
        assert args[1:] == ["--flag"]

    @patch("crosskit.tools.probe.probe_process", return_value=True)
    @patch("crosskit.runners.base.run_process", side_effect=SubprocessExitError("wasmtime", 3))
    def test_run_failure(self, mock_run, mock_probe, run_cli, wasi_installed, capsys):
        assert run_cli("run", "wasi-make-debug", "hello") == 1

        assert "runner 'wasi' failed with exit code 3" in capsys.readouterr().err

    def test_run_options_after_target(self, run_cli, wasi_installed):
        """Test runner options are honored wherever they appear."""
        with patch("crosskit.plugins.host.Host.run") as mock_run:
            assert run_cli("run", "wasi-make-debug", "hello", "--port", "9000") == 0

        config_name, target, options = mock_run.call_args[0]
        assert config_name == "wasi-make-debug"
        assert target.name == "hello"
        assert options.port == 9000
        assert options.args == ()

    def test_run_unknown_options_go_to_target(self, run_cli, wasi_installed):
        with patch("crosskit.plugins.host.Host.run") as mock_run:
            assert run_cli(
                "run", "wasi-make-debug", "hello", "--browser", "firefox", "-x", "1"
            ) == 0

        options = mock_run.call_args[0][2]
        assert options.browser == "firefox"
        assert options.args == ("-x", "1")

    def test_run_separator_passes_known_options(self, run_cli, wasi_installed):
        with patch("crosskit.plugins.host.Host.run") as mock_run:
            assert run_cli("run", "wasi-make-debug", "hello", "--", "--port", "1") == 0

        options = mock_run.call_args[0][2]
        assert options.port is None
        assert options.args == ("--port", "1")

    @patch("crosskit.runners.base.run_process")
    def test_run_invalid_config(self, mock_run, run_cli):
        assert run_cli("run", "wasi-make-debug", "hello") == 1

        mock_run.assert_not_called()

    @patch("crosskit.tools.probe.probe_process", return_value=False)
    def test_tools(self, mock_probe, run_cli, capsys):
        """Test optional tools being absent is not a failure."""
        assert run_cli("tools") == 0

        out = capsys.readouterr().out
        assert "tar: NOT FOUND" in out
        assert "wasmtime: NOT FOUND" in out
