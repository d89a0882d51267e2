"""
Unit tests for the Emscripten toolchain plugin.
"""

import pytest

from crosskit.config import BuildMode, Generator, Opener, Platform
from crosskit.core.exceptions import OptionsValidationError
from crosskit.core.project import Project
from crosskit.plugins import Host
from crosskit.runners import BrowserRunner, LauncherRunner
from crosskit.sdk import RepositorySdk
from crosskit.toolchains import EmscriptenPlugin
from crosskit.toolchains.emscripten import EmscriptenOptions


def make_host(project_root, linux_host, options=None, base="emsc-ninja-release"):
    configs = []
    if options is not None:
        configs.append({"name": "custom", "inherits": base, "options": options})
    project = Project(project_root, settings={"configs": configs})
    (project.sdk_dir / "emsdk").mkdir(parents=True)
    return Host(project, host_platform=linux_host).setup([EmscriptenPlugin()])


@pytest.fixture
def host(project, linux_host):
    return Host(project, host_platform=linux_host).setup([EmscriptenPlugin()])


class TestConfigure:
    """Test Emscripten registrations."""

    def test_leaf_configs(self, host):
        assert host.configs.names() == [
            f"emsc-{kind}-{mode}"
            for kind in ("make", "ninja", "vscode")
            for mode in ("debug", "release")
        ]

    def test_abstract_bases_hidden(self, host):
        names = host.configs.names(include_ignored=True)

        for base in ("emsc", "emsc-make", "emsc-ninja", "emsc-vscode"):
            assert base in names
            assert host.configs.resolve(base).ignore

    def test_vscode_chain(self, host):
        record = host.configs.resolve("emsc-vscode-release")

        assert record.platform is Platform.EMSCRIPTEN
        assert record.generator is Generator.NINJA
        assert record.opener is Opener.VSCODE
        assert record.build_mode is BuildMode.RELEASE
        assert record.runner == "emscripten"
        assert record.options == EmscriptenOptions()

    def test_runners(self, host):
        assert isinstance(host.runners.get("emscripten"), BrowserRunner)
        assert isinstance(host.runners.get("emrun"), LauncherRunner)

    def test_command(self, host):
        assert host.command("emsdk").manager_class is RepositorySdk
        assert host.tools.has("git")

    def test_validate_without_sdk(self, host):
        result = host.validate("emsc-make-debug")

        assert not result.valid
        assert result.hints == ("Emscripten SDK not installed (run 'crosskit emsdk install')",)


class TestBuild:
    """Test EmscriptenPlugin.build() flags."""

    def test_default_flags(self, project_root, linux_host):
        host = make_host(project_root, linux_host)

        context = host.build("emsc-make-debug")

        assert context.link_options == [
            f"-sINITIAL_MEMORY={32 * 1024 * 1024}",
            f"-sSTACK_SIZE={512 * 1024}",
            "-sNO_FILESYSTEM=1",
        ]
        assert context.includes == [EmscriptenPlugin().plugin_dir / "emscripten.include.cmake"]

    def test_all_options(self, project_root, linux_host):
        host = make_host(
            project_root,
            linux_host,
            options={
                "allow_memory_growth": True,
                "allocator": "emmalloc",
                "use_filesystem": True,
                "use_webgl2": True,
                "use_closure": True,
            },
        )

        options = host.build("custom").link_options

        assert "-sALLOW_MEMORY_GROWTH=1" in options
        assert "-sMALLOC=emmalloc" in options
        assert "-sNO_FILESYSTEM=1" not in options
        assert "-sMIN_WEBGL_VERSION=2" in options
        assert "-sMAX_WEBGL_VERSION=2" in options
        assert options[-2:] == ["--closure", "1"]

    def test_closure_only_in_release(self, project_root, linux_host):
        host = make_host(
            project_root, linux_host, options={"use_closure": True}, base="emsc-ninja-debug"
        )

        assert "--closure" not in host.build("custom").link_options

    def test_minimal_shell(self, project_root, linux_host):
        host = make_host(project_root, linux_host, options={"use_minimal_shell": True})
        shell = host.project.sdk_dir / "emsdk/upstream/emscripten/src/shell_minimal.html"
        shell.parent.mkdir(parents=True)
        shell.write_text("<html></html>")

        options = host.build("custom").link_options

        assert options[-2:] == ["--shell-file", str(shell)]

    def test_minimal_shell_missing(self, project_root, linux_host, caplog):
        host = make_host(project_root, linux_host, options={"use_minimal_shell": True})

        options = host.build("custom").link_options

        assert "--shell-file" not in options
        assert "minimal shell not found" in caplog.text

    def test_allocator_choices(self, project_root, linux_host):
        with pytest.raises(OptionsValidationError, match="jemalloc"):
            make_host(project_root, linux_host, options={"allocator": "jemalloc"})
