"""
Emscripten toolchain plugin.

Provides:
- the 'emsdk' command managing a git clone of the Emscripten SDK
- the 'emscripten' runner (serve the output directory, open a browser)
- the 'emrun' runner (the SDK's own emrun launcher)
- the emsc-{make,ninja,vscode}-{debug,release} configurations

Configuration hierarchy:
    emsc                  (abstract: platform, toolchain, runner, validation)
      emsc-make           (abstract: make)
      emsc-ninja          (abstract: ninja)
        emsc-vscode       (abstract: ninja + VS Code)
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from crosskit.config.options import OptionsSchema
from crosskit.config.record import BuildMode, ConfigDescriptor, Generator, Opener, Platform
from crosskit.plugins.base import BuildContext, Plugin, Registrar
from crosskit.runners import BrowserRunner, LauncherRunner
from crosskit.sdk import RepositorySdk, SdkCommand, SdkDescriptor
from crosskit.sdk.repository import GIT_PROBE
from crosskit.toolchains.common import sdk_installed

logger = logging.getLogger(__name__)

EMSDK = SdkDescriptor(
    name="emsdk",
    title="Emscripten SDK",
    command="emsdk",
    version="latest",
    repository_url="https://github.com/emscripten-core/emsdk.git",
)

INCLUDE_FILE = "@self:emscripten.include.cmake"
MINIMAL_SHELL = "@sdks:emsdk/upstream/emscripten/src/shell_minimal.html"

ALLOCATORS = ("dlmalloc", "emmalloc", "mimalloc")


@dataclass(frozen=True)
class EmscriptenOptions(OptionsSchema):
    """
    Options of Emscripten configurations.

    Attributes:
        initial_memory: Initial heap size in bytes
        stack_size: Stack size in bytes
        allow_memory_growth: Let the heap grow beyond initial_memory
        allocator: malloc implementation
        use_filesystem: Link the Emscripten virtual file system
        use_webgl2: Target WebGL 2
        use_closure: Run the closure compiler on the generated JS (release only)
        use_minimal_shell: Use the SDK's minimal HTML shell
    """

    initial_memory: int = 32 * 1024 * 1024
    stack_size: int = 512 * 1024
    allow_memory_growth: bool = False
    allocator: str = field(default="dlmalloc", metadata={"choices": ALLOCATORS})
    use_filesystem: bool = False
    use_webgl2: bool = False
    use_closure: bool = False
    use_minimal_shell: bool = False


class EmscriptenPlugin(Plugin):
    """Build for the web with Emscripten."""

    name = "emscripten"
    platforms = (Platform.EMSCRIPTEN,)

    def configure(self, registrar: Registrar) -> None:
        registrar.add_tool(GIT_PROBE)
        registrar.add_command(
            SdkCommand(
                EMSDK,
                RepositorySdk,
                tools=registrar.tools,
                confirm=registrar.confirm,
                host=registrar.host_platform,
            )
        )
        registrar.add_runner("emscripten", BrowserRunner("emscripten"))
        registrar.add_runner(
            "emrun",
            LauncherRunner(
                "emrun",
                EMSDK.name,
                "upstream/emscripten/emrun",
                suffix=".html",
                sdk_title=EMSDK.title,
                install_hint=f"run 'crosskit {EMSDK.command} install'",
                host=registrar.host_platform,
            ),
        )
        registrar.add_options_schema(Platform.EMSCRIPTEN, EmscriptenOptions)

        registrar.add_config(
            ConfigDescriptor(
                name="emsc",
                ignore=True,
                platform=Platform.EMSCRIPTEN,
                runner="emscripten",
                toolchain_file=(
                    "@sdks:emsdk/upstream/emscripten/cmake/Modules/Platform/Emscripten.cmake"
                ),
                cmake_includes=(INCLUDE_FILE,),
                compilers=("clang",),
                validate=sdk_installed(EMSDK),
            )
        )
        registrar.add_config(
            ConfigDescriptor(name="emsc-make", ignore=True, inherits="emsc", generator=Generator.MAKE)
        )
        registrar.add_config(
            ConfigDescriptor(name="emsc-ninja", ignore=True, inherits="emsc", generator=Generator.NINJA)
        )
        registrar.add_config(
            ConfigDescriptor(
                name="emsc-vscode", ignore=True, inherits="emsc-ninja", opener=Opener.VSCODE
            )
        )
        for base in ("emsc-make", "emsc-ninja", "emsc-vscode"):
            for mode in (BuildMode.DEBUG, BuildMode.RELEASE):
                registrar.add_config(
                    ConfigDescriptor(name=f"{base}-{mode.value}", inherits=base, build_mode=mode)
                )

    def build(self, context: BuildContext) -> None:
        options: EmscriptenOptions = context.options
        logger.debug(f"Emscripten options for {context.config.name}: {options}")
        context.add_include(self.plugin_dir / "emscripten.include.cmake")

        context.add_link_options(
            f"-sINITIAL_MEMORY={options.initial_memory}",
            f"-sSTACK_SIZE={options.stack_size}",
        )
        if options.allow_memory_growth:
            context.add_link_options("-sALLOW_MEMORY_GROWTH=1")
        if options.allocator != "dlmalloc":
            context.add_link_options(f"-sMALLOC={options.allocator}")
        if not options.use_filesystem:
            context.add_link_options("-sNO_FILESYSTEM=1")
        if options.use_webgl2:
            context.add_link_options("-sMIN_WEBGL_VERSION=2", "-sMAX_WEBGL_VERSION=2")
        if options.use_closure and context.config.build_mode is BuildMode.RELEASE:
            context.add_link_options("--closure", "1")
        if options.use_minimal_shell:
            shell = self._shell_file(context)
            if shell is not None:
                context.add_link_options("--shell-file", shell)

    def _shell_file(self, context: BuildContext) -> Optional[str]:
        path = context.project.expand(MINIMAL_SHELL)
        if not path.is_file():
            logger.warning(f"minimal shell not found at {path}, using the default shell")
            return None
        return str(path)


__all__ = ["EMSDK", "EmscriptenOptions", "EmscriptenPlugin"]
