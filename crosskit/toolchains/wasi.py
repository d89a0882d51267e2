"""
WASI toolchain plugin.

Provides:
- the 'wasisdk' command installing the prebuilt WASI SDK release archive
- the 'wasi' runner executing .wasm artifacts with wasmtime
- tool probes for tar and wasmtime
- the wasi-{make,ninja}-{debug,release} configurations
"""

import logging
from dataclasses import dataclass
from typing import Optional

from crosskit.config.options import OptionsSchema
from crosskit.config.record import BuildMode, ConfigDescriptor, Generator, Platform
from crosskit.plugins.base import BuildContext, Plugin, Registrar
from crosskit.runners import WasmtimeRunner
from crosskit.sdk import ArchiveSdk, SdkCommand, SdkDescriptor
from crosskit.sdk.archive import TAR_PROBE
from crosskit.toolchains.common import sdk_installed
from crosskit.tools import command_probe

logger = logging.getLogger(__name__)

WASI_SDK = SdkDescriptor(
    name="wasisdk",
    title="WASI SDK",
    command="wasisdk",
    version="29",
    archive_prefix="wasi-sdk-{version}.0",
    url_template=(
        "https://github.com/WebAssembly/wasi-sdk/releases/download/"
        "wasi-sdk-{version}/{archive}.tar.gz"
    ),
)

WASMTIME_PROBE = command_probe("wasmtime", "required for running WASI executables")

INCLUDE_FILE = "@self:wasi.include.cmake"


@dataclass(frozen=True)
class WasiOptions(OptionsSchema):
    """
    Options of WASI configurations.

    Attributes:
        initial_memory: Initial linear memory in bytes (linker default if None)
        stack_size: Stack size in bytes
        exceptions: Enable WebAssembly exception handling
    """

    initial_memory: Optional[int] = None
    stack_size: int = 65536
    exceptions: bool = False


class WasiPlugin(Plugin):
    """Build for WASI with the WASI SDK, run with wasmtime."""

    name = "wasi"
    platforms = (Platform.WASI,)

    def configure(self, registrar: Registrar) -> None:
        registrar.add_tool(TAR_PROBE)
        registrar.add_tool(WASMTIME_PROBE)
        registrar.add_command(
            SdkCommand(
                WASI_SDK,
                ArchiveSdk,
                tools=registrar.tools,
                confirm=registrar.confirm,
                host=registrar.host_platform,
            )
        )
        registrar.add_runner("wasi", WasmtimeRunner(tools=registrar.tools))
        registrar.add_options_schema(Platform.WASI, WasiOptions)

        registrar.add_config(
            ConfigDescriptor(
                name="wasi",
                ignore=True,
                platform=Platform.WASI,
                runner="wasi",
                compilers=("clang",),
                toolchain_file="@sdks:wasisdk/share/cmake/wasi-sdk.cmake",
                build_mode=BuildMode.DEBUG,
                cmake_includes=(INCLUDE_FILE,),
                cmake_variables={"WASI_SDK_PREFIX": "@sdks:wasisdk"},
                validate=sdk_installed(WASI_SDK),
            )
        )
        for generator in (Generator.MAKE, Generator.NINJA):
            for mode in (BuildMode.DEBUG, BuildMode.RELEASE):
                registrar.add_config(
                    ConfigDescriptor(
                        name=f"wasi-{generator.value}-{mode.value}",
                        inherits="wasi",
                        generator=generator,
                        build_mode=mode,
                    )
                )

    def build(self, context: BuildContext) -> None:
        options: WasiOptions = context.options
        logger.debug(f"WASI options for {context.config.name}: {options}")
        context.add_include(self.plugin_dir / "wasi.include.cmake")
        if options.initial_memory is not None:
            context.add_link_options(f"-Wl,--initial-memory={options.initial_memory}")
        context.add_link_options(f"-Wl,-z,stack-size={options.stack_size}")
        if options.exceptions:
            context.add_compile_options("-fwasm-exceptions")
            context.add_link_options("-fwasm-exceptions")
        else:
            context.add_compile_options("-fno-exceptions")


__all__ = ["WASI_SDK", "WASMTIME_PROBE", "WasiOptions", "WasiPlugin"]
