"""
iOS toolchain plugin.

Configurations only: iOS builds use Xcode's own toolchain, so there is no SDK
to manage and no runner.
"""

from crosskit.config.record import BuildMode, ConfigDescriptor, Generator, Opener, Platform
from crosskit.plugins.base import Plugin, Registrar


class IosPlugin(Plugin):
    name = "ios"

    def configure(self, registrar: Registrar) -> None:
        registrar.add_config(
            ConfigDescriptor(
                name="ios",
                ignore=True,
                platform=Platform.IOS,
                build_mode=BuildMode.DEBUG,
                generator=Generator.XCODE,
                opener=Opener.XCODE,
                cmake_cache_variables={"CMAKE_SYSTEM_NAME": "iOS"},
            )
        )
        for mode in (BuildMode.DEBUG, BuildMode.RELEASE):
            registrar.add_config(
                ConfigDescriptor(name=f"ios-xcode-{mode.value}", inherits="ios", build_mode=mode)
            )


__all__ = ["IosPlugin"]
