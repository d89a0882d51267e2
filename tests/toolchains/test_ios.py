"""
Unit tests for the iOS toolchain plugin.
"""

from crosskit.config import BuildMode, Generator, Opener, Platform
from crosskit.plugins import Host
from crosskit.toolchains import IosPlugin


def test_ios_configs(project, linux_host):
    host = Host(project, host_platform=linux_host).setup([IosPlugin()])

    assert host.configs.names() == ["ios-xcode-debug", "ios-xcode-release"]

    record = host.configs.resolve("ios-xcode-release")
    assert record.platform is Platform.IOS
    assert record.generator is Generator.XCODE
    assert record.opener is Opener.XCODE
    assert record.build_mode is BuildMode.RELEASE
    assert dict(record.cmake_cache_variables) == {"CMAKE_SYSTEM_NAME": "iOS"}
    assert record.runner is None


def test_ios_always_valid(project, linux_host):
    host = Host(project, host_platform=linux_host).setup([IosPlugin()])

    assert host.validate("ios-xcode-debug").valid
    assert host.build("ios-xcode-debug").includes == []
