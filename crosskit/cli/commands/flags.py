"""
Flags command implementation.

Prints what the plugins contribute to the build of a configuration: the
CMake arguments, included fragments and compiler/linker flags. Useful to
wire a configuration into a build system by hand.
"""

import logging
from typing import List

from crosskit.plugins import BuildContext, Host

logger = logging.getLogger(__name__)


def cmake_arguments(context: BuildContext) -> List[str]:
    """
    Translate build contributions to CMake command line arguments.

    Args:
        context: Collected build contributions

    Returns:
        Arguments for 'cmake -S <src> -B <build> ...'
    """
    config = context.config
    project = context.project
    arguments = []
    if config.generator is not None:
        arguments += ["-G", config.generator.cmake_name]
    arguments.append(f"-DCMAKE_BUILD_TYPE={config.build_mode.cmake_build_type}")

    toolchain = config.toolchain_path(project)
    if toolchain is not None:
        arguments.append(f"-DCMAKE_TOOLCHAIN_FILE={toolchain}")
    for key, value in context.cmake_variables.items():
        arguments.append(f"-D{key}={_cmake_value(value)}")
    for key, value in config.cmake_cache_variables.items():
        arguments.append(f"-D{key}={_cmake_value(value)}")
    if context.includes:
        arguments.append(
            "-DCMAKE_PROJECT_INCLUDE=" + ";".join(str(p) for p in context.includes)
        )
    return arguments


def _cmake_value(value) -> str:
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    return str(value)


def run(args, host: Host) -> int:
    """
    Run the flags command.

    Returns:
        Exit code (0 for success)
    """
    context = host.build(args.config_name)
    print(f"build dir:     {host.project.build_dir(args.config_name)}")
    print(f"cmake args:    {' '.join(cmake_arguments(context))}")
    print(f"compile flags: {' '.join(context.compile_options)}")
    print(f"link flags:    {' '.join(context.link_options)}")
    return 0
