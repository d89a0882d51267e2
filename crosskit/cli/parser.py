"""
crosskit CLI argument parser.

This module implements the command-line interface for crosskit using argparse.

Built-in commands (configs, validate, tools, flags, run, help) are parsed
here; every plugin-provided command (wasisdk, emsdk, ...) gets a subparser
that hands its remaining arguments to the plugin's command object.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from crosskit.cli.utils import resolve_project_root, safe_print
from crosskit.core.exceptions import UnknownCommandError
from crosskit.core.platform import HostPlatform
from crosskit.core.project import CONFIG_FILE_NAME, Project
from crosskit.core.prompt import always_yes, ask
from crosskit.plugins import Host, Plugin

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("crosskit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

BUILTIN_COMMANDS = {
    "configs": "crosskit.cli.commands.configs",
    "validate": "crosskit.cli.commands.validate",
    "tools": "crosskit.cli.commands.tools",
    "flags": "crosskit.cli.commands.flags",
    "run": "crosskit.cli.commands.run",
}


def split_separator(args: List[str]) -> Tuple[List[str], Optional[List[str]]]:
    """Split arguments at the first '--' (the tail is None without one)."""
    if "--" not in args:
        return args, None
    index = args.index("--")
    return args[:index], args[index + 1 :]


class CLI:
    """
    crosskit command-line interface.

    Args:
        plugins: Factory of the plugins to load (default: built-in toolchains)
        host_platform: Host platform (detected if None)
    """

    def __init__(
        self,
        plugins: Optional[Callable[[], Iterable[Plugin]]] = None,
        host_platform: Optional[HostPlatform] = None,
    ):
        self.plugins = plugins
        self.host_platform = host_platform
        self.parser: Optional[argparse.ArgumentParser] = None
        self.command_parsers: Dict[str, argparse.ArgumentParser] = {}

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help=f"Path to project configuration file (default: ./{CONFIG_FILE_NAME})",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Answer yes to confirmation prompts",
        )

    def _create_global_parser(self) -> argparse.ArgumentParser:
        """Parser for the global options only, used before plugins are loaded."""
        parser = argparse.ArgumentParser(add_help=False)
        self._add_global_options(parser)
        return parser

    def _create_parser(self, host: Host) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Args:
            host: Configured host providing the plugin commands

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="crosskit",
            description="crosskit - cross-platform SDK and build configuration manager",
            epilog='Use "crosskit help COMMAND" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument(
            "--version", action="version", version=f"crosskit {__version__}"
        )
        self._add_global_options(parser)

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_configs_command(subparsers)
        self._add_validate_command(subparsers)
        self._add_tools_command(subparsers)
        self._add_flags_command(subparsers)
        self._add_run_command(subparsers)
        self._add_help_command(subparsers)

        for name, command in sorted(host.commands.items()):
            plugin_parser = subparsers.add_parser(
                name, help=command.summary, add_help=False
            )
            plugin_parser.add_argument("args", nargs=argparse.REMAINDER)

        self.command_parsers = dict(subparsers.choices)

        return parser

    def _add_configs_command(self, subparsers):
        """Add 'configs' subcommand."""
        parser = subparsers.add_parser(
            "configs",
            help="List build configs",
            description="List registered build configs and whether they are usable",
        )
        parser.add_argument(
            "--all", action="store_true", help="Include abstract base configs"
        )

    def _add_validate_command(self, subparsers):
        """Add 'validate' subcommand."""
        parser = subparsers.add_parser(
            "validate",
            help="Check whether a config is usable",
            description="Validate a build config and show how to fix it",
        )
        parser.add_argument("config_name", metavar="CONFIG", help="Config name")

    def _add_tools_command(self, subparsers):
        """Add 'tools' subcommand."""
        subparsers.add_parser(
            "tools",
            help="Check external tools",
            description="Probe the external tools required by the plugins",
        )

    def _add_flags_command(self, subparsers):
        """Add 'flags' subcommand."""
        parser = subparsers.add_parser(
            "flags",
            help="Show build arguments of a config",
            description="Show the CMake arguments and compiler/linker flags of a config",
        )
        parser.add_argument("config_name", metavar="CONFIG", help="Config name")

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run a built target",
            description="Run a built target with the runner of its config",
            usage="crosskit run [options] CONFIG TARGET [ARGS ...] [-- ARGS ...]",
            epilog="Arguments crosskit does not know, and everything after '--', "
            "are passed to the target.",
        )
        parser.add_argument("config_name", metavar="CONFIG", help="Config name")
        parser.add_argument("target", metavar="TARGET", help="Executable target name")
        parser.add_argument(
            "--artifact",
            type=Path,
            metavar="PATH",
            help="Explicit artifact path (default: derived from the target name)",
        )
        parser.add_argument(
            "--browser", metavar="NAME", help="Browser to open web targets in"
        )
        parser.add_argument(
            "--port", type=int, metavar="PORT", help="Port of the local web server"
        )

    def _add_help_command(self, subparsers):
        """Add 'help' subcommand."""
        parser = subparsers.add_parser(
            "help",
            help="Show help",
            description="Show general help or the usage of one command",
        )
        parser.add_argument("topic", nargs="?", metavar="COMMAND", help="Command name")

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        args = list(sys.argv[1:] if args is None else args)
        global_args, _ = self._create_global_parser().parse_known_args(
            split_separator(args)[0]
        )

        # Configure logging
        self._configure_logging(global_args)

        try:
            host = self._create_host(global_args)
            self.parser = self._create_parser(host)
            parsed_args = self._parse_command_args(args, host)

            # Check if command specified
            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._dispatch_command(parsed_args, host)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if global_args.verbose:
                traceback.print_exc()
            return 1

    def _parse_command_args(self, args: List[str], host: Host) -> argparse.Namespace:
        """
        Parse the command line, routing pass-through arguments.

        Everything after the first '--' is never parsed. For 'run' it goes to
        the target together with the arguments crosskit does not know; plugin
        commands receive it unchanged after their own arguments.

        Args:
            args: Arguments to parse
            host: Configured host providing the plugin commands

        Returns:
            Parsed arguments
        """
        head, tail = split_separator(args)
        parsed_args, extra = self.parser.parse_known_args(head)
        if parsed_args.command in host.commands:
            # REMAINDER does not capture a leading option ('emsdk --help')
            rest = self._strip_global_options(extra + parsed_args.args)
            parsed_args.args = rest + (["--"] + tail if tail is not None else [])
        elif parsed_args.command == "run":
            parsed_args.target_args = extra + (tail or [])
        elif extra or tail is not None:
            unexpected = extra + (["--"] + tail if tail is not None else [])
            self.parser.error(f"unrecognized arguments: {' '.join(unexpected)}")
        return parsed_args

    def _strip_global_options(self, args: List[str]) -> List[str]:
        """
        Remove global options given after a plugin command.

        They were already applied by the global parser ('emsdk uninstall -y').
        """
        _, rest = self._create_global_parser().parse_known_args(args)
        return rest

    def _create_host(self, args) -> Host:
        """
        Load the project and configure the plugins.

        Args:
            args: Parsed global options
        """
        project_root = resolve_project_root(args.project_root)
        project = Project.load(project_root, args.config)
        logger.debug(f"Project: {project!r}")

        host = Host(
            project,
            confirm=always_yes if args.yes else ask,
            host_platform=self.host_platform,
        )
        plugins = self.plugins() if self.plugins is not None else None
        return host.setup(plugins)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args, host: Host) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field
            host: Configured host

        Returns:
            Exit code from command handler
        """
        if args.command == "help":
            return self._dispatch_help(args.topic, host)

        module_name = BUILTIN_COMMANDS.get(args.command)
        if module_name is not None:
            module = importlib.import_module(module_name)
            return module.run(args, host)

        command = host.command(args.command)
        if args.args in (["-h"], ["--help"]):
            return self._dispatch_help(args.command, host)
        command.run(host.project, args.args)
        return 0

    def _dispatch_help(self, topic: Optional[str], host: Host) -> int:
        """
        Print general help, or the usage of one command.

        Raises:
            UnknownCommandError: If topic is not a known command
        """
        if topic is None:
            self.parser.print_help()
            return 0

        if topic in host.commands:
            command = host.commands[topic]
            safe_print(command.summary)
            for line in command.help():
                safe_print(f"  {line}")
            return 0

        if topic in self.command_parsers:
            self.command_parsers[topic].print_help()
            return 0

        raise UnknownCommandError(topic)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
