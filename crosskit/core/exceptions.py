"""
Centralized exception hierarchy for crosskit.

Every fatal condition raised by the SDK lifecycle managers, the configuration
registry and the runner dispatch derives from CrossKitError, so the CLI can
report them uniformly. Where a corrective command exists, the exception carries
it as a hint and includes it in its message.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class CrossKitError(Exception):
    """Base exception for all crosskit errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        self.hint = hint
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class UsageError(CrossKitError):
    """Bad or missing subcommand or arguments."""

    pass


# ============================================================================
# SDK Lifecycle Exceptions
# ============================================================================


class SdkError(CrossKitError):
    """Base exception for SDK state precondition violations."""

    pass


class AlreadyInstalledError(SdkError):
    """Raised when installing an SDK that is already present."""

    def __init__(self, sdk_name: str, hint: Optional[str] = None):
        self.sdk_name = sdk_name
        super().__init__(f"{sdk_name} already installed", hint)


class NotInstalledError(SdkError):
    """Raised when an operation needs an SDK that is not present."""

    def __init__(self, sdk_name: str, hint: Optional[str] = None):
        self.sdk_name = sdk_name
        super().__init__(f"{sdk_name} not installed", hint)


class MissingToolError(CrossKitError):
    """A required host executable is not available."""

    def __init__(self, tool_name: str, purpose: str = "", hint: Optional[str] = None):
        self.tool_name = tool_name
        self.purpose = purpose
        msg = f"{tool_name} command not found"
        if purpose:
            msg += f", {purpose}"
        super().__init__(msg, hint)


# ============================================================================
# External Collaborator Exceptions
# ============================================================================


class NetworkError(CrossKitError):
    """Download of a remote resource failed."""

    pass


class ExtractionError(CrossKitError):
    """Unpacking a downloaded archive failed."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message)


class SubprocessExitError(CrossKitError):
    """A child process could not be started or exited with a nonzero code."""

    def __init__(self, command: str, exit_code: int, hint: Optional[str] = None):
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"'{command}' failed with exit code {exit_code}", hint)


class RunnerExecutionError(CrossKitError):
    """A runner's backend process exited with a nonzero code."""

    def __init__(self, runner_name: str, exit_code: int):
        self.runner_name = runner_name
        self.exit_code = exit_code
        super().__init__(f"runner '{runner_name}' failed with exit code {exit_code}")


# ============================================================================
# Registration Exceptions
# ============================================================================


class RegistrationError(CrossKitError):
    """Base exception for plugin or project misconfiguration."""

    pass


class UnknownConfigError(RegistrationError):
    """Raised when resolving a configuration name that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"unknown config '{name}'", "run 'crosskit configs' to list configs"
        )


class UnknownBaseError(RegistrationError):
    """Raised when a descriptor inherits from an unregistered configuration."""

    def __init__(self, name: str, base: str):
        self.name = name
        self.base = base
        super().__init__(f"config '{name}' inherits from unknown config '{base}'")


class UnknownRunnerError(RegistrationError):
    """Raised when dispatching to a runner name that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown runner '{name}'")


class UnknownCommandError(RegistrationError):
    """Raised when looking up an unregistered subcommand."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown command '{name}'", "run 'crosskit help'")


class OptionsValidationError(RegistrationError):
    """Configuration options do not match the platform's option schema."""

    pass


# ============================================================================
# Build Exceptions
# ============================================================================


class BuildConfigurationError(CrossKitError):
    """Raised when a plugin cannot contribute to the build of a configuration."""

    pass


class InvalidConfigError(BuildConfigurationError):
    """Raised when building or running a configuration that is not currently usable."""

    def __init__(self, name: str, hints: Sequence[str] = ()):
        self.name = name
        self.hints = list(hints)
        super().__init__(f"config '{name}' is not usable", "; ".join(self.hints) or None)
