"""
Helpers shared by the built-in toolchain plugins.
"""

from crosskit.config.record import ValidateFn, ValidationResult
from crosskit.core.project import Project
from crosskit.sdk.base import SdkDescriptor


def sdk_installed(descriptor: SdkDescriptor) -> ValidateFn:
    """
    Create a validation predicate requiring an SDK to be installed.

    The predicate only checks for the SDK directory, so it is side-effect
    free and gives the same answer until the SDK is (un)installed.

    Example:
        >>> check = sdk_installed(WASI_SDK)
        >>> check(project).hints
        ("WASI SDK not installed (run 'crosskit wasisdk install')",)
    """

    def validate(project: Project) -> ValidationResult:
        if descriptor.is_installed(project):
            return ValidationResult.ok()
        return ValidationResult.invalid(
            f"{descriptor.title} not installed (run 'crosskit {descriptor.command} install')"
        )

    return validate


__all__ = ["sdk_installed"]
