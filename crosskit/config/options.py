"""
Typed option bags for configurations.

Each platform plugin describes the free-form options its build step
understands as a frozen dataclass deriving from OptionsSchema. Options are
checked when a configuration is registered, so a typo in a project file
fails at startup rather than in the middle of a build.

Example:
    @dataclass(frozen=True)
    class MyOptions(OptionsSchema):
        stack_size: int = 65536
        allocator: str = field(default="dlmalloc", metadata={"choices": ("dlmalloc", "emmalloc")})

    MyOptions.from_mapping({"stack_size": 131072})
"""

import typing
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from crosskit.core.exceptions import OptionsValidationError


@dataclass(frozen=True)
class OptionsSchema:
    """Base class of platform option schemas."""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "OptionsSchema":
        """
        Validate a mapping against the schema.

        Args:
            data: Option values; missing keys take their documented defaults

        Returns:
            Schema instance

        Raises:
            OptionsValidationError: On unknown keys, wrong types or values
                outside the allowed choices
        """
        known = {f.name: f for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise OptionsValidationError(
                f"unknown {cls.__name__} option(s): {', '.join(sorted(unknown))} "
                f"(known: {', '.join(sorted(known))})"
            )

        hints = typing.get_type_hints(cls)
        for key, value in data.items():
            _check_type(cls.__name__, key, value, hints[key])
            choices = known[key].metadata.get("choices")
            if choices and value not in choices:
                raise OptionsValidationError(
                    f"{cls.__name__}.{key}: '{value}' is not one of {', '.join(choices)}"
                )
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_type(schema: str, key: str, value: Any, expected: Any) -> None:
    allowed = typing.get_args(expected) if typing.get_origin(expected) is typing.Union else (expected,)
    if value is None and type(None) in allowed:
        return
    for t in allowed:
        if t is type(None):
            continue
        # bool is an int subclass, but True is not a valid stack size
        if t is int and isinstance(value, bool):
            continue
        if isinstance(value, t):
            return
    names = " or ".join(getattr(t, "__name__", str(t)) for t in allowed)
    raise OptionsValidationError(
        f"{schema}.{key}: expected {names}, got {type(value).__name__} ({value!r})"
    )


__all__ = ["OptionsSchema"]
