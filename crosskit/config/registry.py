"""
Configuration registry.

Holds the fully resolved configuration records of a run, keyed by name.
Inheritance is resolved at registration time: a descriptor naming a base
copies the base's resolved record and applies its own fields on top, so
records are final as soon as they are registered and chains of any depth
work as long as bases are registered first.

Composition rules:
- Scalar and list fields: an explicitly set field replaces the base's value.
- Mapping fields (cmake_variables, cmake_cache_variables, options): merged
  key by key, the derived descriptor's keys win.
- ignore: never inherited.

Registering a name again replaces the earlier record. That is how a project
overrides a plugin's defaults: project configurations are registered last.
Records derived from the replaced one before the replacement keep the
values they were resolved with.
"""

import logging
from dataclasses import fields, replace
from typing import Any, Dict, List, Mapping, Optional, Type

from crosskit.config.options import OptionsSchema
from crosskit.config.record import (
    ENUM_FIELDS,
    ConfigDescriptor,
    ConfigurationRecord,
    Platform,
    ValidationResult,
    frozen_mapping,
)
from crosskit.core.exceptions import UnknownBaseError, UnknownConfigError
from crosskit.core.project import Project

logger = logging.getLogger(__name__)

_MAPPING_FIELDS = ("cmake_variables", "cmake_cache_variables")
_NOT_INHERITED = ("name", "inherits", "ignore", "options")


class ConfigRegistry:
    """
    Name-keyed store of resolved configuration records.

    Example:
        registry = ConfigRegistry()
        registry.register(ConfigDescriptor(name="wasi", platform=Platform.WASI, ignore=True))
        registry.register(ConfigDescriptor(name="wasi-ninja-debug", inherits="wasi",
                                           generator=Generator.NINJA))
        record = registry.resolve("wasi-ninja-debug")
    """

    def __init__(self):
        self._records: Dict[str, ConfigurationRecord] = {}
        self._schemas: Dict[Platform, Type[OptionsSchema]] = {}

    # ========================================================================
    # Registration
    # ========================================================================

    def register_options_schema(self, platform: Platform, schema: Type[OptionsSchema]) -> None:
        """
        Declare the option schema of a platform.

        Configurations of that platform registered afterwards get their
        options validated into an instance of schema.
        """
        self._schemas[Platform(platform)] = schema

    def register(self, descriptor: ConfigDescriptor) -> ConfigurationRecord:
        """
        Resolve a descriptor and store the resulting record.

        Args:
            descriptor: Configuration descriptor

        Returns:
            The resolved record

        Raises:
            UnknownBaseError: If descriptor.inherits is not registered
            OptionsValidationError: If options do not match the platform schema
        """
        base: Optional[ConfigurationRecord] = None
        if descriptor.inherits is not None:
            base = self._records.get(descriptor.inherits)
            if base is None:
                raise UnknownBaseError(descriptor.name, descriptor.inherits)

        record = self._compose(base, descriptor)
        if descriptor.name in self._records:
            logger.debug(f"Replacing config '{descriptor.name}'")
        self._records[descriptor.name] = record
        return record

    def _compose(
        self, base: Optional[ConfigurationRecord], descriptor: ConfigDescriptor
    ) -> ConfigurationRecord:
        start = base if base is not None else ConfigurationRecord(name=descriptor.name)

        overrides: Dict[str, Any] = {}
        for f in fields(ConfigurationRecord):
            if f.name in _NOT_INHERITED:
                continue
            value = getattr(descriptor, f.name)
            if value is None:
                continue
            if f.name in ENUM_FIELDS:
                value = ENUM_FIELDS[f.name](value)
            elif f.name in _MAPPING_FIELDS:
                merged = dict(getattr(start, f.name))
                merged.update(value)
                value = frozen_mapping(merged)
            overrides[f.name] = value

        record = replace(
            start,
            name=descriptor.name,
            ignore=bool(descriptor.ignore),
            **overrides,
        )
        options = self._merge_options(record.platform, base, descriptor.options)
        return replace(record, options=options)

    def _merge_options(
        self,
        platform: Platform,
        base: Optional[ConfigurationRecord],
        overrides: Optional[Mapping[str, Any]],
    ) -> Any:
        merged: Dict[str, Any] = {}
        if base is not None:
            base_options = base.options
            if isinstance(base_options, OptionsSchema):
                # Only carry values over if the base used the same schema
                if base.platform == platform:
                    merged.update(base_options.to_dict())
            else:
                merged.update(base_options)
        merged.update(overrides or {})

        schema = self._schemas.get(platform)
        if schema is None:
            return frozen_mapping(merged)
        return schema.from_mapping(merged)

    # ========================================================================
    # Lookup
    # ========================================================================

    def has(self, name: str) -> bool:
        return name in self._records

    def resolve(self, name: str) -> ConfigurationRecord:
        """
        Get a resolved configuration.

        Raises:
            UnknownConfigError: If name is not registered
        """
        if name not in self._records:
            raise UnknownConfigError(name)
        return self._records[name]

    def validate(self, name: str, project: Project) -> ValidationResult:
        """
        Check whether a configuration is currently usable.

        The predicate only inspects the file system; calling this twice
        without changes in between gives the same result.

        Args:
            name: Configuration name
            project: Project environment passed to the predicate

        Returns:
            ValidationResult; configurations without a predicate are valid

        Raises:
            UnknownConfigError: If name is not registered
        """
        record = self.resolve(name)
        if record.validate is None:
            return ValidationResult.ok()
        return record.validate(project)

    def names(self, include_ignored: bool = False) -> List[str]:
        """
        List configuration names, sorted.

        Args:
            include_ignored: Include abstract base configurations
        """
        return sorted(
            name
            for name, record in self._records.items()
            if include_ignored or not record.ignore
        )

    def records(self, include_ignored: bool = False) -> List[ConfigurationRecord]:
        return [self._records[name] for name in self.names(include_ignored)]


__all__ = ["ConfigRegistry"]
