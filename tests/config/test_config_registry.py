"""
Unit tests for the configuration registry.
"""

from dataclasses import dataclass
from unittest.mock import Mock

import pytest

from crosskit.config import (
    BuildMode,
    ConfigDescriptor,
    ConfigRegistry,
    Generator,
    OptionsSchema,
    Platform,
    ValidationResult,
)
from crosskit.core.exceptions import (
    OptionsValidationError,
    UnknownBaseError,
    UnknownConfigError,
)


@dataclass(frozen=True)
class DemoOptions(OptionsSchema):
    stack_size: int = 65536
    exceptions: bool = False


@pytest.fixture
def registry():
    registry = ConfigRegistry()
    registry.register(
        ConfigDescriptor(
            name="wasi",
            ignore=True,
            platform=Platform.WASI,
            runner="wasi",
            compilers=("clang",),
            toolchain_file="@sdks:wasisdk/share/cmake/wasi-sdk.cmake",
            cmake_variables={"WASI_SDK_PREFIX": "@sdks:wasisdk", "A": "1"},
        )
    )
    return registry


class TestInheritance:
    """Test resolution of inherited configurations."""

    def test_base_fields_copied(self, registry):
        registry.register(
            ConfigDescriptor(name="wasi-make-debug", inherits="wasi", generator=Generator.MAKE)
        )

        record = registry.resolve("wasi-make-debug")

        assert record.platform is Platform.WASI
        assert record.runner == "wasi"
        assert record.compilers == ("clang",)
        assert record.generator is Generator.MAKE
        assert record.toolchain_file == "@sdks:wasisdk/share/cmake/wasi-sdk.cmake"

    def test_override_replaces_scalar(self, registry):
        registry.register(
            ConfigDescriptor(name="x", inherits="wasi", runner="native", compilers=("gcc",))
        )

        record = registry.resolve("x")

        assert record.runner == "native"
        assert record.compilers == ("gcc",)

    def test_mapping_fields_merge(self, registry):
        """Test mapping fields merge key-wise with the derived keys winning."""
        registry.register(
            ConfigDescriptor(name="x", inherits="wasi", cmake_variables={"A": "2", "B": "3"})
        )

        assert dict(registry.resolve("x").cmake_variables) == {
            "WASI_SDK_PREFIX": "@sdks:wasisdk",
            "A": "2",
            "B": "3",
        }

    def test_ignore_not_inherited(self, registry):
        registry.register(ConfigDescriptor(name="x", inherits="wasi"))

        assert registry.resolve("wasi").ignore is True
        assert registry.resolve("x").ignore is False

    def test_chain(self, registry):
        """Test chains of any depth resolve through every level."""
        registry.register(
            ConfigDescriptor(name="wasi-ninja", inherits="wasi", ignore=True,
                             generator=Generator.NINJA)
        )
        registry.register(
            ConfigDescriptor(name="wasi-ninja-release", inherits="wasi-ninja",
                             build_mode=BuildMode.RELEASE)
        )

        record = registry.resolve("wasi-ninja-release")

        assert record.platform is Platform.WASI
        assert record.generator is Generator.NINJA
        assert record.build_mode is BuildMode.RELEASE
        assert not record.ignore

    def test_unknown_base(self, registry):
        with pytest.raises(UnknownBaseError) as exc_info:
            registry.register(ConfigDescriptor(name="x", inherits="nope"))

        assert exc_info.value.base == "nope"
        assert not registry.has("x")

    def test_no_base_defaults(self, registry):
        record = registry.register(ConfigDescriptor(name="plain"))

        assert record.platform is Platform.NATIVE
        assert record.build_mode is BuildMode.DEBUG
        assert record.runner is None


class TestReplacement:
    """Test re-registration of a name."""

    def test_last_registration_wins(self, registry):
        registry.register(ConfigDescriptor(name="x", inherits="wasi", runner="a"))
        registry.register(ConfigDescriptor(name="x", inherits="wasi", runner="b"))

        assert registry.resolve("x").runner == "b"
        assert registry.names().count("x") == 1

    def test_derived_keeps_resolved_values(self, registry):
        """Test records derived before a replacement are not re-resolved."""
        registry.register(ConfigDescriptor(name="mid", inherits="wasi", runner="a"))
        registry.register(ConfigDescriptor(name="leaf", inherits="mid"))
        registry.register(ConfigDescriptor(name="mid", inherits="wasi", runner="b"))

        assert registry.resolve("leaf").runner == "a"


class TestOptions:
    """Test option schema validation at registration."""

    @pytest.fixture
    def schema_registry(self, registry):
        registry.register_options_schema(Platform.WASI, DemoOptions)
        return registry

    def test_options_validated_into_schema(self, schema_registry):
        record = schema_registry.register(
            ConfigDescriptor(name="x", inherits="wasi", options={"stack_size": 131072})
        )

        assert record.options == DemoOptions(stack_size=131072)

    def test_options_inherited_and_merged(self, schema_registry):
        schema_registry.register(
            ConfigDescriptor(name="mid", inherits="wasi", options={"exceptions": True})
        )
        record = schema_registry.register(
            ConfigDescriptor(name="leaf", inherits="mid", options={"stack_size": 1024})
        )

        assert record.options == DemoOptions(stack_size=1024, exceptions=True)

    def test_unknown_option_rejected(self, schema_registry):
        with pytest.raises(OptionsValidationError):
            schema_registry.register(
                ConfigDescriptor(name="x", inherits="wasi", options={"stak_size": 1})
            )

        assert not schema_registry.has("x")

    def test_platform_without_schema(self, registry):
        record = registry.register(ConfigDescriptor(name="plain", options={"any": 1}))

        assert dict(record.options) == {"any": 1}


class TestLookup:
    """Test resolve(), validate() and names()."""

    def test_unknown_config(self, registry):
        with pytest.raises(UnknownConfigError, match="unknown config 'nope'"):
            registry.resolve("nope")

    def test_names_hide_ignored(self, registry):
        registry.register(ConfigDescriptor(name="b", inherits="wasi"))
        registry.register(ConfigDescriptor(name="a", inherits="wasi"))

        assert registry.names() == ["a", "b"]
        assert registry.names(include_ignored=True) == ["a", "b", "wasi"]
        assert [r.name for r in registry.records()] == ["a", "b"]

    def test_validate_without_predicate(self, registry, project):
        registry.register(ConfigDescriptor(name="x"))

        assert registry.validate("x", project).valid

    def test_validate_calls_predicate(self, registry, project):
        predicate = Mock(return_value=ValidationResult.invalid("install it"))
        registry.register(ConfigDescriptor(name="x", validate=predicate))

        result = registry.validate("x", project)

        assert result == ValidationResult(False, ("install it",))
        predicate.assert_called_once_with(project)

    def test_validate_inherited_predicate(self, registry, project):
        predicate = Mock(return_value=ValidationResult.ok())
        registry.register(ConfigDescriptor(name="base", ignore=True, validate=predicate))
        registry.register(ConfigDescriptor(name="leaf", inherits="base"))

        registry.validate("leaf", project)

        predicate.assert_called_once_with(project)

    def test_validate_is_pure(self, registry, project, snapshot):
        """Test validating twice gives the same answer and writes nothing."""
        marker = project.sdk_dir / "wasisdk"
        registry.register(
            ConfigDescriptor(
                name="x",
                validate=lambda p: ValidationResult(marker.is_dir(), ()),
            )
        )
        before = snapshot(project.root)

        first = registry.validate("x", project)
        second = registry.validate("x", project)

        assert first == second
        assert snapshot(project.root) == before

    def test_validate_unknown(self, registry, project):
        with pytest.raises(UnknownConfigError):
            registry.validate("nope", project)
