"""Tests for conversion errors and location context."""

import pytest

from mantle.core.errors import (
    ConversionError,
    ExpressionError,
    MissingRequiredField,
    SerializationError,
    UnknownVersion,
    UnrecognizedEnumValue,
    UnsupportedVersion,
    VersionMismatch,
    contextualize,
)


class TestLeafErrors:
    """Tests for the leaf error messages and attributes."""

    def test_unrecognized_enum_value(self):
        """Test message names the field and echoes the raw value."""
        err = UnrecognizedEnumValue("deployment condition type", "Foo")

        assert str(err) == "unrecognized deployment condition type: Foo"
        assert err.field == "deployment condition type"
        assert err.raw_value == "Foo"

    def test_version_mismatch_names_both(self):
        """Test VersionMismatch carries the type and the declared version."""
        err = VersionMismatch("AppsV1Beta2Deployment", "apps/v1")

        assert "AppsV1Beta2Deployment" in str(err)
        assert "apps/v1" in str(err)
        assert err.observed_type == "AppsV1Beta2Deployment"
        assert err.declared_version == "apps/v1"

    def test_unsupported_version_is_unknown_version(self):
        """Test output-side version errors share the UnknownVersion kind."""
        err = UnsupportedVersion("apps/v9", "Deployment")

        assert isinstance(err, UnknownVersion)
        assert str(err) == "unsupported api version for Deployment: apps/v9"
        assert err.version == "apps/v9"

    def test_serialization_error_reports_size_only(self):
        """Test SerializationError reports kind and size."""
        err = SerializationError("Secret", 128, "invalid YAML (ScannerError)")

        assert err.kind == "Secret"
        assert err.size == 128
        assert "128 bytes" in str(err)

    def test_missing_required_field(self):
        err = MissingRequiredField("pod template")

        assert str(err) == "missing pod template"

    def test_all_errors_are_conversion_errors(self):
        """Test every error kind derives from ConversionError."""
        for err in (
            UnknownVersion("dict"),
            VersionMismatch("X", "v1"),
            UnrecognizedEnumValue("f", "v"),
            MissingRequiredField("f"),
            SerializationError("k", 0, "r"),
            ExpressionError("bad", "a in ("),
        ):
            assert isinstance(err, ConversionError)


class TestContextualize:
    """Tests for breadcrumb context accumulation."""

    def test_single_context(self):
        """Test one level of context is prepended."""
        with pytest.raises(UnrecognizedEnumValue) as exc_info:
            with contextualize("deployment conditions[%d]", 2):
                raise UnrecognizedEnumValue("deployment condition type", "Foo")

        assert str(exc_info.value) == (
            "deployment conditions[2]: unrecognized deployment condition type: Foo"
        )

    def test_nested_context_keeps_innermost_kind(self):
        """Test nested context builds a path and keeps the leaf attributes."""
        with pytest.raises(UnrecognizedEnumValue) as exc_info:
            with contextualize("Namespace spec"):
                with contextualize("namespace finalizers[%d]", 0):
                    raise UnrecognizedEnumValue("finalizer", "bogus")

        err = exc_info.value
        assert err.path == "Namespace spec: namespace finalizers[0]"
        assert str(err) == "Namespace spec: namespace finalizers[0]: unrecognized finalizer: bogus"
        assert err.field == "finalizer"
        assert err.raw_value == "bogus"

    def test_location_without_args_is_literal(self):
        """Test a location containing % is not formatted without args."""
        with pytest.raises(MissingRequiredField) as exc_info:
            with contextualize("100% rollout"):
                raise MissingRequiredField("pod template")

        assert exc_info.value.context == ["100% rollout"]

    def test_other_exceptions_untouched(self):
        """Test non-conversion errors propagate unchanged."""
        with pytest.raises(KeyError) as exc_info:
            with contextualize("somewhere"):
                raise KeyError("x")

        assert exc_info.value.args == ("x",)

    def test_add_context_returns_self(self):
        err = MissingRequiredField("pod template")

        assert err.add_context("deployment") is err
        assert str(err) == "deployment: missing pod template"
