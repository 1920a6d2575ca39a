"""Conversion errors with structured location context.

Leaf conversions raise a small, specific error (kind + invalid value).
Callers that know where they are (a list index, a named sub-structure)
prepend that location with :func:`contextualize`, so the error that reaches
the top-level caller renders as a breadcrumb path::

    deployment conditions[2]: unrecognized deployment condition type: Foo

while still being an :class:`UnrecognizedEnumValue` carrying ``field`` and
``raw_value`` for programmatic inspection.
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional


class ConversionError(Exception):
    """Base class for every conversion failure.

    Attributes:
        message: Leaf description of the failure
        context: Locations from outermost to innermost, prepended as the
                 error unwinds through callers
    """

    def __init__(self, message: str) -> None:
        """Initialize ConversionError.

        Args:
            message: Leaf description of the failure
        """
        super().__init__(message)
        self.message = message
        self.context: List[str] = []

    def add_context(self, location: str) -> "ConversionError":
        """Prepend a location to the breadcrumb path.

        Args:
            location: Human-readable location, e.g. "deployment conditions[2]"

        Returns:
            The same error, so callers can ``raise err.add_context(...)``
        """
        self.context.insert(0, location)
        return self

    @property
    def path(self) -> str:
        """Breadcrumb path without the leaf message."""
        return ": ".join(self.context)

    def __str__(self) -> str:
        return ": ".join(self.context + [self.message])


class UnknownVersion(ConversionError):
    """Raised when an input object's concrete type is not a supported schema.

    Attributes:
        observed_type: Name of the concrete type that was passed in
        kind: Resource kind the dispatcher handles
    """

    def __init__(self, observed_type: str, kind: str = "object") -> None:
        super().__init__(f"unknown {kind} version: {observed_type}")
        self.observed_type = observed_type
        self.kind = kind


class UnsupportedVersion(UnknownVersion):
    """Raised when an output version string names no supported schema."""

    def __init__(self, version: str, kind: str = "object") -> None:
        ConversionError.__init__(self, f"unsupported api version for {kind}: {version}")
        self.observed_type = version
        self.kind = kind
        self.version = version


class VersionMismatch(ConversionError):
    """Raised when an object's apiVersion disagrees with its concrete type.

    Attributes:
        observed_type: Name of the concrete type
        declared_version: apiVersion string the object carries
    """

    def __init__(self, observed_type: str, declared_version: str) -> None:
        super().__init__(
            f"mis-matched versions: type {observed_type}, apiVersion {declared_version!r}"
        )
        self.observed_type = observed_type
        self.declared_version = declared_version


class UnrecognizedEnumValue(ConversionError):
    """Raised when a closed enumeration receives a value outside its table.

    Attributes:
        field: Name of the enumeration, e.g. "deployment condition type"
        raw_value: The offending value, echoed verbatim
    """

    def __init__(self, field: str, raw_value: Any) -> None:
        super().__init__(f"unrecognized {field}: {raw_value}")
        self.field = field
        self.raw_value = raw_value


class MissingRequiredField(ConversionError):
    """Raised when a field required by the target schema is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f"missing {field}")
        self.field = field


class SerializationError(ConversionError):
    """Raised when the generic (de)serializer round trip fails.

    Only the kind and payload size are reported, never the payload itself,
    so Secret data does not end up in logs.

    Attributes:
        kind: Resource kind being (de)serialized
        size: Payload size in bytes (0 when nothing was produced)
        reason: Short description of the failure
    """

    def __init__(self, kind: str, size: int, reason: str) -> None:
        super().__init__(f"couldn't round-trip {kind} ({size} bytes): {reason}")
        self.kind = kind
        self.size = size
        self.reason = reason


class ExpressionError(ConversionError):
    """Raised by the expression compiler for selectors it cannot handle.

    Attributes:
        expression: Selector text being parsed, if any
        reason: What was wrong with it
    """

    def __init__(self, reason: str, expression: Optional[str] = None) -> None:
        message = f"invalid selector expression: {reason}"
        if expression is not None:
            message = f"invalid selector expression {expression!r}: {reason}"
        super().__init__(message)
        self.expression = expression
        self.reason = reason


@contextmanager
def contextualize(location: str, *args: Any) -> Iterator[None]:
    """Prepend a location to any ConversionError raised inside the block.

    Other exceptions propagate untouched.

    Args:
        location: Location text, %-formatted with ``args`` if given

    Example:
        >>> for i, condition in enumerate(conditions):
        ...     with contextualize("deployment conditions[%d]", i):
        ...         convert_condition(condition)
    """
    try:
        yield
    except ConversionError as err:
        err.add_context(location % args if args else location)
        raise
