"""Protocols for the two external collaborators of the conversion core.

The core never parses selector text or YAML itself. It is handed an
:class:`ExpressionCompiler` and a :class:`Serializer`; defaults live in
``mantle.k8s`` and tests swap in in-memory fakes.
"""

from typing import Any, Protocol

from mantle.core.schema.selector import LabelSelector


class ExpressionCompiler(Protocol):
    """Turns a set-based label selector into opaque text and back.

    Both directions may raise :class:`mantle.core.errors.ExpressionError`,
    which the core passes through unchanged.
    """

    def compile(self, selector: LabelSelector) -> str:
        """Compile matchLabels and matchExpressions into one string."""
        ...

    def parse(self, text: str) -> LabelSelector:
        """Parse text produced by :meth:`compile` back into a selector."""
        ...


class Serializer(Protocol):
    """Generic (de)serializer used to re-specialize canonical objects.

    Example:
        serializer = YamlSerializer()
        data = serializer.marshal(canonical_deployment)
        versioned = serializer.unmarshal(data, "apps/v1beta2")
    """

    def marshal(self, obj: Any) -> bytes:
        """Serialize a versioned kube object to wire bytes."""
        ...

    def unmarshal(self, data: bytes, version: str) -> Any:
        """Deserialize wire bytes into the concrete type for ``version``.

        An empty ``version`` accepts whatever apiVersion the payload declares.
        """
        ...
