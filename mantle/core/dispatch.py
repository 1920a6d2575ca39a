"""Version dispatch for versioned kube objects.

Inbound, the concrete Python type of an object identifies its schema
version; the object's own ``api_version`` must agree with it. Outbound,
every resource is built once in a canonical schema, serialized, and decoded
again as the requested version, so each version's own decoder decides what
the final object looks like.
"""

import logging
from typing import Any, Callable, Dict, List, Type

from mantle.core.errors import (
    SerializationError,
    UnknownVersion,
    UnsupportedVersion,
    VersionMismatch,
)
from mantle.core.schema.codec import Serializer

logger = logging.getLogger(__name__)


def _declares(declared: str, api_version: str) -> bool:
    """Whether a declared apiVersion names ``api_version``, bare or in full."""
    declared = declared.lower()
    if "/" in declared:
        return declared == api_version
    return bool(declared) and declared == api_version.rsplit("/", 1)[-1]


class VersionDispatcher:
    """Routes one resource kind between its concrete schema versions.

    Schema types are classes exposing ``API_VERSION`` and ``KIND`` class
    constants and an ``api_version`` instance attribute.

    Example:
        >>> versions = VersionDispatcher("Namespace", "v1", CoreV1Namespace)
        >>> versions.register(CoreV1Namespace, namespace_from_kube_v1)
        >>> convert = versions.route(kube_namespace)
        >>> manifest = convert(kube_namespace)

    Attributes:
        kind: Resource kind, used in errors and logs
        default_version: apiVersion used when a manifest declares none
        canonical_type: Schema every outbound conversion is built in
    """

    def __init__(self, kind: str, default_version: str, canonical_type: Type) -> None:
        self.kind = kind
        self.default_version = default_version
        self.canonical_type = canonical_type
        self._routes: Dict[Type, Callable[..., Any]] = {}

    def register(self, schema_type: Type, convert: Callable[..., Any]) -> None:
        """Register the field-mapping function for one concrete schema."""
        self._routes[schema_type] = convert

    @property
    def versions(self) -> List[str]:
        """Supported apiVersions in registration order."""
        return [schema_type.API_VERSION for schema_type in self._routes]

    def route(self, obj: Any) -> Callable[..., Any]:
        """Identify an object's schema version and return its mapping function.

        The declared version may be bare, e.g. "v1beta2" for apps/v1beta2.

        Args:
            obj: Versioned kube object of unknown concrete type

        Returns:
            The field-mapping function registered for the object's type

        Raises:
            UnknownVersion: If the type is not a registered schema
            VersionMismatch: If ``obj.api_version`` disagrees with the type
        """
        schema_type = type(obj)
        convert = self._routes.get(schema_type)
        if convert is None:
            raise UnknownVersion(schema_type.__name__, self.kind)

        declared = obj.api_version or ""
        if not _declares(declared, schema_type.API_VERSION):
            raise VersionMismatch(schema_type.__name__, declared)

        logger.debug("Routing %s %s via %s", self.kind, declared, convert.__name__)
        return convert

    def resolve_version(self, version: str) -> str:
        """Resolve a requested output version to a supported apiVersion.

        Matching is case-insensitive. An empty string selects the default
        version. A bare version such as "v1beta2" selects the first
        registered schema whose apiVersion ends with it.

        Raises:
            UnsupportedVersion: If nothing matches
        """
        requested = (version or "").lower()
        if not requested:
            return self.default_version

        supported = self.versions
        if requested in supported:
            return requested
        if "/" not in requested:
            for candidate in supported:
                if candidate.rsplit("/", 1)[-1] == requested:
                    return candidate
        raise UnsupportedVersion(version, self.kind)

    def canonical(self, version: str) -> Any:
        """Create an empty canonical object that declares ``version``."""
        return self.canonical_type(api_version=version, kind=self.kind)

    def specialize(self, canonical: Any, serializer: Serializer) -> Any:
        """Re-decode a canonical object as the version it declares.

        Args:
            canonical: Object of ``canonical_type`` with ``api_version`` set
                       to the resolved target version
            serializer: Generic (de)serializer

        Returns:
            Concrete object of the declared version

        Raises:
            SerializationError: If the round trip fails or yields a type this
                                dispatcher does not handle
        """
        data = serializer.marshal(canonical)
        versioned = serializer.unmarshal(data, canonical.api_version)

        if type(versioned) not in self._routes:
            raise SerializationError(
                self.kind,
                len(data),
                f"deserialized as {type(versioned).__name__}, not a supported kube {self.kind}",
            )

        logger.debug(
            "Re-specialized %s as %s (%d bytes)",
            self.kind, type(versioned).__name__, len(data),
        )
        return versioned
