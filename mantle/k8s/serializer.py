"""YAML implementation of the generic (de)serializer.

Canonical objects are dumped to YAML bytes and loaded back into whichever
concrete schema the payload's apiVersion and kind select. Errors report the
kind and payload size only; Secret payloads never reach error messages.
"""

import io
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor
from ruamel.yaml.error import YAMLError

from mantle.core.errors import SerializationError
from mantle.k8s.types import KUBE_SCHEMAS, KubeObject

logger = logging.getLogger(__name__)


class _PlainTimestampConstructor(SafeConstructor):
    """Safe constructor that keeps timestamps as the strings they were written as."""


# Creation and transition times round-trip verbatim, fractions and offsets included
_PlainTimestampConstructor.add_constructor(
    "tag:yaml.org,2002:timestamp", SafeConstructor.construct_yaml_str
)


def _create_yaml_instance() -> YAML:
    """Create configured ruamel.yaml instance for kube manifests.

    Returns:
        YAML instance configured to:
        - Load plain dicts, lists and scalars (no round-trip wrappers)
        - Leave timestamps and dates as strings
        - Not wrap long strings
        - Use block style (not flow style)
    """
    yaml = YAML(typ="safe", pure=True)
    yaml.Constructor = _PlainTimestampConstructor
    yaml.width = 4096  # Very wide to prevent wrapping long annotation values
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


class YamlSerializer:
    """Serialize versioned kube objects to YAML and back.

    Args:
        schemas: (apiVersion, kind) -> schema type registry
                 (default: every schema in ``mantle.k8s.types``)
    """

    def __init__(self, schemas: Optional[Mapping[Tuple[str, str], Type[KubeObject]]] = None) -> None:
        self.schemas = dict(schemas if schemas is not None else KUBE_SCHEMAS)

    def marshal(self, obj: Any) -> bytes:
        """Dump a versioned kube object as YAML bytes.

        Raises:
            SerializationError: If the object cannot be represented
        """
        kind = getattr(obj, "kind", "") or type(obj).__name__
        try:
            document = obj.to_dict()
            stream = io.StringIO()
            _create_yaml_instance().dump(document, stream)
        except (AttributeError, TypeError, ValueError, YAMLError) as e:
            raise SerializationError(kind, 0, f"cannot serialize ({type(e).__name__})") from e
        return stream.getvalue().encode("utf-8")

    def load_document(self, data: bytes, kind: str = "manifest") -> Dict[str, Any]:
        """Parse YAML bytes into a single mapping.

        Raises:
            SerializationError: If the bytes are not one YAML mapping
        """
        try:
            document = _create_yaml_instance().load(data.decode("utf-8"))
        except (UnicodeDecodeError, YAMLError) as e:
            raise SerializationError(kind, len(data), f"invalid YAML ({type(e).__name__})") from e

        if not isinstance(document, dict):
            raise SerializationError(kind, len(data), "payload is not a mapping")
        return document

    def unmarshal(self, data: bytes, version: str) -> KubeObject:
        """Load YAML bytes as the concrete schema for ``version``.

        Args:
            data: YAML bytes
            version: Expected apiVersion; empty accepts the payload's own

        Returns:
            Instance of the schema registered for the payload's apiVersion
            and kind

        Raises:
            SerializationError: If the payload is malformed, declares another
                                version, or names an unsupported schema
        """
        document = self.load_document(data)
        kind = str(document.get("kind") or "manifest")
        api_version = str(document.get("apiVersion") or "")

        if version and api_version.lower() != version.lower():
            raise SerializationError(
                kind, len(data), f"payload declares apiVersion {api_version!r}, expected {version!r}"
            )

        schema = self.schemas.get((api_version.lower(), kind))
        if schema is None:
            raise SerializationError(
                kind, len(data), f"{api_version}/{kind} is not a supported kube schema"
            )

        try:
            obj = schema.from_dict(document)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SerializationError(kind, len(data), f"malformed {schema.__name__} ({type(e).__name__})") from e

        logger.debug("Unmarshalled %d bytes as %s", len(data), schema.__name__)
        return obj
