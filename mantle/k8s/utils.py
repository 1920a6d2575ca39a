"""Shared helpers for the resource converters.

Identity and metadata are copied the same way for every kind, so the
converters route them through here.
"""

from typing import Any, Dict, Optional, Tuple

from mantle.core.schema.manifest import Identity
from mantle.k8s.types import KubeObject, ObjectMeta


def copy_map(value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Shallow-copy a label/annotation map, keeping None as None."""
    return dict(value) if value is not None else None


def identity_from_kube(obj: KubeObject) -> Tuple[Identity, Optional[Dict[str, str]], Optional[Dict[str, str]]]:
    """Extract identity, labels and annotations from a kube object.

    Args:
        obj: Any versioned kube object

    Returns:
        Tuple of (Identity, labels, annotations)
    """
    meta = obj.metadata
    identity = Identity(
        name=meta.name,
        namespace=meta.namespace,
        cluster=meta.cluster_name,
        version=obj.api_version,
    )
    return identity, copy_map(meta.labels), copy_map(meta.annotations)


def meta_from_identity(
    identity: Identity,
    labels: Optional[Dict[str, str]],
    annotations: Optional[Dict[str, str]],
) -> ObjectMeta:
    """Build kube ObjectMeta from shorthand identity, labels and annotations."""
    return ObjectMeta(
        name=identity.name,
        namespace=identity.namespace,
        cluster_name=identity.cluster,
        labels=copy_map(labels),
        annotations=copy_map(annotations),
    )
