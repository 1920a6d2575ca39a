"""Namespace conversion between kube v1 Namespaces and shorthand."""

import logging
from typing import Any, List, Optional

from mantle.core.dispatch import VersionDispatcher
from mantle.core.enums import FINALIZERS, NAMESPACE_PHASES
from mantle.core.errors import contextualize
from mantle.core.schema.codec import Serializer
from mantle.core.schema.manifest import FinalizerName, NamespaceManifest
from mantle.k8s import types as kube
from mantle.k8s.serializer import YamlSerializer
from mantle.k8s.utils import identity_from_kube, meta_from_identity

logger = logging.getLogger(__name__)

NAMESPACE_VERSIONS = VersionDispatcher(
    kind="Namespace",
    default_version=kube.CoreV1Namespace.API_VERSION,
    canonical_type=kube.CoreV1Namespace,
)


def from_kube_namespace(obj: Any) -> NamespaceManifest:
    """Convert a kube Namespace to a NamespaceManifest.

    Raises:
        UnknownVersion: If obj is not a CoreV1Namespace
        VersionMismatch: If obj.api_version is not "v1"
        UnrecognizedEnumValue: For unknown finalizers or phases
    """
    convert = NAMESPACE_VERSIONS.route(obj)
    return convert(obj)


def to_kube_namespace(namespace: NamespaceManifest, serializer: Optional[Serializer] = None) -> Any:
    """Convert a NamespaceManifest to the kube Namespace version it declares.

    Raises:
        UnsupportedVersion: If the declared version is not "v1" or empty
        UnrecognizedEnumValue: With "Namespace spec" / "Namespace status" context
    """
    version = NAMESPACE_VERSIONS.resolve_version(namespace.identity.version)

    kube_namespace = NAMESPACE_VERSIONS.canonical(version)
    kube_namespace.metadata = meta_from_identity(
        namespace.identity, namespace.labels, namespace.annotations
    )

    with contextualize("Namespace spec"):
        kube_namespace.finalizers = _finalizers_to_kube(namespace.finalizers)

    with contextualize("Namespace status"):
        kube_namespace.phase = NAMESPACE_PHASES.to_kube(namespace.phase)

    return NAMESPACE_VERSIONS.specialize(kube_namespace, serializer or YamlSerializer())


def _finalizers_to_kube(finalizers: Optional[List[FinalizerName]]) -> Optional[List[str]]:
    if finalizers is None:
        return None

    kube_finalizers = []
    for i, finalizer in enumerate(finalizers):
        with contextualize("namespace finalizers[%d]", i):
            kube_finalizers.append(FINALIZERS.to_kube(finalizer))
    return kube_finalizers


def _namespace_from_kube_v1(kube_namespace: kube.CoreV1Namespace) -> NamespaceManifest:
    identity, labels, annotations = identity_from_kube(kube_namespace)

    finalizers = None
    if kube_namespace.finalizers is not None:
        finalizers = []
        with contextualize("Namespace spec"):
            for i, kube_finalizer in enumerate(kube_namespace.finalizers):
                with contextualize("namespace finalizers[%d]", i):
                    finalizers.append(FINALIZERS.from_kube(kube_finalizer))

    with contextualize("Namespace status"):
        phase = NAMESPACE_PHASES.from_kube(kube_namespace.phase)

    logger.debug("Converted kube Namespace %s", identity.name)
    return NamespaceManifest(
        identity=identity,
        labels=labels,
        annotations=annotations,
        finalizers=finalizers,
        phase=phase,
    )


NAMESPACE_VERSIONS.register(kube.CoreV1Namespace, _namespace_from_kube_v1)
