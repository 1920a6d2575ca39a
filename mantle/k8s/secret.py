"""Secret conversion between kube v1 Secrets and shorthand."""

import logging
from typing import Any, Optional

from mantle.core.dispatch import VersionDispatcher
from mantle.core.enums import SECRET_TYPES
from mantle.core.schema.codec import Serializer
from mantle.core.schema.manifest import SecretManifest
from mantle.k8s import types as kube
from mantle.k8s.serializer import YamlSerializer
from mantle.k8s.utils import copy_map, identity_from_kube, meta_from_identity

logger = logging.getLogger(__name__)

SECRET_VERSIONS = VersionDispatcher(
    kind="Secret",
    default_version=kube.CoreV1Secret.API_VERSION,
    canonical_type=kube.CoreV1Secret,
)


def from_kube_secret(obj: Any) -> SecretManifest:
    """Convert a kube Secret to a SecretManifest.

    Raises:
        UnknownVersion: If obj is not a CoreV1Secret
        VersionMismatch: If obj.api_version is not "v1"
        UnrecognizedEnumValue: For an unknown Secret type
    """
    convert = SECRET_VERSIONS.route(obj)
    return convert(obj)


def to_kube_secret(secret: SecretManifest, serializer: Optional[Serializer] = None) -> Any:
    """Convert a SecretManifest to the kube Secret version it declares."""
    version = SECRET_VERSIONS.resolve_version(secret.identity.version)

    kube_secret = SECRET_VERSIONS.canonical(version)
    kube_secret.metadata = meta_from_identity(secret.identity, secret.labels, secret.annotations)
    kube_secret.data = copy_map(secret.data)
    kube_secret.string_data = copy_map(secret.string_data)
    kube_secret.type = SECRET_TYPES.to_kube(secret.secret_type)

    return SECRET_VERSIONS.specialize(kube_secret, serializer or YamlSerializer())


def _secret_from_kube_v1(kube_secret: kube.CoreV1Secret) -> SecretManifest:
    identity, labels, annotations = identity_from_kube(kube_secret)
    secret_type = SECRET_TYPES.from_kube(kube_secret.type)

    logger.debug("Converted kube Secret %s", identity.name)
    return SecretManifest(
        identity=identity,
        labels=labels,
        annotations=annotations,
        data=copy_map(kube_secret.data),
        string_data=copy_map(kube_secret.string_data),
        secret_type=secret_type,
    )


SECRET_VERSIONS.register(kube.CoreV1Secret, _secret_from_kube_v1)
