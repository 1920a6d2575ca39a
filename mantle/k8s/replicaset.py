"""ReplicaSet conversion between versioned kube ReplicaSets and shorthand."""

import logging
from typing import Any, Optional

from mantle.core.dispatch import VersionDispatcher
from mantle.core.enums import REPLICA_SET_CONDITION_TYPES
from mantle.core.reconciler import SelectorReconciler
from mantle.core.schema.codec import ExpressionCompiler, Serializer
from mantle.core.schema.manifest import (
    ReplicaSetManifest,
    ReplicaSetReplicasStatus,
    ReplicaSetStatus,
)
from mantle.k8s import types as kube
from mantle.k8s.expressions import SelectorExpressionCompiler
from mantle.k8s.serializer import YamlSerializer
from mantle.k8s.utils import identity_from_kube, meta_from_identity
from mantle.k8s.workload import (
    conditions_from_kube,
    conditions_to_kube,
    template_from_kube,
    template_to_kube,
)

logger = logging.getLogger(__name__)

REPLICA_SET_VERSIONS = VersionDispatcher(
    kind="ReplicaSet",
    default_version=kube.AppsV1ReplicaSet.API_VERSION,
    canonical_type=kube.AppsV1ReplicaSet,
)


def from_kube_replica_set(obj: Any, compiler: Optional[ExpressionCompiler] = None) -> ReplicaSetManifest:
    """Convert a versioned kube ReplicaSet to a ReplicaSetManifest.

    Raises:
        UnknownVersion: If obj is not a supported ReplicaSet type
        VersionMismatch: If obj.api_version disagrees with its type
    """
    convert = REPLICA_SET_VERSIONS.route(obj)
    return convert(obj, SelectorReconciler(compiler or SelectorExpressionCompiler()))


def to_kube_replica_set(
    replica_set: ReplicaSetManifest,
    compiler: Optional[ExpressionCompiler] = None,
    serializer: Optional[Serializer] = None,
) -> Any:
    """Convert a ReplicaSetManifest to the kube ReplicaSet version it declares."""
    version = REPLICA_SET_VERSIONS.resolve_version(replica_set.identity.version)
    reconciler = SelectorReconciler(compiler or SelectorExpressionCompiler())

    kube_replica_set = REPLICA_SET_VERSIONS.canonical(version)
    kube_replica_set.metadata = meta_from_identity(
        replica_set.identity, replica_set.labels, replica_set.annotations
    )

    spec = kube_replica_set.spec
    spec.replicas = replica_set.replicas
    spec.min_ready_seconds = replica_set.min_ready_seconds
    spec.selector, spec.template = template_to_kube(reconciler, replica_set)

    status = replica_set.status
    kube_replica_set.status = kube.ReplicaSetStatus(
        replicas=status.replicas.total,
        fully_labeled_replicas=status.replicas.fully_labeled,
        ready_replicas=status.replicas.ready,
        available_replicas=status.replicas.available,
        observed_generation=status.observed_generation,
        conditions=conditions_to_kube(
            status.conditions,
            REPLICA_SET_CONDITION_TYPES,
            "replica set conditions",
            _replica_set_condition,
        ),
    )

    return REPLICA_SET_VERSIONS.specialize(kube_replica_set, serializer or YamlSerializer())


def _replica_set_condition(last_update_time: Optional[str] = None, **fields: Any) -> kube.ReplicaSetCondition:
    # ReplicaSet conditions have no lastUpdateTime
    return kube.ReplicaSetCondition(**fields)


def _replica_set_from_kube(kube_replica_set: Any, reconciler: SelectorReconciler) -> ReplicaSetManifest:
    identity, labels, annotations = identity_from_kube(kube_replica_set)
    spec = kube_replica_set.spec

    selector, template_labels, template_metadata, pod_template = template_from_kube(
        reconciler, spec.selector, spec.template
    )

    status = kube_replica_set.status
    logger.debug("Converted kube ReplicaSet %s (%s)", identity.name, identity.version)
    return ReplicaSetManifest(
        identity=identity,
        labels=labels,
        annotations=annotations,
        replicas=spec.replicas,
        selector=selector,
        template_labels=template_labels,
        template_metadata=template_metadata,
        pod_template=pod_template,
        min_ready_seconds=spec.min_ready_seconds,
        status=ReplicaSetStatus(
            observed_generation=status.observed_generation,
            replicas=ReplicaSetReplicasStatus(
                total=status.replicas,
                fully_labeled=status.fully_labeled_replicas,
                ready=status.ready_replicas,
                available=status.available_replicas,
            ),
            conditions=conditions_from_kube(
                status.conditions, REPLICA_SET_CONDITION_TYPES, "replica set conditions"
            ),
        ),
    )


for _schema in (
    kube.AppsV1ReplicaSet,
    kube.AppsV1Beta2ReplicaSet,
    kube.ExtensionsV1Beta1ReplicaSet,
):
    REPLICA_SET_VERSIONS.register(_schema, _replica_set_from_kube)
