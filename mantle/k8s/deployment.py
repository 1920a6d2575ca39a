"""Deployment conversion between versioned kube Deployments and shorthand.

Inbound, any supported Deployment version is mapped field by field into a
:class:`DeploymentManifest`. Outbound, the manifest is always built as an
``apps/v1`` Deployment and re-specialized to the declared version through
the serializer.
"""

import logging
from typing import Any, Optional, Tuple

from mantle.core.dispatch import VersionDispatcher
from mantle.core.enums import DEPLOYMENT_CONDITION_TYPES, DEPLOYMENT_STRATEGY_TYPES
from mantle.core.reconciler import SelectorReconciler
from mantle.core.schema.codec import ExpressionCompiler, Serializer
from mantle.core.schema.manifest import (
    DeploymentManifest,
    DeploymentReplicasStatus,
    DeploymentStatus,
    RecreateStrategy,
    RollingUpdateStrategy,
    StrategyConfig,
    StrategyType,
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

DEPLOYMENT_VERSIONS = VersionDispatcher(
    kind="Deployment",
    default_version=kube.AppsV1Deployment.API_VERSION,
    canonical_type=kube.AppsV1Deployment,
)


def from_kube_deployment(obj: Any, compiler: Optional[ExpressionCompiler] = None) -> DeploymentManifest:
    """Convert a versioned kube Deployment to a DeploymentManifest.

    Args:
        obj: AppsV1Deployment, AppsV1Beta2Deployment, AppsV1Beta1Deployment
             or ExtensionsV1Beta1Deployment
        compiler: Expression compiler for set-based selectors
                  (default: SelectorExpressionCompiler)

    Returns:
        New DeploymentManifest

    Raises:
        UnknownVersion: If obj is not a supported Deployment type
        VersionMismatch: If obj.api_version disagrees with its type
        UnrecognizedEnumValue: For unknown strategy or condition values
        ExpressionError: If the selector cannot be compiled
    """
    convert = DEPLOYMENT_VERSIONS.route(obj)
    return convert(obj, SelectorReconciler(compiler or SelectorExpressionCompiler()))


def to_kube_deployment(
    deployment: DeploymentManifest,
    compiler: Optional[ExpressionCompiler] = None,
    serializer: Optional[Serializer] = None,
) -> Any:
    """Convert a DeploymentManifest to the kube Deployment version it declares.

    Args:
        deployment: Shorthand Deployment; ``identity.version`` selects the
                    output version (empty means apps/v1)
        compiler: Expression compiler (default: SelectorExpressionCompiler)
        serializer: Generic (de)serializer (default: YamlSerializer)

    Returns:
        Versioned kube Deployment

    Raises:
        UnsupportedVersion: If the declared version is not supported
        MissingRequiredField: If the pod template is missing
        UnrecognizedEnumValue: For values outside the enum tables
        SerializationError: If the canonical round trip fails
    """
    version = DEPLOYMENT_VERSIONS.resolve_version(deployment.identity.version)
    reconciler = SelectorReconciler(compiler or SelectorExpressionCompiler())
    canonical = _to_canonical_deployment(deployment, version, reconciler)
    return DEPLOYMENT_VERSIONS.specialize(canonical, serializer or YamlSerializer())


def _deployment_from_kube(kube_deployment: Any, reconciler: SelectorReconciler) -> DeploymentManifest:
    identity, labels, annotations = identity_from_kube(kube_deployment)
    spec = kube_deployment.spec

    # Selector and template handling is identical to ReplicaSet.
    selector, template_labels, template_metadata, pod_template = template_from_kube(
        reconciler, spec.selector, spec.template
    )

    strategy = _strategy_from_kube(spec.strategy)

    status = _status_from_kube(kube_deployment.status)

    logger.debug("Converted kube Deployment %s (%s)", identity.name, identity.version)
    return DeploymentManifest(
        identity=identity,
        labels=labels,
        annotations=annotations,
        replicas=spec.replicas,
        selector=selector,
        template_labels=template_labels,
        template_metadata=template_metadata,
        pod_template=pod_template,
        min_ready_seconds=spec.min_ready_seconds,
        strategy=strategy,
        revision_history_limit=spec.revision_history_limit,
        progress_deadline_seconds=spec.progress_deadline_seconds,
        paused=spec.paused,
        status=status,
    )


for _schema in (
    kube.AppsV1Deployment,
    kube.AppsV1Beta2Deployment,
    kube.AppsV1Beta1Deployment,
    kube.ExtensionsV1Beta1Deployment,
):
    DEPLOYMENT_VERSIONS.register(_schema, _deployment_from_kube)


def _strategy_from_kube(strategy: kube.DeploymentStrategy) -> Optional[StrategyConfig]:
    strategy_type = DEPLOYMENT_STRATEGY_TYPES.from_kube(strategy.type)
    if strategy_type == StrategyType.RECREATE:
        return RecreateStrategy()

    rolling_update = strategy.rolling_update
    if strategy_type is None and rolling_update is None:
        return None
    if rolling_update is None:
        return RollingUpdateStrategy()
    return RollingUpdateStrategy(
        max_unavailable=rolling_update.max_unavailable,
        max_surge=rolling_update.max_surge,
    )


def _strategy_to_kube(strategy: Optional[StrategyConfig]) -> kube.DeploymentStrategy:
    if strategy is None:
        return kube.DeploymentStrategy()

    if isinstance(strategy, RecreateStrategy):
        return kube.DeploymentStrategy(type=DEPLOYMENT_STRATEGY_TYPES.to_kube(StrategyType.RECREATE))

    rolling_update = None
    if strategy.max_unavailable is not None or strategy.max_surge is not None:
        rolling_update = kube.RollingUpdateDeployment(
            max_unavailable=strategy.max_unavailable,
            max_surge=strategy.max_surge,
        )
    return kube.DeploymentStrategy(
        type=DEPLOYMENT_STRATEGY_TYPES.to_kube(StrategyType.ROLLING_UPDATE),
        rolling_update=rolling_update,
    )


def _status_from_kube(status: kube.DeploymentStatus) -> DeploymentStatus:
    return DeploymentStatus(
        observed_generation=status.observed_generation,
        replicas=DeploymentReplicasStatus(
            total=status.replicas,
            updated=status.updated_replicas,
            ready=status.ready_replicas,
            available=status.available_replicas,
            unavailable=status.unavailable_replicas,
        ),
        conditions=conditions_from_kube(
            status.conditions, DEPLOYMENT_CONDITION_TYPES, "deployment conditions"
        ),
        collision_count=status.collision_count,
    )


def _status_to_kube(status: DeploymentStatus) -> kube.DeploymentStatus:
    return kube.DeploymentStatus(
        observed_generation=status.observed_generation,
        replicas=status.replicas.total,
        updated_replicas=status.replicas.updated,
        ready_replicas=status.replicas.ready,
        available_replicas=status.replicas.available,
        unavailable_replicas=status.replicas.unavailable,
        conditions=conditions_to_kube(
            status.conditions,
            DEPLOYMENT_CONDITION_TYPES,
            "deployment conditions",
            kube.DeploymentCondition,
        ),
        collision_count=status.collision_count,
    )


def _to_canonical_deployment(
    deployment: DeploymentManifest,
    version: str,
    reconciler: SelectorReconciler,
) -> kube.AppsV1Deployment:
    """Build the canonical apps/v1 Deployment declaring ``version``."""
    kube_deployment = DEPLOYMENT_VERSIONS.canonical(version)
    kube_deployment.metadata = meta_from_identity(
        deployment.identity, deployment.labels, deployment.annotations
    )

    spec = kube_deployment.spec
    spec.replicas = deployment.replicas

    spec.selector, spec.template = template_to_kube(reconciler, deployment)

    spec.strategy = _strategy_to_kube(deployment.strategy)
    spec.min_ready_seconds = deployment.min_ready_seconds
    spec.revision_history_limit = deployment.revision_history_limit
    spec.paused = deployment.paused
    spec.progress_deadline_seconds = deployment.progress_deadline_seconds

    kube_deployment.status = _status_to_kube(deployment.status)
    return kube_deployment
