"""
Schema definitions shared by the conversion core.

Shorthand manifests, the kube-side label selector, and the protocols for the
expression compiler and generic (de)serializer.
"""

from mantle.core.schema.codec import ExpressionCompiler, Serializer
from mantle.core.schema.manifest import (
    Condition,
    ConditionStatus,
    DeploymentConditionType,
    DeploymentManifest,
    DeploymentReplicasStatus,
    DeploymentStatus,
    FinalizerName,
    Identity,
    NamespaceManifest,
    NamespacePhase,
    RecreateStrategy,
    ReplicaSetConditionType,
    ReplicaSetManifest,
    ReplicaSetReplicasStatus,
    ReplicaSetStatus,
    RollingUpdateStrategy,
    SecretManifest,
    SecretType,
    StrategyType,
    TemplateMetadata,
    WorkloadManifest,
)
from mantle.core.schema.selector import (
    ExplicitSelector,
    ExpressionSelector,
    LabelSelector,
    LabelSelectorRequirement,
    Selector,
)

__all__ = [
    "Condition",
    "ConditionStatus",
    "DeploymentConditionType",
    "DeploymentManifest",
    "DeploymentReplicasStatus",
    "DeploymentStatus",
    "ExplicitSelector",
    "ExpressionCompiler",
    "ExpressionSelector",
    "FinalizerName",
    "Identity",
    "LabelSelector",
    "LabelSelectorRequirement",
    "NamespaceManifest",
    "NamespacePhase",
    "RecreateStrategy",
    "ReplicaSetConditionType",
    "ReplicaSetManifest",
    "ReplicaSetReplicasStatus",
    "ReplicaSetStatus",
    "RollingUpdateStrategy",
    "SecretManifest",
    "SecretType",
    "Selector",
    "Serializer",
    "StrategyType",
    "TemplateMetadata",
    "WorkloadManifest",
]
