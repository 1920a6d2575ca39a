"""Kubernetes schemas and resource converters for Mantle.

This package provides:
- Versioned wire schemas (one dataclass per apiVersion/kind)
- YamlSerializer: generic (de)serializer for the canonical round trip
- SelectorExpressionCompiler: kubectl selector-string expression compiler
- from_kube_* / to_kube_* converters for Deployment, ReplicaSet,
  Namespace and Secret
"""

from mantle.k8s.deployment import from_kube_deployment, to_kube_deployment
from mantle.k8s.expressions import SelectorExpressionCompiler
from mantle.k8s.namespace import from_kube_namespace, to_kube_namespace
from mantle.k8s.replicaset import from_kube_replica_set, to_kube_replica_set
from mantle.k8s.secret import from_kube_secret, to_kube_secret
from mantle.k8s.serializer import YamlSerializer

__all__ = [
    "SelectorExpressionCompiler",
    "YamlSerializer",
    "from_kube_deployment",
    "from_kube_namespace",
    "from_kube_replica_set",
    "from_kube_secret",
    "to_kube_deployment",
    "to_kube_namespace",
    "to_kube_replica_set",
    "to_kube_secret",
]
