"""
Mantle: lossless Kubernetes manifest conversion

Converts versioned Kubernetes workload manifests (Deployment, ReplicaSet,
Namespace, Secret) into a compact shorthand representation and back,
routing every outbound conversion through one canonical schema version.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
