"""Concrete versioned Kubernetes wire schemas.

Each supported (apiVersion, kind) pair is its own dataclass, so an object's
Python type is its schema version. Versions of the same kind share field
layout through a common base and differ in their ``API_VERSION`` constant.

Every schema knows how to turn itself into a plain wire dict (camelCase
keys, unset fields omitted) and back; :class:`YamlSerializer` uses that
pair for the canonical round trip.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union

from mantle.core.schema.selector import LabelSelector

IntOrString = Union[int, str]


def _put(result: Dict[str, Any], key: str, value: Any, default: Any = None) -> None:
    """Set result[key] unless value is None or equal to the field default."""
    if value is None or (default is not None and value == default):
        return
    result[key] = value


def _copy_map(value: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    return dict(value) if value is not None else None


@dataclass
class ObjectMeta:
    name: str = ""
    namespace: str = ""
    cluster_name: str = ""
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "name", self.name, "")
        _put(result, "namespace", self.namespace, "")
        _put(result, "clusterName", self.cluster_name, "")
        _put(result, "labels", _copy_map(self.labels))
        _put(result, "annotations", _copy_map(self.annotations))
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ObjectMeta":
        data = data or {}
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            cluster_name=data.get("clusterName", ""),
            labels=_copy_map(data.get("labels")),
            annotations=_copy_map(data.get("annotations")),
        )


@dataclass
class PodTemplateSpec:
    """Pod template. ``spec`` is carried as an opaque payload."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"metadata": self.metadata.to_dict()}
        _put(result, "spec", self.spec)
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PodTemplateSpec":
        data = data or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=_copy_map(data.get("spec")),
        )


@dataclass
class KubeObject:
    """Fields every top-level kube object carries."""

    API_VERSION: ClassVar[str] = ""
    KIND: ClassVar[str] = ""

    api_version: str = ""
    kind: str = ""
    metadata: ObjectMeta = field(default_factory=ObjectMeta)

    def __post_init__(self) -> None:
        # Unset type fields default to the schema's own
        if not self.api_version:
            self.api_version = self.API_VERSION
        if not self.kind:
            self.kind = self.KIND

    def _header(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def _header_fields(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "api_version": data.get("apiVersion", ""),
            "kind": data.get("kind", ""),
            "metadata": ObjectMeta.from_dict(data.get("metadata")),
        }


# Deployment

@dataclass
class RollingUpdateDeployment:
    max_unavailable: Optional[IntOrString] = None
    max_surge: Optional[IntOrString] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "maxUnavailable", self.max_unavailable)
        _put(result, "maxSurge", self.max_surge)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RollingUpdateDeployment":
        return cls(max_unavailable=data.get("maxUnavailable"), max_surge=data.get("maxSurge"))


@dataclass
class DeploymentStrategy:
    type: str = ""
    rolling_update: Optional[RollingUpdateDeployment] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "type", self.type, "")
        if self.rolling_update is not None:
            result["rollingUpdate"] = self.rolling_update.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DeploymentStrategy":
        data = data or {}
        rolling_update = data.get("rollingUpdate")
        return cls(
            type=data.get("type", ""),
            rolling_update=(
                RollingUpdateDeployment.from_dict(rolling_update)
                if rolling_update is not None
                else None
            ),
        )


@dataclass
class DeploymentCondition:
    type: str = ""
    status: str = ""
    last_update_time: Optional[str] = None
    last_transition_time: Optional[str] = None
    reason: str = ""
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type, "status": self.status}
        _put(result, "lastUpdateTime", self.last_update_time)
        _put(result, "lastTransitionTime", self.last_transition_time)
        _put(result, "reason", self.reason, "")
        _put(result, "message", self.message, "")
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeploymentCondition":
        return cls(
            type=data.get("type", ""),
            status=data.get("status", ""),
            last_update_time=data.get("lastUpdateTime"),
            last_transition_time=data.get("lastTransitionTime"),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
        )


@dataclass
class DeploymentStatus:
    observed_generation: int = 0
    replicas: int = 0
    updated_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    unavailable_replicas: int = 0
    conditions: Optional[List[DeploymentCondition]] = None
    collision_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "observedGeneration", self.observed_generation, 0)
        _put(result, "replicas", self.replicas, 0)
        _put(result, "updatedReplicas", self.updated_replicas, 0)
        _put(result, "readyReplicas", self.ready_replicas, 0)
        _put(result, "availableReplicas", self.available_replicas, 0)
        _put(result, "unavailableReplicas", self.unavailable_replicas, 0)
        if self.conditions is not None:
            result["conditions"] = [c.to_dict() for c in self.conditions]
        _put(result, "collisionCount", self.collision_count)
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DeploymentStatus":
        data = data or {}
        conditions = data.get("conditions")
        return cls(
            observed_generation=data.get("observedGeneration", 0),
            replicas=data.get("replicas", 0),
            updated_replicas=data.get("updatedReplicas", 0),
            ready_replicas=data.get("readyReplicas", 0),
            available_replicas=data.get("availableReplicas", 0),
            unavailable_replicas=data.get("unavailableReplicas", 0),
            conditions=(
                [DeploymentCondition.from_dict(c) for c in conditions]
                if conditions is not None
                else None
            ),
            collision_count=data.get("collisionCount"),
        )


@dataclass
class DeploymentSpec:
    replicas: Optional[int] = None
    selector: Optional[LabelSelector] = None
    template: PodTemplateSpec = field(default_factory=PodTemplateSpec)
    strategy: DeploymentStrategy = field(default_factory=DeploymentStrategy)
    min_ready_seconds: int = 0
    revision_history_limit: Optional[int] = None
    paused: bool = False
    progress_deadline_seconds: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "replicas", self.replicas)
        if self.selector is not None:
            result["selector"] = self.selector.to_dict()
        result["template"] = self.template.to_dict()
        strategy = self.strategy.to_dict()
        if strategy:
            result["strategy"] = strategy
        _put(result, "minReadySeconds", self.min_ready_seconds, 0)
        _put(result, "revisionHistoryLimit", self.revision_history_limit)
        if self.paused:
            result["paused"] = True
        _put(result, "progressDeadlineSeconds", self.progress_deadline_seconds)
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DeploymentSpec":
        data = data or {}
        selector = data.get("selector")
        return cls(
            replicas=data.get("replicas"),
            selector=LabelSelector.from_dict(selector) if selector is not None else None,
            template=PodTemplateSpec.from_dict(data.get("template")),
            strategy=DeploymentStrategy.from_dict(data.get("strategy")),
            min_ready_seconds=data.get("minReadySeconds", 0),
            revision_history_limit=data.get("revisionHistoryLimit"),
            paused=bool(data.get("paused", False)),
            progress_deadline_seconds=data.get("progressDeadlineSeconds"),
        )


@dataclass
class _Deployment(KubeObject):
    KIND: ClassVar[str] = "Deployment"

    spec: DeploymentSpec = field(default_factory=DeploymentSpec)
    status: DeploymentStatus = field(default_factory=DeploymentStatus)

    def to_dict(self) -> Dict[str, Any]:
        result = self._header()
        result["spec"] = self.spec.to_dict()
        status = self.status.to_dict()
        if status:
            result["status"] = status
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        return cls(
            spec=DeploymentSpec.from_dict(data.get("spec")),
            status=DeploymentStatus.from_dict(data.get("status")),
            **cls._header_fields(data),
        )


@dataclass
class AppsV1Deployment(_Deployment):
    API_VERSION: ClassVar[str] = "apps/v1"


@dataclass
class AppsV1Beta2Deployment(_Deployment):
    API_VERSION: ClassVar[str] = "apps/v1beta2"


@dataclass
class AppsV1Beta1Deployment(_Deployment):
    API_VERSION: ClassVar[str] = "apps/v1beta1"


@dataclass
class ExtensionsV1Beta1Deployment(_Deployment):
    API_VERSION: ClassVar[str] = "extensions/v1beta1"


# ReplicaSet

@dataclass
class ReplicaSetCondition:
    type: str = ""
    status: str = ""
    last_transition_time: Optional[str] = None
    reason: str = ""
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type, "status": self.status}
        _put(result, "lastTransitionTime", self.last_transition_time)
        _put(result, "reason", self.reason, "")
        _put(result, "message", self.message, "")
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReplicaSetCondition":
        return cls(
            type=data.get("type", ""),
            status=data.get("status", ""),
            last_transition_time=data.get("lastTransitionTime"),
            reason=data.get("reason", ""),
            message=data.get("message", ""),
        )


@dataclass
class ReplicaSetStatus:
    replicas: int = 0
    fully_labeled_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    observed_generation: int = 0
    conditions: Optional[List[ReplicaSetCondition]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "replicas", self.replicas, 0)
        _put(result, "fullyLabeledReplicas", self.fully_labeled_replicas, 0)
        _put(result, "readyReplicas", self.ready_replicas, 0)
        _put(result, "availableReplicas", self.available_replicas, 0)
        _put(result, "observedGeneration", self.observed_generation, 0)
        if self.conditions is not None:
            result["conditions"] = [c.to_dict() for c in self.conditions]
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ReplicaSetStatus":
        data = data or {}
        conditions = data.get("conditions")
        return cls(
            replicas=data.get("replicas", 0),
            fully_labeled_replicas=data.get("fullyLabeledReplicas", 0),
            ready_replicas=data.get("readyReplicas", 0),
            available_replicas=data.get("availableReplicas", 0),
            observed_generation=data.get("observedGeneration", 0),
            conditions=(
                [ReplicaSetCondition.from_dict(c) for c in conditions]
                if conditions is not None
                else None
            ),
        )


@dataclass
class ReplicaSetSpec:
    replicas: Optional[int] = None
    min_ready_seconds: int = 0
    selector: Optional[LabelSelector] = None
    template: PodTemplateSpec = field(default_factory=PodTemplateSpec)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "replicas", self.replicas)
        _put(result, "minReadySeconds", self.min_ready_seconds, 0)
        if self.selector is not None:
            result["selector"] = self.selector.to_dict()
        result["template"] = self.template.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ReplicaSetSpec":
        data = data or {}
        selector = data.get("selector")
        return cls(
            replicas=data.get("replicas"),
            min_ready_seconds=data.get("minReadySeconds", 0),
            selector=LabelSelector.from_dict(selector) if selector is not None else None,
            template=PodTemplateSpec.from_dict(data.get("template")),
        )


@dataclass
class _ReplicaSet(KubeObject):
    KIND: ClassVar[str] = "ReplicaSet"

    spec: ReplicaSetSpec = field(default_factory=ReplicaSetSpec)
    status: ReplicaSetStatus = field(default_factory=ReplicaSetStatus)

    def to_dict(self) -> Dict[str, Any]:
        result = self._header()
        result["spec"] = self.spec.to_dict()
        status = self.status.to_dict()
        if status:
            result["status"] = status
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        return cls(
            spec=ReplicaSetSpec.from_dict(data.get("spec")),
            status=ReplicaSetStatus.from_dict(data.get("status")),
            **cls._header_fields(data),
        )


@dataclass
class AppsV1ReplicaSet(_ReplicaSet):
    API_VERSION: ClassVar[str] = "apps/v1"


@dataclass
class AppsV1Beta2ReplicaSet(_ReplicaSet):
    API_VERSION: ClassVar[str] = "apps/v1beta2"


@dataclass
class ExtensionsV1Beta1ReplicaSet(_ReplicaSet):
    API_VERSION: ClassVar[str] = "extensions/v1beta1"


# Namespace

@dataclass
class CoreV1Namespace(KubeObject):
    API_VERSION: ClassVar[str] = "v1"
    KIND: ClassVar[str] = "Namespace"

    finalizers: Optional[List[str]] = None
    phase: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result = self._header()
        if self.finalizers is not None:
            result["spec"] = {"finalizers": list(self.finalizers)}
        if self.phase:
            result["status"] = {"phase": self.phase}
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CoreV1Namespace":
        spec = data.get("spec") or {}
        status = data.get("status") or {}
        finalizers = spec.get("finalizers")
        return cls(
            finalizers=list(finalizers) if finalizers is not None else None,
            phase=status.get("phase", ""),
            **cls._header_fields(data),
        )


# Secret

@dataclass
class CoreV1Secret(KubeObject):
    API_VERSION: ClassVar[str] = "v1"
    KIND: ClassVar[str] = "Secret"

    data: Optional[Dict[str, bytes]] = None
    string_data: Optional[Dict[str, str]] = None
    type: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result = self._header()
        if self.data is not None:
            result["data"] = {
                key: base64.b64encode(value).decode("ascii")
                for key, value in self.data.items()
            }
        _put(result, "stringData", _copy_map(self.string_data))
        _put(result, "type", self.type, "")
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CoreV1Secret":
        encoded = data.get("data")
        decoded = None
        if encoded is not None:
            try:
                decoded = {key: base64.b64decode(value or "", validate=True) for key, value in encoded.items()}
            except binascii.Error:
                raise ValueError("secret data is not valid base64") from None
        return cls(
            data=decoded,
            string_data=_copy_map(data.get("stringData")),
            type=data.get("type", ""),
            **cls._header_fields(data),
        )


ALL_SCHEMAS: Tuple[Type[KubeObject], ...] = (
    AppsV1Deployment,
    AppsV1Beta2Deployment,
    AppsV1Beta1Deployment,
    ExtensionsV1Beta1Deployment,
    AppsV1ReplicaSet,
    AppsV1Beta2ReplicaSet,
    ExtensionsV1Beta1ReplicaSet,
    CoreV1Namespace,
    CoreV1Secret,
)

KUBE_SCHEMAS: Dict[Tuple[str, str], Type[KubeObject]] = {
    (schema.API_VERSION, schema.KIND): schema for schema in ALL_SCHEMAS
}
