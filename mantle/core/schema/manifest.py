"""Shorthand (intermediate) manifest dataclasses.

These are what the resource converters produce from versioned kube objects
and consume when converting back. Instances are built fresh per conversion
call and hold no cross-call state.

Enumerated fields use ``str`` enums whose values are the shorthand
spellings, e.g. ``DeploymentConditionType.REPLICA_FAILURE == "replica-failure"``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from mantle.core.schema.selector import LabelSet, Selector

IntOrString = Union[int, str]


class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class DeploymentConditionType(str, Enum):
    AVAILABLE = "available"
    PROGRESSING = "progressing"
    REPLICA_FAILURE = "replica-failure"


class ReplicaSetConditionType(str, Enum):
    REPLICA_FAILURE = "replica-failure"


class StrategyType(str, Enum):
    RECREATE = "recreate"
    ROLLING_UPDATE = "rolling-update"


class SecretType(str, Enum):
    OPAQUE = "opaque"
    SERVICE_ACCOUNT_TOKEN = "service-account-token"
    DOCKERCFG = "dockercfg"
    DOCKER_CONFIG_JSON = "docker-config-json"
    BASIC_AUTH = "basic-auth"
    SSH_AUTH = "ssh-auth"
    TLS = "tls"
    BOOTSTRAP_TOKEN = "bootstrap-token"


class FinalizerName(str, Enum):
    KUBERNETES = "kubernetes"


class NamespacePhase(str, Enum):
    ACTIVE = "active"
    TERMINATING = "terminating"


@dataclass
class Identity:
    """Who a manifest is and which wire schema it targets.

    Attributes:
        name: metadata.name
        namespace: metadata.namespace
        cluster: metadata.clusterName
        version: Declared apiVersion. Selects the output schema and must
                 agree with the concrete input type.
    """

    name: str = ""
    namespace: str = ""
    cluster: str = ""
    version: str = ""


@dataclass
class TemplateMetadata:
    """Pod template metadata other than what the selector already carries.

    ``labels`` is only consulted on output when neither the selector nor a
    template label override supplies the template's labels.
    """

    name: str = ""
    namespace: str = ""
    labels: Optional[LabelSet] = None
    annotations: Optional[Dict[str, str]] = None


@dataclass
class Condition:
    """Controller status condition. Order in a list is preserved verbatim."""

    type: Enum
    status: ConditionStatus
    last_update_time: Optional[str] = None
    last_transition_time: Optional[str] = None
    reason: str = ""
    message: str = ""


@dataclass
class RecreateStrategy:
    """Kill all pods before creating new ones."""


@dataclass
class RollingUpdateStrategy:
    """Replace pods gradually. Both bounds are absolute counts or percentages."""

    max_unavailable: Optional[IntOrString] = None
    max_surge: Optional[IntOrString] = None


StrategyConfig = Union[RecreateStrategy, RollingUpdateStrategy]


@dataclass
class DeploymentReplicasStatus:
    total: int = 0
    updated: int = 0
    ready: int = 0
    available: int = 0
    unavailable: int = 0


@dataclass
class DeploymentStatus:
    observed_generation: int = 0
    replicas: DeploymentReplicasStatus = field(default_factory=DeploymentReplicasStatus)
    conditions: Optional[List[Condition]] = None
    collision_count: Optional[int] = None


@dataclass
class ReplicaSetReplicasStatus:
    total: int = 0
    fully_labeled: int = 0
    ready: int = 0
    available: int = 0


@dataclass
class ReplicaSetStatus:
    observed_generation: int = 0
    replicas: ReplicaSetReplicasStatus = field(default_factory=ReplicaSetReplicasStatus)
    conditions: Optional[List[Condition]] = None


@dataclass
class WorkloadManifest:
    """Fields shared by every ReplicaSet-style controller.

    Attributes:
        identity: Name, namespace, cluster and declared version
        labels: Resource labels
        annotations: Resource annotations
        replicas: Desired replica count (None when unset)
        selector: Collapsed selector, see :class:`SelectorReconciler`
        template_labels: Pod template labels, recorded only when they cannot
                         be derived from ``selector``
        template_metadata: Remaining pod template metadata
        pod_template: Opaque pod spec payload
        min_ready_seconds: spec.minReadySeconds
    """

    identity: Identity = field(default_factory=Identity)
    labels: Optional[LabelSet] = None
    annotations: Optional[Dict[str, str]] = None
    replicas: Optional[int] = None
    selector: Optional[Selector] = None
    template_labels: Optional[LabelSet] = None
    template_metadata: Optional[TemplateMetadata] = None
    pod_template: Optional[Dict[str, Any]] = None
    min_ready_seconds: int = 0


@dataclass
class DeploymentManifest(WorkloadManifest):
    strategy: Optional[StrategyConfig] = None
    revision_history_limit: Optional[int] = None
    progress_deadline_seconds: Optional[int] = None
    paused: bool = False
    status: DeploymentStatus = field(default_factory=DeploymentStatus)


@dataclass
class ReplicaSetManifest(WorkloadManifest):
    status: ReplicaSetStatus = field(default_factory=ReplicaSetStatus)


@dataclass
class NamespaceManifest:
    identity: Identity = field(default_factory=Identity)
    labels: Optional[LabelSet] = None
    annotations: Optional[Dict[str, str]] = None
    finalizers: Optional[List[FinalizerName]] = None
    phase: Optional[NamespacePhase] = None


@dataclass
class SecretManifest:
    identity: Identity = field(default_factory=Identity)
    labels: Optional[LabelSet] = None
    annotations: Optional[Dict[str, str]] = None
    data: Optional[Dict[str, bytes]] = None
    string_data: Optional[Dict[str, str]] = None
    secret_type: Optional[SecretType] = None
