"""Bidirectional mapping tables for closed enumerations.

Each table lists every legal kube wire value next to its shorthand member,
once. The reverse direction is derived from the same pairs, so the two
directions cannot drift apart. Tables are read-only after import.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from mantle.core.errors import UnrecognizedEnumValue
from mantle.core.schema.manifest import (
    ConditionStatus,
    DeploymentConditionType,
    FinalizerName,
    NamespacePhase,
    ReplicaSetConditionType,
    SecretType,
    StrategyType,
)


class EnumTable:
    """One-to-one mapping between kube strings and shorthand enum members.

    The empty value passes through in both directions: ``""`` from kube
    becomes ``None`` and ``None``/``""`` becomes ``""``. Anything else not in
    the table raises :class:`UnrecognizedEnumValue` naming ``field``.

    Attributes:
        field: Human-readable enumeration name used in error messages
    """

    def __init__(self, field: str, pairs: Mapping[str, Enum]) -> None:
        """Build both directions of the table.

        Args:
            field: Enumeration name, e.g. "deployment condition type"
            pairs: Kube wire value -> shorthand member

        Raises:
            ValueError: If two kube values map to the same member
        """
        self.field = field
        self._to_short = MappingProxyType(dict(pairs))
        self._to_kube = MappingProxyType({member: raw for raw, member in pairs.items()})
        if len(self._to_kube) != len(self._to_short):
            raise ValueError(f"{field} table is not one-to-one")

    def from_kube(self, raw: str) -> Optional[Enum]:
        """Map a kube wire value to its shorthand member."""
        if not raw:
            return None
        try:
            return self._to_short[raw]
        except KeyError:
            raise UnrecognizedEnumValue(self.field, raw) from None

    def to_kube(self, value: Any) -> str:
        """Map a shorthand member (or its string value) to the kube wire value."""
        if value is None or value == "":
            return ""
        try:
            return self._to_kube[value]
        except (KeyError, TypeError):
            raise UnrecognizedEnumValue(self.field, value) from None

    def kube_values(self) -> Tuple[str, ...]:
        return tuple(self._to_short)

    def short_values(self) -> Tuple[Enum, ...]:
        return tuple(self._to_kube)


CONDITION_STATUS = EnumTable("condition status", {
    "True": ConditionStatus.TRUE,
    "False": ConditionStatus.FALSE,
    "Unknown": ConditionStatus.UNKNOWN,
})

DEPLOYMENT_CONDITION_TYPES = EnumTable("deployment condition type", {
    "Available": DeploymentConditionType.AVAILABLE,
    "Progressing": DeploymentConditionType.PROGRESSING,
    "ReplicaFailure": DeploymentConditionType.REPLICA_FAILURE,
})

REPLICA_SET_CONDITION_TYPES = EnumTable("replica set condition type", {
    "ReplicaFailure": ReplicaSetConditionType.REPLICA_FAILURE,
})

DEPLOYMENT_STRATEGY_TYPES = EnumTable("deployment strategy type", {
    "Recreate": StrategyType.RECREATE,
    "RollingUpdate": StrategyType.ROLLING_UPDATE,
})

SECRET_TYPES = EnumTable("secret type", {
    "Opaque": SecretType.OPAQUE,
    "kubernetes.io/service-account-token": SecretType.SERVICE_ACCOUNT_TOKEN,
    "kubernetes.io/dockercfg": SecretType.DOCKERCFG,
    "kubernetes.io/dockerconfigjson": SecretType.DOCKER_CONFIG_JSON,
    "kubernetes.io/basic-auth": SecretType.BASIC_AUTH,
    "kubernetes.io/ssh-auth": SecretType.SSH_AUTH,
    "kubernetes.io/tls": SecretType.TLS,
    "bootstrap.kubernetes.io/token": SecretType.BOOTSTRAP_TOKEN,
})

FINALIZERS = EnumTable("finalizer", {
    "kubernetes": FinalizerName.KUBERNETES,
})

NAMESPACE_PHASES = EnumTable("namespace phase", {
    "Active": NamespacePhase.ACTIVE,
    "Terminating": NamespacePhase.TERMINATING,
})

ALL_TABLES = (
    CONDITION_STATUS,
    DEPLOYMENT_CONDITION_TYPES,
    REPLICA_SET_CONDITION_TYPES,
    DEPLOYMENT_STRATEGY_TYPES,
    SECRET_TYPES,
    FINALIZERS,
    NAMESPACE_PHASES,
)
