"""Selector, pod template and condition handling shared by ReplicaSet-style kinds.

Deployment and ReplicaSet carry the same selector/template shape and the same
condition list layout; both converters go through these functions so the
reconciliation rules and error context are identical for every kind.
"""

import copy
from typing import Any, Callable, List, Optional, Tuple

from mantle.core.enums import CONDITION_STATUS, EnumTable
from mantle.core.errors import MissingRequiredField, contextualize
from mantle.core.reconciler import SelectorReconciler
from mantle.core.schema.manifest import Condition, TemplateMetadata, WorkloadManifest
from mantle.core.schema.selector import LabelSelector, LabelSet, Selector
from mantle.k8s.types import ObjectMeta, PodTemplateSpec
from mantle.k8s.utils import copy_map


def template_from_kube(
    reconciler: SelectorReconciler,
    selector: Optional[LabelSelector],
    template: PodTemplateSpec,
) -> Tuple[Selector, Optional[LabelSet], Optional[TemplateMetadata], Optional[dict]]:
    """Split a kube selector and pod template into shorthand fields.

    Args:
        reconciler: Selector reconciler
        selector: spec.selector
        template: spec.template

    Returns:
        Tuple of (selector, template label override, template metadata,
        pod spec payload). Template metadata is None when the template has
        nothing besides its labels.
    """
    shorthand_selector, override = reconciler.from_kube(selector, template.metadata.labels)

    meta = template.metadata
    template_metadata = None
    if meta.name or meta.namespace or meta.annotations is not None:
        template_metadata = TemplateMetadata(
            name=meta.name,
            namespace=meta.namespace,
            annotations=copy_map(meta.annotations),
        )

    return shorthand_selector, override, template_metadata, copy.deepcopy(template.spec)


def template_to_kube(
    reconciler: SelectorReconciler,
    manifest: WorkloadManifest,
) -> Tuple[Optional[LabelSelector], PodTemplateSpec]:
    """Rebuild a kube selector and pod template from shorthand fields.

    Raises:
        MissingRequiredField: If the manifest has no pod template at all
        ExpressionError: If the selector text cannot be parsed
    """
    kube_selector, labels = reconciler.to_kube(manifest.selector, manifest.template_labels)

    template_metadata = manifest.template_metadata
    if template_metadata is None and manifest.pod_template is None:
        raise MissingRequiredField("pod template")

    meta = ObjectMeta()
    if template_metadata is not None:
        meta.name = template_metadata.name
        meta.namespace = template_metadata.namespace
        meta.annotations = copy_map(template_metadata.annotations)
        # Nothing derives the labels; keep the template's own.
        if labels is None:
            labels = copy_map(template_metadata.labels)
    meta.labels = labels

    return kube_selector, PodTemplateSpec(metadata=meta, spec=copy.deepcopy(manifest.pod_template))


def conditions_from_kube(
    kube_conditions: Optional[List[Any]],
    type_table: EnumTable,
    location: str,
) -> Optional[List[Condition]]:
    """Convert kube status conditions, preserving their order.

    Args:
        kube_conditions: Kube condition objects, or None
        type_table: Enum table for the condition ``type`` field
        location: Context prefix, e.g. "deployment conditions"

    Raises:
        UnrecognizedEnumValue: With ``location[i]`` context
    """
    if not kube_conditions:
        return None

    conditions = []
    for i, kube_condition in enumerate(kube_conditions):
        with contextualize("%s[%d]", location, i):
            conditions.append(Condition(
                type=type_table.from_kube(kube_condition.type),
                status=CONDITION_STATUS.from_kube(kube_condition.status),
                last_update_time=getattr(kube_condition, "last_update_time", None),
                last_transition_time=kube_condition.last_transition_time,
                reason=kube_condition.reason,
                message=kube_condition.message,
            ))
    return conditions


def conditions_to_kube(
    conditions: Optional[List[Condition]],
    type_table: EnumTable,
    location: str,
    build: Callable[..., Any],
) -> Optional[List[Any]]:
    """Convert shorthand conditions back to kube condition objects.

    Args:
        conditions: Shorthand conditions, or None
        type_table: Enum table for the condition ``type`` field
        location: Context prefix, e.g. "deployment conditions"
        build: Called with the kube condition fields as keyword arguments

    Raises:
        UnrecognizedEnumValue: With ``location[i]`` context
    """
    if not conditions:
        return None

    kube_conditions = []
    for i, condition in enumerate(conditions):
        with contextualize("%s[%d]", location, i):
            kube_conditions.append(build(
                type=type_table.to_kube(condition.type),
                status=CONDITION_STATUS.to_kube(condition.status),
                last_update_time=condition.last_update_time,
                last_transition_time=condition.last_transition_time,
                reason=condition.reason,
                message=condition.message,
            ))
    return kube_conditions
