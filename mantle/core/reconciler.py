"""Selector / pod-template label reconciliation.

Every ReplicaSet-style controller carries a selector and a pod template whose
labels must satisfy it. The shorthand form stores the label set once when the
two agree and keeps both only when they do not. This module is the single
place that decides how to collapse them and how to expand them again.
"""

import logging
from typing import Optional, Tuple

from mantle.core.schema.codec import ExpressionCompiler
from mantle.core.schema.selector import (
    ExplicitSelector,
    ExpressionSelector,
    LabelSelector,
    LabelSet,
    Selector,
)

logger = logging.getLogger(__name__)


def _copy_labels(labels: Optional[LabelSet]) -> Optional[LabelSet]:
    return dict(labels) if labels is not None else None


class SelectorReconciler:
    """Collapse and expand selector/template label pairs.

    Round-trip law: for any kube (selector, template labels) pair,
    ``to_kube(*from_kube(selector, labels))`` yields a selector with the same
    matchLabels and matchExpressions content and the same template labels.
    For label-only selectors an absent label map and an empty one are the
    same selection, so either may come back as ``{}``.

    Args:
        compiler: Expression compiler used for selectors with match-expressions
    """

    def __init__(self, compiler: ExpressionCompiler) -> None:
        self.compiler = compiler

    def from_kube(
        self,
        selector: Optional[LabelSelector],
        template_labels: Optional[LabelSet],
    ) -> Tuple[Selector, Optional[LabelSet]]:
        """Collapse a kube selector and template labels.

        Args:
            selector: spec.selector, or None when unset
            template_labels: spec.template.metadata.labels

        Returns:
            Tuple of (shorthand selector, template label override). The
            override is None when the template labels can be derived from
            the selector.

        Raises:
            ExpressionError: If the expression compiler rejects the selector
        """
        # An unset selector defaults to the template's labels.
        if selector is None:
            return ExplicitSelector(_copy_labels(template_labels)), None

        if not selector.has_expressions():
            # Absent and empty label maps select the same pods.
            match_labels = dict(selector.match_labels or {})
            labels = dict(template_labels or {})
            if match_labels == labels:
                return ExplicitSelector(match_labels), None
            return ExplicitSelector(match_labels), labels

        # Set-based selectors are never proven equal to a flat label set.
        text = self.compiler.compile(selector)
        logger.debug("Compiled selector expression %r", text)
        return ExpressionSelector(text), _copy_labels(template_labels)

    def to_kube(
        self,
        selector: Optional[Selector],
        override: Optional[LabelSet],
    ) -> Tuple[Optional[LabelSelector], Optional[LabelSet]]:
        """Expand a shorthand selector and optional template label override.

        Args:
            selector: Shorthand selector, or None
            override: Recorded template labels, or None

        Returns:
            Tuple of (kube selector, effective template labels). Effective
            labels are None when nothing determines them; callers then keep
            whatever labels the template already has.

        Raises:
            ExpressionError: If the expression compiler cannot parse the text
        """
        if selector is None:
            return None, _copy_labels(override)

        if isinstance(selector, ExpressionSelector):
            kube_selector = self.compiler.parse(selector.text)
            return kube_selector, _copy_labels(override)

        if isinstance(selector, ExplicitSelector):
            kube_selector = None
            if selector.labels is not None:
                kube_selector = LabelSelector(match_labels=dict(selector.labels))
            if override is not None:
                return kube_selector, dict(override)
            return kube_selector, _copy_labels(selector.labels)

        raise TypeError(f"not a selector: {type(selector).__name__}")
