"""Label selectors on both sides of the conversion.

Kube side: :class:`LabelSelector` / :class:`LabelSelectorRequirement`, the
``matchLabels`` / ``matchExpressions`` structure every ReplicaSet-style
controller carries.

Shorthand side: :data:`Selector`, a closed union of
:class:`ExplicitSelector` (pure label match) and :class:`ExpressionSelector`
(opaque compiled text produced by an expression compiler). Exactly one form
is ever populated because each form is its own type.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

LabelSet = Dict[str, str]


@dataclass
class LabelSelectorRequirement:
    """Single set-based selector clause.

    Attributes:
        key: Label key the clause applies to
        operator: One of "In", "NotIn", "Exists", "DoesNotExist"
        values: Values for In/NotIn, empty for Exists/DoesNotExist
    """

    key: str
    operator: str
    values: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"key": self.key, "operator": self.operator}
        if self.values is not None:
            result["values"] = list(self.values)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LabelSelectorRequirement":
        values = data.get("values")
        return cls(
            key=data["key"],
            operator=data["operator"],
            values=list(values) if values is not None else None,
        )


@dataclass
class LabelSelector:
    """Kubernetes ``metav1.LabelSelector``.

    Attributes:
        match_labels: Flat equality matches
        match_expressions: Set-based clauses
    """

    match_labels: Optional[LabelSet] = None
    match_expressions: Optional[List[LabelSelectorRequirement]] = None

    def has_expressions(self) -> bool:
        return bool(self.match_expressions)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.match_labels is not None:
            result["matchLabels"] = dict(self.match_labels)
        if self.match_expressions is not None:
            result["matchExpressions"] = [r.to_dict() for r in self.match_expressions]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LabelSelector":
        labels = data.get("matchLabels")
        expressions = data.get("matchExpressions")
        return cls(
            match_labels=dict(labels) if labels is not None else None,
            match_expressions=(
                [LabelSelectorRequirement.from_dict(r) for r in expressions]
                if expressions is not None
                else None
            ),
        )


@dataclass(frozen=True)
class ExplicitSelector:
    """Selector that is a pure match on labels."""

    labels: Optional[LabelSet] = None


@dataclass(frozen=True)
class ExpressionSelector:
    """Selector holding compiled match-expression text."""

    text: str


Selector = Union[ExplicitSelector, ExpressionSelector]
