"""Default label-selector expression compiler.

Uses the kubectl ``--selector`` syntax: comma-separated terms, each one of

- ``key=value`` (or ``key==value``) for a matchLabels entry
- ``key in (a,b)`` / ``key notin (a,b)`` for In / NotIn
- ``key != value`` for NotIn with a single value (parse only)
- ``key`` for Exists, ``!key`` for DoesNotExist

An empty label value is written as nothing, so ``env in ()`` is In with
``[""]`` and ``env=`` matches an empty value.

Example:
    >>> SelectorExpressionCompiler().compile(LabelSelector(
    ...     match_labels={"app": "web"},
    ...     match_expressions=[LabelSelectorRequirement("env", "In", ["prod", "qa"])],
    ... ))
    'app=web,env in (prod,qa)'
"""

import re
from typing import Dict, List

from mantle.core.errors import ExpressionError
from mantle.core.schema.selector import LabelSelector, LabelSelectorRequirement

_KEY = r"[A-Za-z0-9]([-A-Za-z0-9_./]*[A-Za-z0-9])?"
_KEY_PATTERN = re.compile(rf"^{_KEY}$")
_VALUE_PATTERN = re.compile(r"^([A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?)?$")
_SET_PATTERN = re.compile(rf"^(?P<key>{_KEY})\s+(?P<op>in|notin)\s*\((?P<values>[^()]*)\)$")
_INEQUALITY_PATTERN = re.compile(r"^(?P<key>[^=!\s]+)\s*!=\s*(?P<value>\S*)$")
_EQUALITY_PATTERN = re.compile(r"^(?P<key>[^=!\s]+)\s*==?\s*(?P<value>\S*)$")

_SET_OPERATORS = {"In": "in", "NotIn": "notin"}


def _split_terms(text: str) -> List[str]:
    """Split on commas that are not inside parentheses."""
    terms, depth, current = [], 0, []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ExpressionError("unbalanced parentheses", text)
        if char == "," and depth == 0:
            terms.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise ExpressionError("unbalanced parentheses", text)
    terms.append("".join(current).strip())
    return terms


def _check_key(key: str, text: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise ExpressionError(f"invalid label key {key!r}", text)
    return key


def _check_value(value: str, text: str) -> str:
    if not _VALUE_PATTERN.match(value):
        raise ExpressionError(f"invalid label value {value!r}", text)
    return value


class SelectorExpressionCompiler:
    """Compile label selectors to kubectl selector strings and parse them back."""

    def compile(self, selector: LabelSelector) -> str:
        terms = [f"{key}={value}" for key, value in (selector.match_labels or {}).items()]

        for requirement in selector.match_expressions or []:
            key, operator, values = requirement.key, requirement.operator, requirement.values or []
            if operator in _SET_OPERATORS:
                if not values:
                    raise ExpressionError(f"{operator} on {key!r} requires at least one value")
                terms.append(f"{key} {_SET_OPERATORS[operator]} ({','.join(values)})")
            elif operator in ("Exists", "DoesNotExist"):
                if values:
                    raise ExpressionError(f"{operator} on {key!r} takes no values")
                terms.append(key if operator == "Exists" else f"!{key}")
            else:
                raise ExpressionError(f"unsupported operator {operator!r} on {key!r}")

        return ",".join(terms)

    def parse(self, text: str) -> LabelSelector:
        if not text.strip():
            raise ExpressionError("empty selector", text)

        match_labels: Dict[str, str] = {}
        expressions: List[LabelSelectorRequirement] = []

        for term in _split_terms(text):
            if not term:
                raise ExpressionError("empty term", text)

            set_match = _SET_PATTERN.match(term)
            if set_match:
                values = [v.strip() for v in set_match.group("values").split(",")]
                # "()" holds one empty value; compile rejects In/NotIn with no values
                operator = "In" if set_match.group("op") == "in" else "NotIn"
                expressions.append(LabelSelectorRequirement(
                    key=set_match.group("key"),
                    operator=operator,
                    values=[_check_value(v, text) for v in values],
                ))
                continue

            if term.startswith("!"):
                key = _check_key(term[1:].strip(), text)
                expressions.append(LabelSelectorRequirement(key=key, operator="DoesNotExist"))
                continue

            inequality = _INEQUALITY_PATTERN.match(term)
            if inequality:
                expressions.append(LabelSelectorRequirement(
                    key=_check_key(inequality.group("key"), text),
                    operator="NotIn",
                    values=[_check_value(inequality.group("value"), text)],
                ))
                continue

            equality = _EQUALITY_PATTERN.match(term)
            if equality:
                key = _check_key(equality.group("key"), text)
                match_labels[key] = _check_value(equality.group("value"), text)
                continue

            expressions.append(LabelSelectorRequirement(key=_check_key(term, text), operator="Exists"))

        return LabelSelector(
            match_labels=match_labels or None,
            match_expressions=expressions or None,
        )
