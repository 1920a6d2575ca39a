"""Tests for the selector / template label reconciler."""

import pytest

from mantle.core.reconciler import SelectorReconciler
from mantle.core.schema.selector import (
    ExplicitSelector,
    ExpressionSelector,
    LabelSelector,
    LabelSelectorRequirement,
)


class FakeCompiler:
    """In-memory compiler that remembers what it compiled."""

    def __init__(self):
        self.compiled = {}

    def compile(self, selector):
        text = f"expr-{len(self.compiled)}"
        self.compiled[text] = selector
        return text

    def parse(self, text):
        return self.compiled[text]


@pytest.fixture
def compiler():
    return FakeCompiler()


@pytest.fixture
def reconciler(compiler):
    return SelectorReconciler(compiler)


def _expression_selector():
    return LabelSelector(
        match_labels={"app": "web"},
        match_expressions=[LabelSelectorRequirement("tier", "In", ["frontend", "edge"])],
    )


class TestFromKube:
    """Collapsing a kube selector and template labels."""

    def test_missing_selector_defaults_to_template_labels(self, reconciler):
        """Test an unset selector becomes an explicit match on template labels."""
        selector, override = reconciler.from_kube(None, {"app": "web"})

        assert selector == ExplicitSelector({"app": "web"})
        assert override is None

    def test_equal_labels_collapse(self, reconciler):
        """Test matchLabels equal to template labels are stored once."""
        selector, override = reconciler.from_kube(
            LabelSelector(match_labels={"app": "web"}), {"app": "web"}
        )

        assert selector == ExplicitSelector({"app": "web"})
        assert override is None

    def test_different_labels_keep_override(self, reconciler):
        """Test template labels are recorded when they differ from matchLabels."""
        selector, override = reconciler.from_kube(
            LabelSelector(match_labels={"app": "web"}),
            {"app": "web", "version": "2"},
        )

        assert selector == ExplicitSelector({"app": "web"})
        assert override == {"app": "web", "version": "2"}

    def test_empty_and_missing_labels_collapse(self, reconciler):
        """Test an empty matchLabels and absent template labels are stored once."""
        selector, override = reconciler.from_kube(LabelSelector(match_labels={}), None)

        assert selector == ExplicitSelector({})
        assert override is None

    def test_expressions_are_compiled(self, reconciler, compiler):
        """Test set-based selectors go through the compiler and keep labels."""
        kube_selector = _expression_selector()

        selector, override = reconciler.from_kube(kube_selector, {"app": "web", "tier": "edge"})

        assert isinstance(selector, ExpressionSelector)
        assert compiler.compiled[selector.text] is kube_selector
        assert override == {"app": "web", "tier": "edge"}

    def test_expressions_with_empty_template_labels(self, reconciler):
        """Test an empty template label map is recorded as given."""
        selector, override = reconciler.from_kube(_expression_selector(), {})

        assert isinstance(selector, ExpressionSelector)
        assert override == {}

    def test_expressions_with_missing_template_labels(self, reconciler):
        selector, override = reconciler.from_kube(_expression_selector(), None)

        assert isinstance(selector, ExpressionSelector)
        assert override is None

    def test_result_does_not_alias_input(self, reconciler):
        """Test returned label maps are copies."""
        labels = {"app": "web"}

        selector, _ = reconciler.from_kube(LabelSelector(match_labels=labels), dict(labels))
        labels["app"] = "changed"

        assert selector.labels == {"app": "web"}


class TestToKube:
    """Expanding a shorthand selector and override."""

    def test_explicit_without_override(self, reconciler):
        """Test explicit labels become both matchLabels and template labels."""
        kube_selector, labels = reconciler.to_kube(ExplicitSelector({"app": "web"}), None)

        assert kube_selector == LabelSelector(match_labels={"app": "web"})
        assert labels == {"app": "web"}

    def test_explicit_with_override(self, reconciler):
        kube_selector, labels = reconciler.to_kube(
            ExplicitSelector({"app": "web"}), {"app": "web", "version": "2"}
        )

        assert kube_selector == LabelSelector(match_labels={"app": "web"})
        assert labels == {"app": "web", "version": "2"}

    def test_expression_is_parsed(self, reconciler, compiler):
        kube_selector = _expression_selector()
        compiler.compiled["tier in (edge)"] = kube_selector

        result, labels = reconciler.to_kube(ExpressionSelector("tier in (edge)"), {"tier": "edge"})

        assert result is kube_selector
        assert labels == {"tier": "edge"}

    def test_no_selector(self, reconciler):
        """Test a missing selector leaves only the override."""
        assert reconciler.to_kube(None, None) == (None, None)
        assert reconciler.to_kube(None, {"a": "b"}) == (None, {"a": "b"})

    def test_explicit_without_labels(self, reconciler):
        assert reconciler.to_kube(ExplicitSelector(None), None) == (None, None)

    def test_rejects_non_selector(self, reconciler):
        with pytest.raises(TypeError):
            reconciler.to_kube({"app": "web"}, None)


class TestRoundTrip:
    """to_kube(from_kube(x)) reproduces the original pair."""

    @pytest.mark.parametrize("selector,template_labels", [
        (LabelSelector(match_labels={"app": "web"}), {"app": "web"}),
        (LabelSelector(match_labels={"app": "web"}), {"app": "web", "track": "canary"}),
        (_expression_selector(), {"app": "web", "tier": "edge"}),
        (_expression_selector(), {}),
    ])
    def test_round_trip(self, reconciler, selector, template_labels):
        collapsed, override = reconciler.from_kube(selector, template_labels)
        kube_selector, labels = reconciler.to_kube(collapsed, override)

        assert kube_selector == selector
        assert labels == template_labels

    def test_absent_selector_round_trip(self, reconciler):
        """Test an absent selector comes back as matchLabels of the template labels."""
        collapsed, override = reconciler.from_kube(None, {"app": "web"})

        assert reconciler.to_kube(collapsed, override) == (
            LabelSelector(match_labels={"app": "web"}),
            {"app": "web"},
        )

    def test_absent_template_labels_not_copied_from_selector(self, reconciler):
        """Test absent template labels come back empty rather than as the selector's labels."""
        collapsed, override = reconciler.from_kube(LabelSelector(match_labels={"a": "1"}), None)
        kube_selector, labels = reconciler.to_kube(collapsed, override)

        assert kube_selector == LabelSelector(match_labels={"a": "1"})
        assert labels == {}

    def test_absent_match_labels_not_filled_from_template(self, reconciler):
        collapsed, override = reconciler.from_kube(LabelSelector(), {"a": "1"})
        kube_selector, labels = reconciler.to_kube(collapsed, override)

        assert kube_selector == LabelSelector(match_labels={})
        assert labels == {"a": "1"}
