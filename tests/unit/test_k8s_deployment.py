"""Tests for Deployment conversion."""

import pytest

from mantle.core.errors import (
    MissingRequiredField,
    UnknownVersion,
    UnrecognizedEnumValue,
    UnsupportedVersion,
    VersionMismatch,
)
from mantle.core.schema import (
    Condition,
    ConditionStatus,
    DeploymentConditionType,
    DeploymentManifest,
    ExplicitSelector,
    ExpressionSelector,
    Identity,
    LabelSelector,
    LabelSelectorRequirement,
    RecreateStrategy,
    RollingUpdateStrategy,
    TemplateMetadata,
)
from mantle.k8s import types as kube
from mantle.k8s.deployment import DEPLOYMENT_VERSIONS, from_kube_deployment, to_kube_deployment
from mantle.k8s.serializer import YamlSerializer

POD_SPEC = {"containers": [{"name": "web", "image": "web:1.2.3"}]}


def make_kube_deployment(schema=kube.AppsV1Deployment, **overrides):
    """Build a kube Deployment with a matching selector and template."""
    deployment = schema(
        metadata=kube.ObjectMeta(name="web", namespace="prod", labels={"app": "web"}),
        spec=kube.DeploymentSpec(
            replicas=3,
            selector=LabelSelector(match_labels={"app": "web"}),
            template=kube.PodTemplateSpec(
                metadata=kube.ObjectMeta(labels={"app": "web"}),
                spec=dict(POD_SPEC),
            ),
        ),
    )
    for name, value in overrides.items():
        setattr(deployment.spec, name, value)
    return deployment


def make_manifest(**overrides):
    fields = dict(
        identity=Identity(name="web", namespace="prod"),
        selector=ExplicitSelector({"app": "web"}),
        pod_template=dict(POD_SPEC),
    )
    fields.update(overrides)
    return DeploymentManifest(**fields)


class RecordingSerializer:
    """Serializer that records the versions it was asked to decode."""

    def __init__(self):
        self.inner = YamlSerializer()
        self.versions = []

    def marshal(self, obj):
        return self.inner.marshal(obj)

    def unmarshal(self, data, version):
        self.versions.append(version)
        return self.inner.unmarshal(data, version)


class TestFromKubeDeployment:
    """Tests for kube -> shorthand."""

    def test_basic_fields(self):
        manifest = from_kube_deployment(make_kube_deployment())

        assert manifest.identity == Identity(name="web", namespace="prod", version="apps/v1")
        assert manifest.labels == {"app": "web"}
        assert manifest.replicas == 3
        assert manifest.pod_template == POD_SPEC

    def test_selector_collapses(self):
        """Test matching selector and template labels are stored once."""
        manifest = from_kube_deployment(make_kube_deployment())

        assert manifest.selector == ExplicitSelector({"app": "web"})
        assert manifest.template_labels is None
        assert manifest.template_metadata is None

    def test_template_annotations_kept(self):
        deployment = make_kube_deployment()
        deployment.spec.template.metadata.annotations = {"sidecar": "off"}

        manifest = from_kube_deployment(deployment)

        assert manifest.template_metadata == TemplateMetadata(annotations={"sidecar": "off"})

    @pytest.mark.parametrize("schema", [
        kube.AppsV1Deployment,
        kube.AppsV1Beta2Deployment,
        kube.AppsV1Beta1Deployment,
        kube.ExtensionsV1Beta1Deployment,
    ])
    def test_every_version_accepted(self, schema):
        manifest = from_kube_deployment(make_kube_deployment(schema))

        assert manifest.identity.version == schema.API_VERSION

    def test_strategies(self):
        recreate = make_kube_deployment(strategy=kube.DeploymentStrategy(type="Recreate"))
        rolling = make_kube_deployment(strategy=kube.DeploymentStrategy(
            type="RollingUpdate",
            rolling_update=kube.RollingUpdateDeployment(max_unavailable="25%", max_surge=1),
        ))

        assert from_kube_deployment(recreate).strategy == RecreateStrategy()
        assert from_kube_deployment(rolling).strategy == RollingUpdateStrategy("25%", 1)
        assert from_kube_deployment(make_kube_deployment()).strategy is None

    def test_unknown_strategy(self):
        deployment = make_kube_deployment(strategy=kube.DeploymentStrategy(type="BlueGreen"))

        with pytest.raises(UnrecognizedEnumValue) as exc_info:
            from_kube_deployment(deployment)

        assert exc_info.value.raw_value == "BlueGreen"

    def test_conditions_keep_order(self):
        deployment = make_kube_deployment()
        deployment.status.conditions = [
            kube.DeploymentCondition(type="Progressing", status="True", reason="NewReplicaSetAvailable"),
            kube.DeploymentCondition(type="Available", status="False", last_transition_time="2024-01-02T03:04:05Z"),
        ]

        conditions = from_kube_deployment(deployment).status.conditions

        assert [c.type for c in conditions] == [
            DeploymentConditionType.PROGRESSING,
            DeploymentConditionType.AVAILABLE,
        ]
        assert conditions[0].reason == "NewReplicaSetAvailable"
        assert conditions[1].status is ConditionStatus.FALSE
        assert conditions[1].last_transition_time == "2024-01-02T03:04:05Z"

    def test_bad_condition_reports_index(self):
        """Test an unknown condition type is reported at its list position."""
        deployment = make_kube_deployment()
        deployment.status.conditions = [
            kube.DeploymentCondition(type="Available", status="True"),
            kube.DeploymentCondition(type="Foo", status="True"),
        ]

        with pytest.raises(UnrecognizedEnumValue) as exc_info:
            from_kube_deployment(deployment)

        assert str(exc_info.value) == "deployment conditions[1]: unrecognized deployment condition type: Foo"
        assert exc_info.value.raw_value == "Foo"

    def test_version_mismatch(self):
        deployment = make_kube_deployment(kube.AppsV1Beta2Deployment)
        deployment.api_version = "apps/v1"

        with pytest.raises(VersionMismatch):
            from_kube_deployment(deployment)

    def test_not_a_deployment(self):
        with pytest.raises(UnknownVersion):
            from_kube_deployment(kube.CoreV1Namespace())


class TestToKubeDeployment:
    """Tests for shorthand -> kube."""

    def test_empty_version_defaults_to_apps_v1(self):
        result = to_kube_deployment(make_manifest())

        assert type(result) is kube.AppsV1Deployment
        assert result.api_version == "apps/v1"
        assert result.spec.selector == LabelSelector(match_labels={"app": "web"})
        assert result.spec.template.metadata.labels == {"app": "web"}

    def test_declared_version_selects_type(self):
        """Test the output is re-specialized to the declared version."""
        serializer = RecordingSerializer()
        manifest = make_manifest(identity=Identity(name="web", version="extensions/v1beta1"))

        result = to_kube_deployment(manifest, serializer=serializer)

        assert type(result) is kube.ExtensionsV1Beta1Deployment
        assert serializer.versions == ["extensions/v1beta1"]

    def test_unsupported_version(self):
        manifest = make_manifest(identity=Identity(name="web", version="apps/v9"))

        with pytest.raises(UnsupportedVersion):
            to_kube_deployment(manifest)

    def test_missing_pod_template(self):
        with pytest.raises(MissingRequiredField) as exc_info:
            to_kube_deployment(make_manifest(pod_template=None))

        assert exc_info.value.field == "pod template"

    def test_template_metadata_labels_used_as_fallback(self):
        """Test template labels come from template metadata when nothing else sets them."""
        manifest = make_manifest(
            selector=None,
            template_metadata=TemplateMetadata(labels={"app": "web"}),
        )

        result = to_kube_deployment(manifest)

        assert result.spec.selector is None
        assert result.spec.template.metadata.labels == {"app": "web"}

    def test_strategy_output(self):
        recreate = to_kube_deployment(make_manifest(strategy=RecreateStrategy()))
        rolling = to_kube_deployment(make_manifest(strategy=RollingUpdateStrategy(max_surge="50%")))

        assert recreate.spec.strategy == kube.DeploymentStrategy(type="Recreate")
        assert rolling.spec.strategy.type == "RollingUpdate"
        assert rolling.spec.strategy.rolling_update.max_surge == "50%"
        assert rolling.spec.strategy.rolling_update.max_unavailable is None

    def test_bad_condition_reports_index(self):
        manifest = make_manifest()
        manifest.status.conditions = [Condition(type="bogus", status=ConditionStatus.TRUE)]

        with pytest.raises(UnrecognizedEnumValue) as exc_info:
            to_kube_deployment(manifest)

        assert str(exc_info.value) == "deployment conditions[0]: unrecognized deployment condition type: bogus"


class TestDeploymentRoundTrip:
    """Converting out and back in reproduces the original."""

    @pytest.mark.parametrize("version", DEPLOYMENT_VERSIONS.versions)
    def test_kube_round_trip(self, version):
        """Test to_kube(from_kube(x)) == x for every supported version."""
        schema = kube.KUBE_SCHEMAS[(version, "Deployment")]
        original = make_kube_deployment(
            schema,
            min_ready_seconds=5,
            revision_history_limit=4,
            progress_deadline_seconds=600,
            strategy=kube.DeploymentStrategy(
                type="RollingUpdate",
                rolling_update=kube.RollingUpdateDeployment(max_unavailable="25%", max_surge=1),
            ),
        )
        original.status = kube.DeploymentStatus(
            observed_generation=7,
            replicas=3,
            updated_replicas=3,
            ready_replicas=2,
            available_replicas=2,
            unavailable_replicas=1,
            conditions=[
                kube.DeploymentCondition(
                    type="ReplicaFailure",
                    status="Unknown",
                    last_update_time="2024-01-02T03:04:05Z",
                    last_transition_time="2024-01-02T03:04:05Z",
                    reason="FailedCreate",
                    message="quota exceeded",
                ),
            ],
            collision_count=1,
        )

        result = to_kube_deployment(from_kube_deployment(original))

        assert result == original

    def test_expression_selector_round_trip(self):
        selector = LabelSelector(
            match_labels={"app": "web"},
            match_expressions=[LabelSelectorRequirement("tier", "In", ["edge", "frontend"])],
        )
        original = make_kube_deployment(selector=selector)

        manifest = from_kube_deployment(original)
        result = to_kube_deployment(manifest)

        assert manifest.selector == ExpressionSelector("app=web,tier in (edge,frontend)")
        assert manifest.template_labels == {"app": "web"}
        assert result == original

    def test_expression_selector_with_empty_template_labels(self):
        """Test an empty template label map survives next to an expression selector."""
        original = make_kube_deployment(selector=LabelSelector(
            match_expressions=[LabelSelectorRequirement("tier", "Exists")],
        ))
        original.spec.template.metadata.labels = {}

        manifest = from_kube_deployment(original)
        result = to_kube_deployment(manifest)

        assert manifest.template_labels == {}
        assert result.spec.template.metadata.labels == {}

    def test_different_template_labels_round_trip(self):
        original = make_kube_deployment()
        original.spec.template.metadata.labels = {"app": "web", "track": "canary"}

        manifest = from_kube_deployment(original)

        assert manifest.template_labels == {"app": "web", "track": "canary"}
        assert to_kube_deployment(manifest) == original

    def test_empty_value_in_set_round_trip(self):
        """Test an In clause whose only value is empty converts back out."""
        original = make_kube_deployment(selector=LabelSelector(
            match_expressions=[LabelSelectorRequirement("env", "In", [""])],
        ))
        original.spec.template.metadata.labels = {"env": ""}

        assert to_kube_deployment(from_kube_deployment(original)) == original

    def test_bare_declared_version_round_trip(self):
        """Test a Deployment declaring a bare version converts back to the same type."""
        original = make_kube_deployment(kube.AppsV1Beta2Deployment)
        original.api_version = "v1beta2"

        manifest = from_kube_deployment(original)
        result = to_kube_deployment(manifest)

        assert manifest.identity.version == "v1beta2"
        assert type(result) is kube.AppsV1Beta2Deployment
        assert result.spec == original.spec
