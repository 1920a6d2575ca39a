"""End-to-end round trips from YAML through the shorthand form and back."""

import pytest

from mantle.k8s import (
    YamlSerializer,
    from_kube_deployment,
    from_kube_namespace,
    from_kube_replica_set,
    from_kube_secret,
    to_kube_deployment,
    to_kube_namespace,
    to_kube_replica_set,
    to_kube_secret,
)

DEPLOYMENT = b"""apiVersion: extensions/v1beta1
kind: Deployment
metadata:
  name: payments-api
  namespace: prod
  labels:
    app: payments-api
  annotations:
    deployment.kubernetes.io/revision: "4"
spec:
  replicas: 3
  selector:
    matchLabels:
      app: payments-api
    matchExpressions:
    - key: track
      operator: NotIn
      values:
      - canary
  template:
    metadata:
      labels:
        app: payments-api
        track: stable
    spec:
      containers:
      - name: payments-api
        image: payments-api:1.2.3
        ports:
        - containerPort: 8080
  strategy:
    type: RollingUpdate
    rollingUpdate:
      maxUnavailable: 25%
      maxSurge: 1
  revisionHistoryLimit: 10
  progressDeadlineSeconds: 600
status:
  observedGeneration: 4
  replicas: 3
  updatedReplicas: 3
  readyReplicas: 3
  availableReplicas: 3
  conditions:
  - type: Progressing
    status: "True"
    lastUpdateTime: "2024-03-01T10:00:00Z"
    lastTransitionTime: "2024-03-01T09:58:00Z"
    reason: NewReplicaSetAvailable
  - type: Available
    status: "True"
    lastUpdateTime: "2024-03-01T10:00:00Z"
    lastTransitionTime: "2024-03-01T10:00:00Z"
    reason: MinimumReplicasAvailable
"""

REPLICA_SET = b"""apiVersion: apps/v1beta2
kind: ReplicaSet
metadata:
  name: payments-api-6f7d
  namespace: prod
spec:
  replicas: 3
  selector:
    matchLabels:
      app: payments-api
      pod-template-hash: 6f7d
  template:
    metadata:
      labels:
        app: payments-api
        pod-template-hash: 6f7d
    spec:
      containers:
      - name: payments-api
        image: payments-api:1.2.3
status:
  replicas: 3
  fullyLabeledReplicas: 3
"""

NAMESPACE = b"""apiVersion: v1
kind: Namespace
metadata:
  name: team-a
  labels:
    owner: team-a
spec:
  finalizers:
  - kubernetes
status:
  phase: Terminating
"""

SECRET = b"""apiVersion: v1
kind: Secret
metadata:
  name: basic
  namespace: prod
type: kubernetes.io/basic-auth
data:
  username: YWRtaW4=
  password: aHVudGVyMg==
stringData:
  note: rotated monthly
"""

CASES = [
    (DEPLOYMENT, from_kube_deployment, to_kube_deployment),
    (REPLICA_SET, from_kube_replica_set, to_kube_replica_set),
    (NAMESPACE, from_kube_namespace, to_kube_namespace),
    (SECRET, from_kube_secret, to_kube_secret),
]


@pytest.fixture
def serializer():
    return YamlSerializer()


class TestYamlRoundTrip:
    """YAML -> kube -> shorthand -> kube -> YAML preserves the document."""

    @pytest.mark.parametrize("document,from_kube,to_kube", CASES)
    def test_document_preserved(self, serializer, document, from_kube, to_kube):
        original = serializer.unmarshal(document, "")

        result = to_kube(from_kube(original), serializer=serializer)

        assert type(result) is type(original)
        assert serializer.load_document(serializer.marshal(result)) == serializer.load_document(document)

    @pytest.mark.parametrize("document,from_kube,to_kube", CASES)
    def test_shorthand_stable(self, serializer, document, from_kube, to_kube):
        """Test from_kube(to_kube(m)) == m for a converted manifest."""
        manifest = from_kube(serializer.unmarshal(document, ""))

        assert from_kube(to_kube(manifest, serializer=serializer)) == manifest


class TestCrossVersion:
    """Re-versioning through the shorthand form."""

    @pytest.mark.parametrize("version", ["apps/v1", "apps/v1beta2", "apps/v1beta1"])
    def test_deployment_between_versions(self, serializer, version):
        manifest = from_kube_deployment(serializer.unmarshal(DEPLOYMENT, ""))
        manifest.identity.version = version

        result = to_kube_deployment(manifest, serializer=serializer)
        again = from_kube_deployment(result)

        assert result.api_version == version
        assert again.identity.version == version
        again.identity.version = "extensions/v1beta1"
        assert again == from_kube_deployment(serializer.unmarshal(DEPLOYMENT, ""))

    def test_bare_version(self, serializer):
        """Test a bare version resolves within the kind's groups."""
        manifest = from_kube_replica_set(serializer.unmarshal(REPLICA_SET, ""))
        manifest.identity.version = "v1beta1"

        result = to_kube_replica_set(manifest, serializer=serializer)

        assert result.api_version == "extensions/v1beta1"


class TestTimestamps:
    """Condition times survive conversion byte for byte."""

    def test_fraction_and_offset_survive(self, serializer):
        document = DEPLOYMENT.replace(
            b'    lastUpdateTime: "2024-03-01T10:00:00Z"\n    lastTransitionTime: "2024-03-01T09:58:00Z"\n',
            b"    lastUpdateTime: 2024-03-01T10:00:00.123456Z\n    lastTransitionTime: 2024-03-01T12:00:00+02:00\n",
        )
        assert document != DEPLOYMENT

        result = to_kube_deployment(from_kube_deployment(serializer.unmarshal(document, "")), serializer=serializer)
        condition = serializer.load_document(serializer.marshal(result))["status"]["conditions"][0]

        assert condition["lastUpdateTime"] == "2024-03-01T10:00:00.123456Z"
        assert condition["lastTransitionTime"] == "2024-03-01T12:00:00+02:00"
