"""Shared pytest fixtures for aksprov tests.

This module provides common fixtures used across test files:
- aksprov_root: Sets AKSPROV_ROOT environment variable
- recording_mocks: Pulumi mocks that record every declared resource and invoke
- kubelet_identity_mocks: recording mocks whose managed cluster reports a kubelet identity
- env: Environment with plain string inputs
- cluster_config: ClusterConfig with only the required value set
"""

import base64
import typing

import pulumi
import pytest

import aksprov.azure_environment

SUBSCRIPTION_ID = "12345678-1234-1234-1234-123456789012"
RESOURCE_GROUP_NAME = "rg-aksprov-test"
SUBNET_ID = (
    f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{RESOURCE_GROUP_NAME}"
    "/providers/Microsoft.Network/virtualNetworks/vnet-test/subnets/snet-aks"
)
WORKSPACE_ID = (
    f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{RESOURCE_GROUP_NAME}"
    "/providers/Microsoft.OperationalInsights/workspaces/log-test"
)
KUBELET_OBJECT_ID = "9b2c6f1e-5d4a-4c3b-8a7e-1f0d2c3b4a59"
REGISTRY_UUID = "0f8fad5b-d9cb-469f-a165-70867728950e"
KUBECONFIG_TEXT = "apiVersion: v1\nkind: Config\nclusters:\n- name: aks-testing01-test\n"
KUBECONFIG_B64 = base64.b64encode(KUBECONFIG_TEXT.encode()).decode()

MANAGED_CLUSTER = "azure-native:containerservice:ManagedCluster"
AGENT_POOL = "azure-native:containerservice:AgentPool"
REGISTRY = "azure-native:containerregistry:Registry"
ROLE_ASSIGNMENT = "azure-native:authorization:RoleAssignment"
LIST_USER_CREDENTIALS = "azure-native:containerservice:listManagedClusterUserCredentials"


# ============================================================================
# Environment Setup Fixtures
# ============================================================================


@pytest.fixture
def aksprov_root(monkeypatch: pytest.MonkeyPatch, tmp_path) -> typing.Any:
    """Set AKSPROV_ROOT environment variable to a temporary directory."""
    monkeypatch.setenv("AKSPROV_ROOT", str(tmp_path))
    return tmp_path


# ============================================================================
# Pulumi Mock Fixtures
# ============================================================================


class RecordingPulumiMocks(pulumi.runtime.Mocks):
    """Pulumi mocks that echo inputs back as outputs and record what was declared.

    Provider-computed outputs that the components read (names, ids, random
    results, the user credential listing) are filled in with fixed values.
    """

    def __init__(self, kubelet_object_id: str | None = None):
        self.kubelet_object_id = kubelet_object_id
        self.resources: list[pulumi.runtime.MockResourceArgs] = []
        self.calls: list[pulumi.runtime.MockCallArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs) -> tuple[str | None, dict[typing.Any, typing.Any]]:
        self.resources.append(args)
        outputs = dict(args.inputs)
        resource_id = f"{args.name}_id"

        if args.typ == MANAGED_CLUSTER:
            outputs["name"] = args.inputs.get("resourceName")
            if self.kubelet_object_id is not None:
                outputs["identityProfile"] = {
                    "kubeletidentity": {
                        "clientId": "kubelet-client-id",
                        "objectId": self.kubelet_object_id,
                        "resourceId": f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{RESOURCE_GROUP_NAME}-nodes"
                        "/providers/Microsoft.ManagedIdentity/userAssignedIdentities/aks-testing01-test-agentpool",
                    }
                }
        elif args.typ == REGISTRY:
            outputs["name"] = args.inputs.get("registryName")
            resource_id = (
                f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{RESOURCE_GROUP_NAME}"
                f"/providers/Microsoft.ContainerRegistry/registries/{outputs['name']}"
            )
        elif args.typ == "random:index/randomUuid:RandomUuid":
            outputs["result"] = REGISTRY_UUID
        elif args.typ == "random:index/randomPassword:RandomPassword":
            outputs["result"] = "not-a-real-password-!"
        elif args.typ == "tls:index/privateKey:PrivateKey":
            outputs["publicKeyOpenssh"] = "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAACAQ test"

        return resource_id, outputs

    def call(
        self, args: pulumi.runtime.MockCallArgs
    ) -> dict[typing.Any, typing.Any] | tuple[dict[typing.Any, typing.Any], list[tuple[str, str]] | None]:
        self.calls.append(args)
        if args.token == LIST_USER_CREDENTIALS:
            return {"kubeconfigs": [{"name": "clusterUser", "value": KUBECONFIG_B64}]}

        return {}

    def of_type(self, typ: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ == typ]


@pytest.fixture
def recording_mocks() -> RecordingPulumiMocks:
    """Install fresh recording mocks for a single test.

    Usage:
        @pulumi.runtime.test
        def test_my_resource(recording_mocks):
            ...
            return some_output.apply(lambda _: check(recording_mocks.of_type(...)))
    """
    mocks = RecordingPulumiMocks()
    pulumi.runtime.set_mocks(mocks, project="aksprov", stack="test", preview=False)
    return mocks


@pytest.fixture
def kubelet_identity_mocks() -> RecordingPulumiMocks:
    """Install recording mocks whose managed cluster reports KUBELET_OBJECT_ID as its kubelet identity."""
    mocks = RecordingPulumiMocks(kubelet_object_id=KUBELET_OBJECT_ID)
    pulumi.runtime.set_mocks(mocks, project="aksprov", stack="test", preview=False)
    return mocks


# ============================================================================
# Environment / Config Fixtures
# ============================================================================


@pytest.fixture
def env() -> aksprov.azure_environment.Environment:
    """Environment for deployment "testing01-test" with plain string inputs."""
    return aksprov.azure_environment.Environment(
        deployment_name="testing01-test",
        resource_group_name=RESOURCE_GROUP_NAME,
        location="westeurope",
        subscription_id=SUBSCRIPTION_ID,
        resource_tags={"owner": "platform"},
    )


@pytest.fixture
def cluster_config() -> aksprov.azure_environment.ClusterConfig:
    return aksprov.azure_environment.ClusterConfig(kubernetes_version="1.29.2")
