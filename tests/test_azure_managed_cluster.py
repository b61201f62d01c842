"""Tests for AzureManagedCluster: kubelet identity extraction and the conditional windows pool."""

from unittest.mock import MagicMock, patch

import pytest
from pulumi_azure_native.containerservice.outputs import UserAssignedIdentityResponse

import aksprov.azure_environment
from aksprov.presence import Absent, Present
from aksprov.pulumi_resources.azure_managed_cluster import AzureManagedCluster, kubelet_object_id

AGENT_POOL_PATH = "aksprov.pulumi_resources.azure_managed_cluster.pulumi_az.containerservice.AgentPool"


def _cluster_mock(windows: aksprov.azure_environment.WindowsConfig) -> MagicMock:
    m = MagicMock()
    m.cluster_name = "aks-testing01-test"
    m.subnet_id = "/subnets/aks"
    m.env.resource_group_name = "rg-aksprov-test"
    m.cluster_config = aksprov.azure_environment.ClusterConfig(kubernetes_version="1.29.2", windows=windows)
    return m


def test_kubelet_object_id_present():
    profile = {"kubeletidentity": UserAssignedIdentityResponse(object_id="11111111-2222-3333-4444-555555555555")}

    assert kubelet_object_id(profile) == Present("11111111-2222-3333-4444-555555555555")


def test_kubelet_object_id_absent_profile():
    assert isinstance(kubelet_object_id(None), Absent)
    assert isinstance(kubelet_object_id({}), Absent)


def test_kubelet_object_id_absent_kubelet_identity():
    profile = {"otheridentity": UserAssignedIdentityResponse(object_id="abc")}

    assert kubelet_object_id(profile) == Absent("kubelet identity not populated")


def test_kubelet_object_id_empty_object_id():
    profile = {"kubeletidentity": UserAssignedIdentityResponse(object_id="")}

    assert isinstance(kubelet_object_id(profile), Absent)


def test_kubelet_object_id_untyped_profile_fails():
    profile = {"kubeletidentity": {"objectId": "11111111-2222-3333-4444-555555555555"}}

    with pytest.raises(AttributeError):
        kubelet_object_id(profile)


def test_no_windows_pool_by_default():
    mock = _cluster_mock(aksprov.azure_environment.WindowsConfig())
    with patch(AGENT_POOL_PATH) as mock_pool:
        AzureManagedCluster._define_windows_pool(mock)
        assert mock_pool.call_count == 0

    assert isinstance(mock.windows_pool, Absent)


def test_windows_pool_when_enabled():
    mock = _cluster_mock(aksprov.azure_environment.WindowsConfig(enabled=True))
    with patch(AGENT_POOL_PATH) as mock_pool, patch("pulumi.log.info") as mock_info:
        AzureManagedCluster._define_windows_pool(mock)
        assert mock_pool.call_count == 1
        mock_info.assert_called_once()

        kwargs = mock_pool.call_args.kwargs
        assert mock_pool.call_args.args == ("windowspool",)
        assert kwargs["agent_pool_name"] == "win"
        assert kwargs["os_type"] == "Windows"
        assert kwargs["node_taints"] == ["os=windows:NoSchedule"]
        assert kwargs["min_count"] <= kwargs["count"] <= kwargs["max_count"]
        assert kwargs["vm_size"] == "Standard_D4s_v3"
        assert kwargs["vnet_subnet_id"] == "/subnets/aks"
        assert kwargs["resource_name_"] is mock.cluster.name

    assert isinstance(mock.windows_pool, Present)
    assert mock.windows_pool.value is mock_pool.return_value
