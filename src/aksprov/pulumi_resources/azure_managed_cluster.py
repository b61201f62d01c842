import typing

import pulumi
import pulumi_azure_native as pulumi_az

import aksprov
import aksprov.azure_environment
import aksprov.node_pools
from aksprov.presence import Absent, Present, Presence, present_or_absent
from aksprov.pulumi_resources.azure_cluster_secrets import AzureClusterSecrets

NETWORK_PLUGIN = "azure"
DNS_SERVICE_IP = "10.2.2.254"
SERVICE_CIDR = "10.2.2.0/24"


def kubelet_object_id(identity_profile: typing.Mapping[str, typing.Any] | None) -> Presence[str]:
    """Extract the kubelet identity object id from a managed cluster identity profile.

    The provider may not have populated the profile yet, in which case the id is
    reported as Absent rather than failing the run.
    """
    if not identity_profile:
        return Absent("identity profile not populated")

    kubelet_identity = identity_profile.get("kubeletidentity")
    if kubelet_identity is None:
        return Absent("kubelet identity not populated")

    return present_or_absent(kubelet_identity.object_id, "kubelet identity object id not populated")


class AzureManagedCluster(pulumi.ComponentResource):
    env: aksprov.azure_environment.Environment
    cluster_config: aksprov.azure_environment.ClusterConfig
    cluster_name: str
    node_resource_group: pulumi.Output[str]
    system_pool: aksprov.node_pools.NodePoolSpec
    cluster: pulumi_az.containerservice.ManagedCluster
    windows_pool: Presence[pulumi_az.containerservice.AgentPool]
    kubelet_object_id: pulumi.Output[Presence[str]]

    def __init__(
        self,
        env: aksprov.azure_environment.Environment,
        cluster_config: aksprov.azure_environment.ClusterConfig,
        secrets: AzureClusterSecrets,
        subnet_id: pulumi.Input[str],
        workspace_id: pulumi.Input[str],
        *args,
        **kwargs,
    ):
        self.cluster_name = env.resource_name("aks")
        super().__init__(
            f"aksprov:{self.__class__.__name__}",
            self.cluster_name,
            *args,
            **kwargs,
        )

        self.env = env
        self.cluster_config = cluster_config
        self.secrets = secrets
        self.subnet_id = subnet_id
        self.workspace_id = workspace_id

        self.required_tags = self.env.required_tags | {
            aksprov.azure_tag_key_format(str(aksprov.TagKeys.AKSPROV_MANAGED_BY)): __name__,
        }

        self._define_cluster()
        self._define_windows_pool()

        self.kubelet_object_id = self.cluster.identity_profile.apply(kubelet_object_id)

        self.register_outputs(
            {
                "cluster_name": self.cluster.name,
                "node_resource_group": self.node_resource_group,
            }
        )

    def _define_cluster(self):
        self.node_resource_group = self.env.node_resource_group_name()
        self.system_pool = aksprov.node_pools.default_linux_pool(self.subnet_id)
        aksprov.node_pools.validate_system_pools([self.system_pool])

        self.cluster = pulumi_az.containerservice.ManagedCluster(
            self.cluster_name,
            resource_name_=self.cluster_name,
            resource_group_name=self.env.resource_group_name,
            node_resource_group=self.node_resource_group,
            location=self.env.location,
            identity=pulumi_az.containerservice.ManagedClusterIdentityArgs(
                type=pulumi_az.containerservice.ResourceIdentityType.SYSTEM_ASSIGNED,
            ),
            addon_profiles={
                "omsagent": pulumi_az.containerservice.ManagedClusterAddonProfileArgs(
                    enabled=True,
                    config={"logAnalyticsWorkspaceResourceID": self.workspace_id},
                ),
            },
            agent_pool_profiles=[self.system_pool.agent_pool_profile()],
            dns_prefix=self.env.deployment_name,
            enable_rbac=True,
            kubernetes_version=self.cluster_config.kubernetes_version,
            linux_profile=pulumi_az.containerservice.ContainerServiceLinuxProfileArgs(
                admin_username=aksprov.ADMIN_USERNAME,
                ssh=pulumi_az.containerservice.ContainerServiceSshConfigurationArgs(
                    public_keys=[
                        pulumi_az.containerservice.ContainerServiceSshPublicKeyArgs(
                            key_data=self.secrets.public_key_openssh,
                        )
                    ],
                ),
            ),
            # windows admin credentials are required at creation time even if no windows pool is ever added
            windows_profile=pulumi_az.containerservice.ManagedClusterWindowsProfileArgs(
                admin_username=aksprov.ADMIN_USERNAME,
                admin_password=self.secrets.admin_password.result,
            ),
            # dockerBridgeCidr is no longer accepted by current containerservice API versions
            network_profile=pulumi_az.containerservice.ContainerServiceNetworkProfileArgs(
                network_plugin=NETWORK_PLUGIN,
                dns_service_ip=DNS_SERVICE_IP,
                service_cidr=SERVICE_CIDR,
            ),
            tags=self.required_tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

    def _define_windows_pool(self):
        if not self.cluster_config.windows.enabled:
            self.windows_pool = Absent("windows.enabled is not set")
            return

        pool = aksprov.node_pools.windows_pool(self.subnet_id)
        pulumi.log.info(f"Declaring windows node pool {pool.name!r} for cluster {self.cluster_name}")

        self.windows_pool = Present(
            pulumi_az.containerservice.AgentPool(
                "windowspool",
                resource_group_name=self.env.resource_group_name,
                resource_name_=self.cluster.name,
                **pool.agent_pool_args(),
                opts=pulumi.ResourceOptions(parent=self),
            )
        )
