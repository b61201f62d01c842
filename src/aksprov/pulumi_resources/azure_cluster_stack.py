import pulumi
import pulumi_azure_native as pulumi_az
import pulumi_kubernetes as kubernetes

import aksprov
import aksprov.azure_environment
from aksprov.presence import Absent, Present, Presence, unwrap_or
from aksprov.pulumi_resources import azure_cluster_credentials, azure_kubelet_role_assignments
from aksprov.pulumi_resources.azure_cluster_secrets import AzureClusterSecrets
from aksprov.pulumi_resources.azure_container_registry import AzureContainerRegistry
from aksprov.pulumi_resources.azure_managed_cluster import AzureManagedCluster


class AzureClusterStack(pulumi.ComponentResource):
    env: aksprov.azure_environment.Environment
    cluster_config: aksprov.azure_environment.ClusterConfig

    secrets: AzureClusterSecrets
    managed_cluster: AzureManagedCluster
    container_registry: Presence[AzureContainerRegistry]
    acr_pull_assignments: dict[str, pulumi_az.authorization.RoleAssignment]
    kubeconfig: pulumi.Output[str]
    kube_provider: kubernetes.Provider

    @classmethod
    def autoload(cls) -> "AzureClusterStack":
        cluster_config = aksprov.azure_environment.autoload_cluster_config()
        if cluster_config.subnet_id is None or cluster_config.workspace_id is None:
            msg = "subnetId and workspaceId must be set to provision the cluster"
            raise ValueError(msg)

        env = aksprov.azure_environment.Environment.autoload(
            pulumi.Config(),
            resource_tags=cluster_config.resource_tags,
        )

        return cls(
            env=env,
            cluster_config=cluster_config,
            subnet_id=cluster_config.subnet_id,
            workspace_id=cluster_config.workspace_id,
        )

    def __init__(
        self,
        env: aksprov.azure_environment.Environment,
        cluster_config: aksprov.azure_environment.ClusterConfig,
        subnet_id: pulumi.Input[str],
        workspace_id: pulumi.Input[str],
        *args,
        **kwargs,
    ):
        super().__init__(
            f"aksprov:{self.__class__.__name__}",
            env.deployment_name,
            *args,
            **kwargs,
        )

        self.env = env
        self.cluster_config = cluster_config
        self.subnet_id = subnet_id
        self.workspace_id = workspace_id

        self.required_tags = self.env.required_tags | {
            aksprov.azure_tag_key_format(str(aksprov.TagKeys.AKSPROV_MANAGED_BY)): __name__,
        }

        self._define_secrets()
        self._define_managed_cluster()
        self._define_container_registry()
        self._define_acr_pull_assignments()
        self._define_kubeconfig()
        self._define_kube_provider()

        outputs = {
            "cluster_name": self.managed_cluster.cluster.name,
            "node_resource_group": self.managed_cluster.node_resource_group,
            "kubelet_object_id": self.managed_cluster.kubelet_object_id.apply(lambda p: unwrap_or(p, "")),
            "kubeconfig": self.kubeconfig,
        }
        if isinstance(self.container_registry, Present):
            outputs["acr_name"] = self.container_registry.value.registry.name

        for key, value in outputs.items():
            pulumi.export(key, value)

        self.register_outputs(outputs)

    def _define_secrets(self):
        self.secrets = AzureClusterSecrets(
            self.env.resource_name("secrets"),
            opts=pulumi.ResourceOptions(parent=self),
        )

    def _define_managed_cluster(self):
        self.managed_cluster = AzureManagedCluster(
            env=self.env,
            cluster_config=self.cluster_config,
            secrets=self.secrets,
            subnet_id=self.subnet_id,
            workspace_id=self.workspace_id,
            opts=pulumi.ResourceOptions(parent=self),
        )

    def _define_container_registry(self):
        if not self.cluster_config.include_container_registry:
            self.container_registry = Absent("includeContainerRegistry is not set")
            return

        pulumi.log.info(f"Declaring owned container registry for {self.env.deployment_name}")
        self.container_registry = Present(
            AzureContainerRegistry(
                env=self.env,
                tags=self.required_tags,
                opts=pulumi.ResourceOptions(parent=self),
            )
        )

    def _define_acr_pull_assignments(self):
        owned_registry_id = (
            Present(self.container_registry.value.registry_id)
            if isinstance(self.container_registry, Present)
            else Absent("no owned registry")
        )

        self.acr_pull_assignments = azure_kubelet_role_assignments.define_acr_pull_assignments(
            env=self.env,
            cluster_name=self.managed_cluster.cluster_name,
            kubelet_object_id=self.managed_cluster.kubelet_object_id,
            owned_registry_id=owned_registry_id,
            external_registry_id=azure_kubelet_role_assignments.external_registry_scope(
                self.cluster_config.acr_resource_id
            ),
            parent=self,
        )

    def _define_kubeconfig(self):
        self.kubeconfig = azure_cluster_credentials.cluster_kubeconfig(
            cluster_name=self.managed_cluster.cluster.name,
            resource_group_name=self.env.resource_group_name,
        )

    def _define_kube_provider(self):
        self.kube_provider = azure_cluster_credentials.kube_provider(
            self.kubeconfig,
            opts=pulumi.ResourceOptions(parent=self),
        )
