import pulumi
import pulumi_random
from pulumi_azure_native import containerregistry

import aksprov
import aksprov.azure_environment
import aksprov.junkdrawer


class AzureContainerRegistry(pulumi.ComponentResource):
    """
    Creates a Basic tier container registry with a randomized name in the deployment resource group.

    The name suffix comes from a RandomUuid resource, so it is generated once and kept
    in state; a name collision with another registry surfaces as a provider error.
    """

    registry_suffix: pulumi_random.RandomUuid
    registry_name: pulumi.Output[str]
    registry: containerregistry.Registry

    def __init__(
        self,
        env: aksprov.azure_environment.Environment,
        tags: dict[str, str],
        *args,
        **kwargs,
    ):
        super().__init__(
            f"aksprov:{self.__class__.__name__}",
            env.resource_name("acr"),
            *args,
            **kwargs,
        )

        self.registry_suffix = pulumi_random.RandomUuid(
            "acr-suffix",
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.registry_name = self.registry_suffix.result.apply(aksprov.junkdrawer.registry_name_from_uuid)

        self.registry = containerregistry.Registry(
            "acr",
            registry_name=self.registry_name,
            resource_group_name=env.resource_group_name,
            location=env.location,
            admin_user_enabled=False,
            sku=containerregistry.SkuArgs(
                name=containerregistry.SkuName.BASIC,
            ),
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs({"acr_name": self.registry.name, "acr_id": self.registry.id})

    @property
    def registry_id(self) -> pulumi.Output[str]:
        return self.registry.id
