from __future__ import annotations

import pulumi
import pulumi_azure_native as pulumi_az

import aksprov.azure_environment
from aksprov.presence import Absent, Present, Presence

ACR_PULL_ROLE = "AcrPull"
OWNED_REGISTRY_ASSIGNMENT = "ra-acr-aks-owned"
EXTERNAL_REGISTRY_ASSIGNMENT = "ra-acr-aks-external"


def principal_id_or_warn(presence: Presence[str], cluster_name: str) -> str:
    if isinstance(presence, Present):
        return presence.value

    pulumi.log.warn(
        f"Kubelet identity for cluster {cluster_name} is not available yet ({presence.reason}); "
        f"the {ACR_PULL_ROLE} role assignment will be submitted with an empty principal id"
    )
    return ""


def define_acr_pull_assignments(
    env: aksprov.azure_environment.Environment,
    cluster_name: str,
    kubelet_object_id: pulumi.Output[Presence[str]],
    owned_registry_id: Presence[pulumi.Output[str]],
    external_registry_id: Presence[str],
    parent: pulumi.Resource | None = None,
) -> dict[str, pulumi_az.authorization.RoleAssignment]:
    """Grant AcrPull to the cluster kubelet identity on every registry scope that is present.

    The owned registry and an externally supplied registry id are independent
    sources; each present source gets its own assignment under a distinct name.
    """
    scopes: dict[str, pulumi.Input[str]] = {}
    if isinstance(owned_registry_id, Present):
        scopes[OWNED_REGISTRY_ASSIGNMENT] = owned_registry_id.value
    if isinstance(external_registry_id, Present):
        scopes[EXTERNAL_REGISTRY_ASSIGNMENT] = external_registry_id.value

    if not scopes:
        return {}

    principal_id = kubelet_object_id.apply(lambda p: principal_id_or_warn(p, cluster_name))

    return {
        name: env.assignment(
            name,
            principal_id=principal_id,
            scope=scope,
            role_definition_name=ACR_PULL_ROLE,
            opts=pulumi.ResourceOptions(parent=parent),
        )
        for name, scope in scopes.items()
    }


def external_registry_scope(acr_resource_id: str | None) -> Presence[str]:
    if not acr_resource_id:
        return Absent("acrResourceId is not set")

    return Present(acr_resource_id)
