from __future__ import annotations

import dataclasses
import typing

import deepmerge  # type: ignore
import pulumi
import pulumi_azure_native as pulumi_az
import yaml

import aksprov
import aksprov.azure_roles
import aksprov.junkdrawer
import aksprov.paths

if typing.TYPE_CHECKING:
    import pathlib

_BOOL_KEYS = ("include_container_registry",)
_STRING_KEYS = ("kubernetes_version", "acr_resource_id", "subnet_id", "workspace_id")
_OBJECT_KEYS = ("windows", "resource_tags")


@dataclasses.dataclass(frozen=True)
class WindowsConfig:
    enabled: bool = False

    def __post_init__(self):
        _require_bool("windows.enabled", self.enabled)


@dataclasses.dataclass(frozen=True)
class ClusterConfig:
    kubernetes_version: str
    windows: WindowsConfig = dataclasses.field(default_factory=WindowsConfig)
    include_container_registry: bool = False
    acr_resource_id: str | None = None
    subnet_id: str | None = None
    workspace_id: str | None = None
    resource_tags: dict[str, str] | None = None

    def __post_init__(self):
        if not self.kubernetes_version:
            msg = "kubernetesVersion is required and must not be empty"
            raise ValueError(msg)

        _require_bool("includeContainerRegistry", self.include_container_registry)

    @classmethod
    def from_dict(cls, spec: dict[str, typing.Any]) -> ClusterConfig:
        spec = aksprov.junkdrawer.normalize_keys(spec)
        _reject_unknown_keys(cls, spec, "cluster")

        windows = spec.pop("windows", None) or {}
        if isinstance(windows, dict):
            windows = aksprov.junkdrawer.normalize_keys(windows)
            _reject_unknown_keys(WindowsConfig, windows, "windows")
            windows = WindowsConfig(**windows)
        spec["windows"] = windows

        if "kubernetes_version" not in spec:
            msg = "missing required configuration value 'kubernetesVersion'"
            raise ValueError(msg)

        return cls(**spec)


def read_stack_config(config: pulumi.Config) -> dict[str, typing.Any]:
    """Read the cluster keys set in the Pulumi stack configuration, skipping unset ones."""
    spec: dict[str, typing.Any] = {}

    for key in _STRING_KEYS:
        value = config.get(_camel_case(key))
        if value is not None:
            spec[key] = value

    for key in _BOOL_KEYS:
        value = config.get_bool(_camel_case(key))
        if value is not None:
            spec[key] = value

    for key in _OBJECT_KEYS:
        value = config.get_object(_camel_case(key))
        if value is not None:
            spec[key] = value

    return spec


def read_overlay(path: pathlib.Path) -> dict[str, typing.Any]:
    cfg_dict = yaml.safe_load(path.read_text()) or {}
    if cfg_dict.get("kind") != "AzureClusterConfig" or cfg_dict.get("apiVersion") != aksprov.CONFIG_API_VERSION:
        msg = (
            f"mismatched cluster config kind={cfg_dict.get('kind')!r} "
            f"apiVersion={cfg_dict.get('apiVersion')!r} in {str(path)!r}"
        )
        raise ValueError(msg)

    return aksprov.junkdrawer.normalize_keys(cfg_dict.get("spec") or {})


def load_cluster_config(config: pulumi.Config, overlay: pathlib.Path | None = None) -> ClusterConfig:
    spec = read_stack_config(config)

    if overlay is not None and overlay.exists():
        pulumi.log.info(f"Merging cluster config overlay from {overlay}")
        deepmerge.always_merger.merge(spec, read_overlay(overlay))

    return ClusterConfig.from_dict(spec)


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(word.capitalize() for word in rest)


def _require_bool(key: str, value: typing.Any) -> None:
    if not isinstance(value, bool):
        msg = f"{key} must be a boolean, got {value!r}"
        raise ValueError(msg)


def _reject_unknown_keys(cls: type, spec: dict[str, typing.Any], section: str) -> None:
    unknown = sorted(set(spec) - {field.name for field in dataclasses.fields(cls)})
    if unknown:
        msg = f"unknown {section} configuration keys: {', '.join(_camel_case(key) for key in unknown)}"
        raise ValueError(msg)


class Environment:
    """Deployment-wide naming, tagging and role-assignment helpers.

    Components receive an Environment instead of reaching for module-level
    state; the resource group name, location and subscription id may all be
    deferred values.
    """

    deployment_name: str
    resource_group_name: pulumi.Input[str]
    location: pulumi.Input[str]
    subscription_id: pulumi.Input[str]
    resource_tags: dict[str, str]

    def __init__(
        self,
        deployment_name: str,
        resource_group_name: pulumi.Input[str],
        location: pulumi.Input[str],
        subscription_id: pulumi.Input[str],
        resource_tags: dict[str, str] | None = None,
    ):
        self.deployment_name = deployment_name
        self.resource_group_name = resource_group_name
        self.location = location
        self.subscription_id = subscription_id
        self.resource_tags = resource_tags or {}

    @classmethod
    def autoload(cls, config: pulumi.Config, resource_tags: dict[str, str] | None = None) -> Environment:
        resource_group = pulumi_az.resources.get_resource_group_output(
            resource_group_name=config.require("resourceGroupName"),
        )
        client_config = pulumi_az.authorization.get_client_config_output()

        return cls(
            deployment_name=f"{pulumi.get_project()}-{pulumi.get_stack()}",
            resource_group_name=resource_group.name,
            location=resource_group.location,
            subscription_id=client_config.subscription_id,
            resource_tags=resource_tags,
        )

    @property
    def required_tags(self) -> dict[str, str]:
        return self.resource_tags | {
            aksprov.azure_tag_key_format(str(aksprov.TagKeys.AKSPROV_DEPLOYMENT)): self.deployment_name,
        }

    def resource_name(self, kind: str) -> str:
        return f"{kind}-{self.deployment_name}"

    def node_resource_group_name(self) -> pulumi.Output[str]:
        return pulumi.Output.from_input(self.resource_group_name).apply(
            lambda name: f"{name}{aksprov.NODE_RESOURCE_GROUP_SUFFIX}"
        )

    def assignment(
        self,
        name: str,
        principal_id: pulumi.Input[str],
        scope: pulumi.Input[str],
        role_definition_name: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> pulumi_az.authorization.RoleAssignment:
        definition_id = aksprov.azure_roles.role_definition_id(role_definition_name)

        return pulumi_az.authorization.RoleAssignment(
            name,
            principal_id=principal_id,
            principal_type="ServicePrincipal",
            role_definition_id=pulumi.Output.concat(
                "/subscriptions/",
                self.subscription_id,
                "/providers/Microsoft.Authorization/roleDefinitions/",
                definition_id,
            ),
            scope=scope,
            opts=opts,
        )


def autoload_cluster_config(paths: aksprov.paths.Paths | None = None) -> ClusterConfig:
    paths = paths or aksprov.paths.Paths()
    overlay = paths.cluster_yaml(pulumi.get_stack()) if paths.is_configured else None

    return load_cluster_config(pulumi.Config(), overlay)
