from __future__ import annotations

import dataclasses
import typing

import pulumi
import pulumi_azure_native as pulumi_az

import aksprov

DEFAULT_MIN_COUNT = 1
DEFAULT_MAX_COUNT = 4
DEFAULT_INITIAL_COUNT = 1
DEFAULT_MAX_PODS = 30
DEFAULT_OS_DISK_SIZE_GB = 30


@dataclasses.dataclass(frozen=True)
class NodePoolSpec:
    name: str
    os_type: aksprov.NodePoolOSType
    mode: aksprov.NodePoolMode
    vnet_subnet_id: pulumi.Input[str]
    vm_size: str = aksprov.NODE_VM_SIZE
    os_disk_type: str = "Ephemeral"
    os_disk_size_gb: int = DEFAULT_OS_DISK_SIZE_GB
    min_count: int = DEFAULT_MIN_COUNT
    max_count: int = DEFAULT_MAX_COUNT
    initial_count: int = DEFAULT_INITIAL_COUNT
    max_pods: int = DEFAULT_MAX_PODS
    enable_auto_scaling: bool = True
    node_taints: list[str] = dataclasses.field(default_factory=list)
    node_labels: dict[str, str] = dataclasses.field(default_factory=dict)

    def __post_init__(self):
        if not self.min_count <= self.initial_count <= self.max_count:
            msg = (
                f"node pool {self.name!r} violates min_count <= initial_count <= max_count "
                f"({self.min_count} <= {self.initial_count} <= {self.max_count})"
            )
            raise ValueError(msg)

        if self.os_type == aksprov.NodePoolOSType.WINDOWS and aksprov.WINDOWS_NODE_TAINT not in self.node_taints:
            msg = f"windows node pool {self.name!r} must carry the {aksprov.WINDOWS_NODE_TAINT!r} taint"
            raise ValueError(msg)

    def agent_pool_profile(self) -> pulumi_az.containerservice.ManagedClusterAgentPoolProfileArgs:
        """Render this pool for the managed cluster's inline agentPoolProfiles."""
        return pulumi_az.containerservice.ManagedClusterAgentPoolProfileArgs(
            name=self.name,
            mode=str(self.mode),
            os_type=str(self.os_type),
            vnet_subnet_id=self.vnet_subnet_id,
            type="VirtualMachineScaleSets",
            **self._sizing(),
        )

    def agent_pool_args(self) -> dict[str, typing.Any]:
        """Render this pool as keyword arguments for a standalone AgentPool resource."""
        return {
            "agent_pool_name": self.name,
            "mode": str(self.mode),
            "os_type": str(self.os_type),
            "vnet_subnet_id": self.vnet_subnet_id,
            "type": "VirtualMachineScaleSets",
        } | self._sizing()

    def _sizing(self) -> dict[str, typing.Any]:
        sizing = {
            "count": self.initial_count,
            "enable_auto_scaling": self.enable_auto_scaling,
            "min_count": self.min_count,
            "max_count": self.max_count,
            "max_pods": self.max_pods,
            "node_labels": self.node_labels,
            "os_disk_type": self.os_disk_type,
            "os_disk_size_gb": self.os_disk_size_gb,
            "vm_size": self.vm_size,
        }
        if self.node_taints:
            sizing["node_taints"] = self.node_taints

        return sizing


def default_linux_pool(vnet_subnet_id: pulumi.Input[str]) -> NodePoolSpec:
    return NodePoolSpec(
        name="lin",
        os_type=aksprov.NodePoolOSType.LINUX,
        mode=aksprov.NodePoolMode.SYSTEM,
        vnet_subnet_id=vnet_subnet_id,
    )


def windows_pool(vnet_subnet_id: pulumi.Input[str]) -> NodePoolSpec:
    return NodePoolSpec(
        name="win",
        os_type=aksprov.NodePoolOSType.WINDOWS,
        mode=aksprov.NodePoolMode.USER,
        vnet_subnet_id=vnet_subnet_id,
        node_taints=[aksprov.WINDOWS_NODE_TAINT],
    )


def validate_system_pools(pools: list[NodePoolSpec]) -> None:
    system_pools = [p.name for p in pools if p.mode == aksprov.NodePoolMode.SYSTEM]
    if len(system_pools) != 1:
        msg = f"expected exactly one System node pool, found {len(system_pools)}: {system_pools}"
        raise ValueError(msg)
