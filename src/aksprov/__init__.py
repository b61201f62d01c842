from __future__ import annotations

import enum

ACR_NAME_PREFIX = "acr"
ACR_NAME_SUFFIX_LENGTH = 6
ADMIN_USERNAME = "aksUser"
CONFIG_API_VERSION = "aksprov/v1"
KUBE_PROVIDER_NAME = "aksK8s"
NODE_RESOURCE_GROUP_SUFFIX = "-nodes"
NODE_VM_SIZE = "Standard_D4s_v3"
WINDOWS_NODE_TAINT = "os=windows:NoSchedule"


class TagKeys(enum.StrEnum):
    AKSPROV_DEPLOYMENT = "aksprov/deployment"
    AKSPROV_MANAGED_BY = "aksprov/managed-by"


def azure_tag_key_format(tag_key: str) -> str:
    return tag_key.replace("/", ":")


class NodePoolOSType(enum.StrEnum):
    LINUX = "Linux"
    WINDOWS = "Windows"


class NodePoolMode(enum.StrEnum):
    SYSTEM = "System"
    USER = "User"
