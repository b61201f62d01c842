from __future__ import annotations

import base64
import re

import aksprov

_REGISTRY_NAME_SEPARATORS = re.compile(r"[^a-zA-Z0-9]")


def decode_base64_text(encoded: str) -> str:
    return base64.b64decode(encoded).decode("utf-8")


def registry_name_from_uuid(
    uuid: str,
    prefix: str = aksprov.ACR_NAME_PREFIX,
    length: int = aksprov.ACR_NAME_SUFFIX_LENGTH,
) -> str:
    """Build a container registry name from a UUID.

    Registry names must be alphanumeric, so every separator is stripped before
    truncating. The result is ``prefix`` followed by ``length`` characters of the
    UUID; collisions across deployments are possible but unlikely.
    """
    suffix = _REGISTRY_NAME_SEPARATORS.sub("", uuid).lower()[:length]
    if len(suffix) < length:
        msg = f"uuid {uuid!r} is too short to derive a {length}-character registry suffix"
        raise ValueError(msg)

    return f"{prefix}{suffix}"


def normalize_keys(spec: dict) -> dict:
    """Convert camelCase and kebab-case mapping keys to snake_case, one level deep."""
    return {_snake_case(key): value for key, value in spec.items()}


def _snake_case(key: str) -> str:
    key = key.replace("-", "_")
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()
