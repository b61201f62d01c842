"""Explicit presence/absence for values that only exist under some configurations.

Conditionally declared resources (the Windows node pool, the owned container
registry) and best-effort provider fields (the kubelet identity object id) are
wrapped in ``Present`` or ``Absent`` so callers branch on presence instead of
on ``None`` or an empty string.
"""

from __future__ import annotations

import dataclasses
import typing

T = typing.TypeVar("T")


@dataclasses.dataclass(frozen=True)
class Present(typing.Generic[T]):
    value: T


@dataclasses.dataclass(frozen=True)
class Absent:
    reason: str = ""


Presence = Present[T] | Absent


def present_or_absent(value: T | None, reason: str = "") -> Presence[T]:
    if value is None or value == "":
        return Absent(reason)

    return Present(value)


def is_present(presence: Presence[typing.Any]) -> bool:
    return isinstance(presence, Present)


def unwrap_or(presence: Presence[T], default: T) -> T:
    if isinstance(presence, Present):
        return presence.value

    return default
