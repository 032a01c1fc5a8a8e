"""Custom resource types of the whereabouts.cni.cncf.io API group, version v1alpha1."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Any

GROUP_NAME = "whereabouts.cni.cncf.io"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


SCHEME_GROUP_VERSION = GroupVersion(group=GROUP_NAME, version="v1alpha1")


def kind(kind: str) -> tuple[str, str]:
    """Qualify an unqualified kind with this API group as ``(group, kind)``."""
    return (SCHEME_GROUP_VERSION.group, kind)


def resource(resource: str) -> tuple[str, str]:
    """Qualify an unqualified resource with this API group as ``(group, resource)``."""
    return (SCHEME_GROUP_VERSION.group, resource)


def _type_meta(api_version: str, kind_name: str) -> dict[str, Any]:
    meta: dict[str, Any] = {}
    if api_version:
        meta["apiVersion"] = api_version
    if kind_name:
        meta["kind"] = kind_name
    return meta


@dataclass
class IPAllocation:
    """The pod/container that owns one allocated IP."""

    container_id: str = ""
    pod_ref: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.container_id}
        if self.pod_ref:
            data["podref"] = self.pod_ref
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IPAllocation:
        return cls(container_id=data.get("id", ""), pod_ref=data.get("podref", ""))


@dataclass
class IPPoolSpec:
    """Desired state of an IP pool: its CIDR range and the allocations keyed by offset."""

    range: str = ""
    allocations: dict[str, IPAllocation] = field(default_factory=dict)


@dataclass
class IPPool:
    """An IP pool resource."""

    metadata: dict[str, Any] = field(default_factory=dict)
    spec: IPPoolSpec = field(default_factory=IPPoolSpec)
    api_version: str = ""
    kind: str = ""

    def parse_cidr(
        self,
    ) -> tuple[ipaddress.IPv4Address | ipaddress.IPv6Address, ipaddress.IPv4Network | ipaddress.IPv6Network]:
        """Return the address and the network written in the pool's range."""
        text = self.spec.range
        if "/" not in text:
            raise ValueError(f"invalid CIDR address: {text}")
        try:
            iface = ipaddress.ip_interface(text)
        except ValueError as err:
            raise ValueError(f"invalid CIDR address: {text}") from err
        return iface.ip, iface.network

    def to_dict(self) -> dict[str, Any]:
        return {
            **_type_meta(self.api_version, self.kind),
            "metadata": dict(self.metadata),
            "spec": {
                "range": self.spec.range,
                "allocations": {key: value.to_dict() for key, value in self.spec.allocations.items()},
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IPPool:
        spec = data.get("spec") or {}
        allocations = spec.get("allocations") or {}
        return cls(
            metadata=dict(data.get("metadata") or {}),
            spec=IPPoolSpec(
                range=spec.get("range", ""),
                allocations={key: IPAllocation.from_dict(value) for key, value in allocations.items()},
            ),
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
        )


@dataclass
class IPPoolList:
    """A list of IP pools."""

    items: list[IPPool] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""


@dataclass
class OverlappingRangeIPReservationSpec:
    """Owner of an IP reserved across overlapping ranges."""

    container_id: str = ""
    pod_ref: str = ""


@dataclass
class OverlappingRangeIPReservation:
    """A reservation of one IP across all overlapping ranges."""

    metadata: dict[str, Any] = field(default_factory=dict)
    spec: OverlappingRangeIPReservationSpec = field(default_factory=OverlappingRangeIPReservationSpec)
    api_version: str = ""
    kind: str = ""

    def to_dict(self) -> dict[str, Any]:
        spec: dict[str, Any] = {"containerid": self.spec.container_id}
        if self.spec.pod_ref:
            spec["podref"] = self.spec.pod_ref
        return {
            **_type_meta(self.api_version, self.kind),
            "metadata": dict(self.metadata),
            "spec": spec,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OverlappingRangeIPReservation:
        spec = data.get("spec") or {}
        return cls(
            metadata=dict(data.get("metadata") or {}),
            spec=OverlappingRangeIPReservationSpec(
                container_id=spec.get("containerid", ""),
                pod_ref=spec.get("podref", ""),
            ),
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
        )


@dataclass
class OverlappingRangeIPReservationList:
    """A list of overlapping range IP reservations."""

    items: list[OverlappingRangeIPReservation] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""


KNOWN_TYPES: dict[str, type] = {
    "IPPool": IPPool,
    "IPPoolList": IPPoolList,
    "OverlappingRangeIPReservation": OverlappingRangeIPReservation,
    "OverlappingRangeIPReservationList": OverlappingRangeIPReservationList,
}