"""Compare the allocations of an IP pool with the addresses held by live pods."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from whereabouts.allocate import IPReservation
from whereabouts.retrievers import NetworkStatusError, secondary_iface_ip_value


class IPPoolLike(Protocol):
    """Anything that lists the reservations of a pool."""

    def allocations(self) -> Sequence[IPReservation]: ...


def _pod_ip(pod: Mapping[str, Any]) -> str:
    return secondary_iface_ip_value(pod)[-1]


@dataclass
class Checker:
    """Checks a pool's allocations against a list of pod manifests."""

    ip_pool: IPPoolLike
    pod_list: Sequence[Mapping[str, Any]] = field(default_factory=list)

    def _reserved_ips(self) -> Iterator[str]:
        return (str(allocation.ip) for allocation in self.ip_pool.allocations())

    def missing_ips(self) -> list[str]:
        """IPs held by pods that the pool has no allocation for.

        A pod whose address cannot be read makes the result empty.
        """
        missing = []
        for pod in self.pod_list:
            try:
                pod_ip = _pod_ip(pod)
            except NetworkStatusError:
                return []
            if pod_ip not in set(self._reserved_ips()):
                missing.append(pod_ip)
        return missing

    def stale_ips(self) -> list[str]:
        """Allocated IPs that no pod holds."""
        pod_ips = set()
        for pod in self.pod_list:
            try:
                pod_ips.add(_pod_ip(pod))
            except NetworkStatusError:
                continue
        return [reserved for reserved in self._reserved_ips() if reserved not in pod_ips]