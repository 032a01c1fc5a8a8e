"""Read the addresses a pod got on its secondary interface from its network-status annotation."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any

NETWORK_STATUS_ANNOT = "k8s.v1.cni.cncf.io/network-status"
SECONDARY_INTERFACE = "net1"


class NetworkStatusError(ValueError):
    """The pod's network status does not hold the requested addresses."""


def _first_matching(
    statuses: Iterable[Mapping[str, Any]], predicate: Callable[[Mapping[str, Any]], bool]
) -> Mapping[str, Any] | None:
    return next((status for status in statuses if predicate(status)), None)


def secondary_iface_ip_value(pod: Mapping[str, Any]) -> list[str]:
    """Return the IPs listed for the pod's ``net1`` interface.

    ``pod`` is a pod manifest as a mapping; the IPs come from its
    network-status annotation.
    """
    annotations = (pod.get("metadata") or {}).get("annotations") or {}
    if NETWORK_STATUS_ANNOT not in annotations:
        raise NetworkStatusError("the pod must feature the `networks-status` annotation")

    try:
        statuses = json.loads(annotations[NETWORK_STATUS_ANNOT])
    except json.JSONDecodeError as err:
        raise NetworkStatusError(f"cannot decode the network status: {err}") from err
    if not isinstance(statuses, list):
        raise NetworkStatusError("the network status must be a list")

    secondary = _first_matching(
        (status for status in statuses if isinstance(status, Mapping)),
        lambda status: status.get("interface") == SECONDARY_INTERFACE,
    )
    if secondary is None:
        raise NetworkStatusError("the pod does not have the requested secondary interface")

    ips = list(secondary.get("ips") or [])
    if not ips:
        raise NetworkStatusError("the pod does not have IPs for its secondary interfaces")
    return ips