"""IP address assignment and release over a range and a list of reservations."""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Union

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _to_ip(value: IPAddress | str | None) -> IPAddress | None:
    if value is None:
        return None
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    return ipaddress.ip_address(value)


def _to_network(value: IPNetwork | str) -> IPNetwork:
    if isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return value
    return ipaddress.ip_network(value, strict=False)


@dataclass
class IPReservation:
    """An IP reserved for a pod and container."""

    ip: IPAddress
    container_id: str = ""
    pod_ref: str = ""
    is_allocated: bool = False

    def __post_init__(self) -> None:
        self.ip = _to_ip(self.ip)


@dataclass
class RangeConfiguration:
    """A CIDR range with optional bounds and excluded subnets."""

    range: str
    range_start: IPAddress | None = None
    range_end: IPAddress | None = None
    omit_ranges: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.range_start = _to_ip(self.range_start)
        self.range_end = _to_ip(self.range_end)


class AssignmentError(Exception):
    """No free IP could be found in the requested range."""

    def __init__(self, first_ip: IPAddress, last_ip: IPAddress, ipnet: IPNetwork, exclude_ranges: Iterable[str]):
        self.first_ip = first_ip
        self.last_ip = last_ip
        self.ipnet = ipnet
        self.exclude_ranges = list(exclude_ranges)
        super().__init__(
            f"Could not allocate IP in range: ip: {first_ip} / - {last_ip} / range: {ipnet} "
            f"/ excludeRanges: [{' '.join(self.exclude_ranges)}]"
        )


def assign_ip(
    range_config: RangeConfiguration,
    reserve_list: Sequence[IPReservation],
    container_id: str,
    pod_ref: str,
) -> tuple[ipaddress.IPv4Interface | ipaddress.IPv6Interface, list[IPReservation]]:
    """Assign an IP from the configured range; return it with its prefix and the updated reservations."""
    ipnet = _to_network(range_config.range)
    new_ip, updated = iterate_for_assignment(
        ipnet,
        range_config.range_start,
        range_config.range_end,
        reserve_list,
        range_config.omit_ranges,
        container_id,
        pod_ref,
    )
    return ipaddress.ip_interface(f"{new_ip}/{ipnet.prefixlen}"), updated


def deallocate_ip(reserve_list: Sequence[IPReservation], pod_ref: str) -> tuple[list[IPReservation], IPAddress]:
    """Release the IP held by ``pod_ref``; return the updated reservations and the released IP."""
    updated, released = iterate_for_deallocation(reserve_list, pod_ref, _matching_reservation_index)
    logger.debug("Deallocating given previously used IP: %s", released)
    return updated, released


def iterate_for_deallocation(
    reserve_list: Sequence[IPReservation],
    pod_ref: str,
    matching_function: Callable[[Sequence[IPReservation], str], int] | None = None,
) -> tuple[list[IPReservation], IPAddress]:
    """Remove the reservation that ``matching_function`` finds for ``pod_ref``.

    The last reservation takes the place of the removed one.
    """
    matcher = matching_function or _matching_reservation_index
    index = matcher(reserve_list, pod_ref)
    if index < 0:
        raise LookupError(f"did not find reserved IP for container {pod_ref}")
    released = reserve_list[index].ip
    updated = list(reserve_list)
    updated[index] = updated[-1]
    updated.pop()
    return updated, released


def _matching_reservation_index(reserve_list: Sequence[IPReservation], pod_ref: str) -> int:
    return next((index for index, item in enumerate(reserve_list) if item.pod_ref == pod_ref), -1)


def _usable_range(
    ipnet: IPNetwork, range_start: IPAddress | None, range_end: IPAddress | None
) -> tuple[IPAddress, IPAddress]:
    """First and last assignable IPs: the network without its network and broadcast
    addresses, narrowed by range_start and range_end where they fall inside it."""
    first = int(ipnet.network_address) + 1
    last = int(ipnet.broadcast_address) - 1
    if first > last:
        raise ValueError(f"network {ipnet} has no assignable addresses")
    if range_start is not None and range_start.version == ipnet.version and first <= int(range_start) <= last:
        first = int(range_start)
    if range_end is not None and range_end.version == ipnet.version and first <= int(range_end) <= last:
        last = int(range_end)
    address_type = type(ipnet.network_address)
    return address_type(first), address_type(last)


def _parse_excluded_range(text: str) -> IPNetwork:
    try:
        return ipaddress.ip_network(text, strict=False)
    except ValueError as err:
        cidr_error = err
    try:
        address = ipaddress.ip_address(text)
    except ValueError:
        raise cidr_error from None
    return ipaddress.ip_network(f"{address}/{address.max_prefixlen}")


def _skip_excluded_subnets(ip: IPAddress, excluded: Sequence[IPNetwork]) -> IPAddress | None:
    for subnet in excluded:
        if ip in subnet:
            logger.debug("excluding %s and moving to the end of the excluded range: %s", subnet, subnet.broadcast_address)
            return subnet.broadcast_address
    return None


def iterate_for_assignment(
    ipnet: IPNetwork | str,
    range_start: IPAddress | str | None,
    range_end: IPAddress | str | None,
    reserve_list: Sequence[IPReservation] | None,
    exclude_ranges: Sequence[str] | None,
    container_id: str,
    pod_ref: str,
) -> tuple[IPAddress, list[IPReservation]]:
    """Find an IP for ``pod_ref``; return it and the reservations including it.

    An IP already reserved for the pod is returned as it is. Otherwise the
    lowest free IP of the usable range outside every excluded subnet is taken.
    """
    network = _to_network(ipnet)
    reservations = list(reserve_list or ())
    excludes = list(exclude_ranges or ())
    first_ip, last_ip = _usable_range(network, _to_ip(range_start), _to_ip(range_end))
    logger.debug(
        "IterateForAssignment input >> range_start: %s | range_end: %s | ipnet: %s | first IP: %s | last IP: %s",
        range_start, range_end, network, first_ip, last_ip,
    )

    for reservation in reservations:
        if reservation.pod_ref == pod_ref:
            logger.debug("Returning reserved IP: |%s %s|", reservation.ip, pod_ref)
            return reservation.ip, reservations
    reserved = {reservation.ip for reservation in reservations}

    excluded = []
    for text in excludes:
        try:
            excluded.append(_parse_excluded_range(text))
        except ValueError as err:
            raise ValueError(f'could not parse exclude range, err: "{err}"') from err

    address_type = type(network.network_address)
    current, stop = int(first_ip), int(last_ip)
    while current <= stop:
        candidate = address_type(current)
        if candidate in reserved:
            current += 1
            continue
        skip_to = _skip_excluded_subnets(candidate, excluded)
        if skip_to is not None:
            current = int(skip_to) + 1
            continue
        logger.debug("Reserving IP: |%s %s|", candidate, pod_ref)
        return candidate, [*reservations, IPReservation(candidate, container_id, pod_ref)]

    raise AssignmentError(first_ip, last_ip, network, excludes)