# whereabouts

IP address management for container networks as a plain Python library.
It picks free addresses out of a range while honouring range bounds,
excluded subnets and existing reservations, models the IP pool resources
that record those reservations, and carries a few helpers for checking a
cluster's pools against its pods.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Allocating addresses (`whereabouts.allocate`)

```python
import ipaddress

from whereabouts.allocate import deallocate_ip, iterate_for_assignment

net = ipaddress.ip_network("192.168.0.0/28")
ip, reservations = iterate_for_assignment(
    net,
    None,                      # range start: first usable address by default
    None,                      # range end: last usable address by default
    [],                        # existing IPReservation objects
    ["192.168.0.0/30"],        # excluded subnets or single addresses
    "container-id",
    "default/pod:uid",
)
print(ip)                      # 192.168.0.4

reservations, released = deallocate_ip(reservations, "default/pod:uid")
print(released)                # 192.168.0.4
```

How `iterate_for_assignment` chooses an address:

- The usable range is the network without its network and broadcast
  addresses. A range start or end is honoured only when it lies inside
  that usable range.
- If a reservation already exists for the pod reference, its address is
  returned and the reservation list is left as it is.
- Otherwise the lowest address that is neither reserved nor inside an
  excluded subnet is taken, and a new `IPReservation` for it is appended
  to the returned list. The input list is not modified.
- An exclude entry may be a CIDR or a single address (taken as a /32 or
  /128). An entry that parses as neither raises `ValueError` with a
  message starting `could not parse exclude range`.
- When no address is left, `AssignmentError` is raised; its message starts
  with `Could not allocate IP in range`.

Networks and addresses may be given as `ipaddress` objects or as strings.

`assign_ip(range_config, reserve_list, container_id, pod_ref)` does the
same from a `RangeConfiguration` (range in CIDR notation, optional
`range_start`, `range_end` and `omit_ranges`) and returns the address as
an `ipaddress` interface carrying the range's prefix length, together with
the updated reservations.

`deallocate_ip` removes the reservation of a pod reference and returns the
updated list and the released address; the last reservation takes the
place of the removed one. `iterate_for_deallocation` does the same with a
matching function of your choosing. Both raise `LookupError` when the pod
reference holds no reservation.

## Pool resources (`whereabouts.api`)

`IPPool`, `IPPoolSpec`, `IPAllocation`, `OverlappingRangeIPReservation`
and their list types are dataclasses. `IPPool`, `IPAllocation` and
`OverlappingRangeIPReservation` convert to and from the dictionary form
the cluster API stores with `to_dict()` and `from_dict()`.
`IPPool.parse_cidr()` returns the address and network written in the
pool's range and raises `ValueError` for a range that is not in CIDR
notation.

`kind(name)` and `resource(name)` qualify a name with the
`whereabouts.cni.cncf.io` group as a `(group, name)` tuple;
`SCHEME_GROUP_VERSION` is the `GroupVersion` for `v1alpha1`.

## Checking pools against pods

Pods are given as manifests in dictionary form.

`whereabouts.retrievers.secondary_iface_ip_value(pod)` returns the
addresses of the pod's `net1` interface from its
`k8s.v1.cni.cncf.io/network-status` annotation, and raises
`NetworkStatusError` when the annotation is missing or unreadable, has no
`net1` entry, or lists no addresses for it.

`whereabouts.poolconsistency.Checker(ip_pool, pod_list)` takes any object
with an `allocations()` method returning `IPReservation` objects and
compares it with the last address of each pod's secondary interface:

- `missing_ips()` lists pod addresses the pool has no allocation for. If
  any pod's address cannot be read, it returns an empty list.
- `stale_ips()` lists allocated addresses that no pod holds; pods whose
  address cannot be read are skipped.

## Test-environment helpers

`whereabouts.entities` builds manifests as dictionaries: `pod_object`,
`stateful_set_spec`, `replica_set_object`, plus `replica_set_query`
(the `tier=<name>` label selector) and `pod_network_selection_elements`
(the network attachment annotation for a list of network names).

`whereabouts.testenvironment.new_config(environ=None)` reads a
`Configuration` from a mapping, or from the process environment by
default:

| Variable                  | Default               |
|---------------------------|-----------------------|
| `KUBECONFIG`              | `${HOME}/.kube/config` |
| `NUMBER_OF_COMPUTE_NODES` | `2`                   |
| `FILL_PERCENT_CAPACITY`   | `50`                  |
| `NUMBER_OF_THRASH_ITER`   | `1`                   |

A value that is not an integer raises `ValueError`.
`Configuration.max_replicas(all_pods)` returns the given percentage of the
pod slots still free, counting 110 slots per compute node.

## What this package does not do

It is a library only. It has no command-line plugin that a container
runtime could call, no storage backend that keeps pools in a cluster, no
cluster client, and no controller or scheduled reconciliation of stale
allocations. Reservations live in the lists you pass in and get back;
keeping them anywhere is up to the caller.