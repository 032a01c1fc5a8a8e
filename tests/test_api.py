import ipaddress

import pytest

from whereabouts.api import (
    GROUP_NAME,
    KNOWN_TYPES,
    SCHEME_GROUP_VERSION,
    GroupVersion,
    IPAllocation,
    IPPool,
    IPPoolList,
    IPPoolSpec,
    OverlappingRangeIPReservation,
    OverlappingRangeIPReservationList,
    OverlappingRangeIPReservationSpec,
    kind,
    resource,
)


def test_group_name():
    assert GROUP_NAME == "whereabouts.cni.cncf.io"
    assert SCHEME_GROUP_VERSION == GroupVersion("whereabouts.cni.cncf.io", "v1alpha1")


def test_group_version_string():
    group_version = GroupVersion("whereabouts.cni.cncf.io", "v1alpha1")
    assert str(group_version) == "whereabouts.cni.cncf.io/v1alpha1"
    assert str(SCHEME_GROUP_VERSION) == str(group_version)


def test_kind_is_group_qualified():
    assert kind("IPPool") == ("whereabouts.cni.cncf.io", "IPPool")


def test_resource_is_group_qualified():
    assert resource("ippools") == ("whereabouts.cni.cncf.io", "ippools")


def test_known_types_registered():
    pool = IPPool.from_dict({"spec": {"range": "10.0.0.0/8"}})
    assert type(pool) is KNOWN_TYPES[kind("IPPool")[1]]
    reservation = OverlappingRangeIPReservation.from_dict({"spec": {"containerid": "cid"}})
    assert type(reservation) is KNOWN_TYPES[kind("OverlappingRangeIPReservation")[1]]
    assert KNOWN_TYPES[kind("IPPoolList")[1]] is IPPoolList
    assert KNOWN_TYPES[kind("OverlappingRangeIPReservationList")[1]] is OverlappingRangeIPReservationList


def test_allocation_omits_empty_podref():
    assert IPAllocation(container_id="abc").to_dict() == {"id": "abc"}


def test_allocation_keeps_podref():
    allocation = IPAllocation(container_id="abc", pod_ref="default/pod1:fakeUID")
    assert allocation.to_dict() == {"id": "abc", "podref": "default/pod1:fakeUID"}
    assert IPAllocation.from_dict(allocation.to_dict()) == allocation


def test_ippool_round_trip():
    pool = IPPool(
        metadata={"name": "10.10.0.0-16", "namespace": "kube-system"},
        spec=IPPoolSpec(
            range="10.10.0.0/16",
            allocations={"1": IPAllocation("cid", "default/pod:uid")},
        ),
        api_version="whereabouts.cni.cncf.io/v1alpha1",
        kind="IPPool",
    )
    data = pool.to_dict()
    assert data["spec"]["range"] == "10.10.0.0/16"
    assert data["spec"]["allocations"]["1"] == {"id": "cid", "podref": "default/pod:uid"}
    assert IPPool.from_dict(data) == pool


def test_ippool_to_dict_omits_empty_type_meta_but_keeps_allocations():
    data = IPPool(spec=IPPoolSpec(range="192.168.1.0/24")).to_dict()
    assert "apiVersion" not in data
    assert "kind" not in data
    assert data["spec"]["allocations"] == {}


def test_ippool_from_dict_tolerates_missing_spec():
    pool = IPPool.from_dict({"metadata": {"name": "p"}})
    assert pool.spec.range == ""
    assert pool.spec.allocations == {}
    assert pool.metadata == {"name": "p"}


def test_ippool_from_dict_tolerates_null_allocations():
    pool = IPPool.from_dict({"spec": {"range": "10.0.0.0/8", "allocations": None}})
    assert pool.spec.allocations == {}


def test_parse_cidr_returns_address_and_network():
    ip, network = IPPool(spec=IPPoolSpec(range="192.168.1.5/24")).parse_cidr()
    assert ip == ipaddress.ip_address("192.168.1.5")
    assert network == ipaddress.ip_network("192.168.1.0/24")


def test_parse_cidr_ipv6():
    ip, network = IPPool(spec=IPPoolSpec(range="2001::1/116")).parse_cidr()
    assert ip == ipaddress.ip_address("2001::1")
    assert network.prefixlen == 116
    assert ip in network


@pytest.mark.parametrize("text", ["192.168.1.5", "192.168.1.0/123", "not-an-ip/24", ""])
def test_parse_cidr_rejects_invalid(text):
    with pytest.raises(ValueError):
        IPPool(spec=IPPoolSpec(range=text)).parse_cidr()


def test_overlapping_reservation_round_trip():
    reservation = OverlappingRangeIPReservation(
        metadata={"name": "10.10.0.1"},
        spec=OverlappingRangeIPReservationSpec(container_id="cid", pod_ref="default/pod:uid"),
    )
    data = reservation.to_dict()
    assert data["spec"] == {"containerid": "cid", "podref": "default/pod:uid"}
    assert OverlappingRangeIPReservation.from_dict(data) == reservation


def test_overlapping_reservation_omits_empty_podref():
    data = OverlappingRangeIPReservation(spec=OverlappingRangeIPReservationSpec(container_id="cid")).to_dict()
    assert data["spec"] == {"containerid": "cid"}