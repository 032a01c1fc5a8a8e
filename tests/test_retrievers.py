import json

import pytest

from whereabouts.retrievers import (
    NETWORK_STATUS_ANNOT,
    NetworkStatusError,
    secondary_iface_ip_value,
)


def _pod(statuses):
    return {
        "metadata": {
            "name": "pod",
            "namespace": "default",
            "annotations": {NETWORK_STATUS_ANNOT: json.dumps(statuses)},
        }
    }


def test_returns_ips_of_net1():
    pod = _pod([
        {"name": "default", "interface": "eth0", "ips": ["10.244.0.5"]},
        {"name": "wa-nad", "interface": "net1", "ips": ["10.10.0.1", "abcd::1"]},
    ])
    assert secondary_iface_ip_value(pod) == ["10.10.0.1", "abcd::1"]


def test_first_matching_interface_wins():
    pod = _pod([
        {"interface": "net1", "ips": ["10.10.0.1"]},
        {"interface": "net1", "ips": ["10.10.0.2"]},
    ])
    assert secondary_iface_ip_value(pod) == ["10.10.0.1"]


def test_missing_annotation():
    with pytest.raises(NetworkStatusError, match="networks-status"):
        secondary_iface_ip_value({"metadata": {"annotations": {}}})


def test_missing_metadata():
    with pytest.raises(NetworkStatusError):
        secondary_iface_ip_value({})


def test_no_secondary_interface():
    pod = _pod([{"interface": "eth0", "ips": ["10.244.0.5"]}])
    with pytest.raises(NetworkStatusError, match="secondary interface"):
        secondary_iface_ip_value(pod)


def test_secondary_interface_without_ips():
    pod = _pod([{"interface": "net1", "ips": []}])
    with pytest.raises(NetworkStatusError, match="does not have IPs"):
        secondary_iface_ip_value(pod)


def test_invalid_json():
    pod = {"metadata": {"annotations": {NETWORK_STATUS_ANNOT: "{not json"}}}
    with pytest.raises(NetworkStatusError):
        secondary_iface_ip_value(pod)