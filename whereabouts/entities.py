"""Builders for the pod, stateful set and replica set manifests used against a cluster."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

TEST_IMAGE = "quay.io/dougbtv/alpine:latest"
NETWORK_ATTACHMENT_ANNOT = "k8s.v1.cni.cncf.io/networks"
SAMPLE_POD_NAME = "samplepod"


def _container_cmd() -> list[str]:
    return ["/bin/ash", "-c", "trap : TERM INT; sleep infinity & wait"]


def _pod_spec(container_name: str) -> dict[str, Any]:
    return {
        "containers": [
            {"name": container_name, "command": _container_cmd(), "image": TEST_IMAGE},
        ]
    }


def _pod_meta(
    pod_name: str,
    namespace: str,
    labels: Mapping[str, str] | None,
    annotations: Mapping[str, str] | None,
) -> dict[str, Any]:
    meta: dict[str, Any] = {"name": pod_name, "namespace": namespace}
    if labels:
        meta["labels"] = dict(labels)
    if annotations:
        meta["annotations"] = dict(annotations)
    return meta


def pod_object(
    pod_name: str,
    namespace: str,
    labels: Mapping[str, str] | None,
    annotations: Mapping[str, str] | None,
) -> dict[str, Any]:
    """A pod manifest running the test image."""
    return {
        "metadata": _pod_meta(pod_name, namespace, labels, annotations),
        "spec": _pod_spec(SAMPLE_POD_NAME),
    }


def stateful_set_spec(
    stateful_set_name: str,
    namespace: str,
    service_name: str,
    replica_number: int,
    annotations: Mapping[str, str] | None,
) -> dict[str, Any]:
    """A stateful set manifest whose pods are selected by ``app=<service_name>``."""
    web_app_labels = {"app": service_name}
    return {
        "metadata": {"name": service_name},
        "spec": {
            "replicas": int(replica_number),
            "selector": {"matchLabels": dict(web_app_labels)},
            "template": {
                "metadata": _pod_meta(stateful_set_name, namespace, web_app_labels, annotations),
                "spec": _pod_spec(stateful_set_name),
            },
            "serviceName": service_name,
            "podManagementPolicy": "Parallel",
        },
    }


def replica_set_object(
    replica_count: int,
    rs_name: str,
    namespace: str,
    labels: Mapping[str, str] | None,
    annotations: Mapping[str, str] | None,
) -> dict[str, Any]:
    """A replica set manifest whose pods carry ``labels`` and ``annotations``."""
    template_meta: dict[str, Any] = {"namespace": namespace}
    if labels:
        template_meta["labels"] = dict(labels)
    if annotations:
        template_meta["annotations"] = dict(annotations)
    metadata: dict[str, Any] = {"name": rs_name, "namespace": namespace}
    if labels:
        metadata["labels"] = dict(labels)
    return {
        "apiVersion": "v1",
        "kind": "ReplicaSet",
        "metadata": metadata,
        "spec": {
            "replicas": int(replica_count),
            "selector": {"matchLabels": dict(labels or {})},
            "template": {
                "metadata": template_meta,
                "spec": _pod_spec(SAMPLE_POD_NAME),
            },
        },
    }


def replica_set_query(rs_name: str) -> str:
    """The label selector matching the pods of a replica set."""
    return "tier=" + rs_name


def pod_network_selection_elements(*args: str) -> dict[str, str]:
    """Annotations attaching a pod to the given networks."""
    return {NETWORK_ATTACHMENT_ANNOT: ",".join(args)}