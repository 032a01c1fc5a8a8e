"""Settings of a test run, read from the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sized
from dataclasses import dataclass

MAX_PODS_PER_NODE = 110

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _env_int(environ: Mapping[str, str], name: str, default: str) -> int:
    text = environ.get(name, default)
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer in {name}: {text!r}")
    return int(text)


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator >= 0) else -quotient


@dataclass(frozen=True)
class Configuration:
    """Where the cluster is and how much of it a test may fill."""

    kubeconfig_path: str
    num_compute_nodes: int
    fill_percent_capacity: int
    number_of_iterations: int

    def max_replicas(self, all_pods: Sized) -> int:
        """Replicas that fill the configured share of the pod slots still free."""
        free_slots = self.num_compute_nodes * MAX_PODS_PER_NODE - len(all_pods)
        return _truncating_div(free_slots * self.fill_percent_capacity, 100)


def new_config(environ: Mapping[str, str] | None = None) -> Configuration:
    """Read the configuration from ``environ`` (the process environment by default)."""
    env = os.environ if environ is None else environ
    return Configuration(
        kubeconfig_path=env.get("KUBECONFIG", "${HOME}/.kube/config"),
        num_compute_nodes=_env_int(env, "NUMBER_OF_COMPUTE_NODES", "2"),
        fill_percent_capacity=_env_int(env, "FILL_PERCENT_CAPACITY", "50"),
        number_of_iterations=_env_int(env, "NUMBER_OF_THRASH_ITER", "1"),
    )