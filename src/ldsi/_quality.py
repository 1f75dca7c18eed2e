"""Topology scoring: absolute structural quality and the legacy reference delta.

Near-verbatim repetition and incoherent hallucination both push a
co-occurrence graph towards a high small-world index and an off-center
density (the horseshoe effect). Structural quality therefore scores B's
own topology with a non-monotonic function: a Gaussian on density centered
on the healthy value, times a penalty on excessive small-world-ness.
"""

from __future__ import annotations

import math
from typing import Callable

from ._config import TopologyStrategy
from ._types import TopologyMetrics

TARGET_DENSITY: float = 0.35
DENSITY_WIDTH: float = 0.15
SW_KNEE: float = 0.8        # no penalty up to here
SW_SLOPE: float = 2.0       # penalty reaches 0 at SW_KNEE + 1 / SW_SLOPE = 1.3
MIN_NODES: int = 3


def density_score(density: float) -> float:
    return math.exp(-(((density - TARGET_DENSITY) / DENSITY_WIDTH) ** 2))


def small_world_penalty(small_world_index: float) -> float:
    if small_world_index <= SW_KNEE:
        return 1.0
    return max(0.0, 1.0 - (small_world_index - SW_KNEE) * SW_SLOPE)


def score_structure(
    density: float, small_world_index: float, node_count: int,
) -> float:
    """Structural quality in [0, 1]; exactly 0 for graphs under MIN_NODES."""
    if node_count < MIN_NODES:
        return 0.0
    quality = density_score(density) * small_world_penalty(small_world_index)
    return min(max(quality, 0.0), 1.0)


def structural_quality(topology: TopologyMetrics) -> float:
    return score_structure(
        topology.density, topology.small_world_index, topology.node_count,
    )


def topology_delta(topo_a: TopologyMetrics, topo_b: TopologyMetrics) -> float:
    """Reference-relative structure conservation score (strategy delta-v1).

    0.5 means B kept A's structure; higher values mean B is more connected
    and clustered than A. A B that splits into more than twice A's
    component count loses 0.2.
    """
    lcc_score = topo_b.lcc_ratio - topo_a.lcc_ratio
    clustering_score = topo_b.clustering - topo_a.clustering
    fragmentation_penalty = (
        -0.2 if topo_b.components > topo_a.components * 2 else 0.0
    )
    return (lcc_score * 0.5) + (clustering_score * 0.3) + fragmentation_penalty + 0.5


def _absolute_v2(topo_a: TopologyMetrics, topo_b: TopologyMetrics) -> float:
    return topo_b.structural_quality


_STRATEGIES: dict[
    TopologyStrategy, Callable[[TopologyMetrics, TopologyMetrics], float]
] = {
    TopologyStrategy.DELTA_V1: topology_delta,
    TopologyStrategy.ABSOLUTE_V2: _absolute_v2,
}


def topology_score(
    strategy: TopologyStrategy,
    topo_a: TopologyMetrics,
    topo_b: TopologyMetrics,
) -> float:
    """The gamma-term signal selected by strategy."""
    return _STRATEGIES[TopologyStrategy(strategy)](topo_a, topo_b)
