"""Co-occurrence graph construction and topology metrics.

Nodes are unique tokens in first-occurrence order. Each token at position i
links to the tokens at i+1 .. i+W, W = min(MAX_WINDOW, remaining length),
with weight 1 / (distance + 1) summed over repeated pairs. Self-pairs are
skipped.

Edges keep their direction (earlier token -> later token), and density is
taken over the directed edge count. Connectivity, clustering and path
length are computed on the undirected view, where u->v and v->u collapse
into one unweighted edge.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import networkx as nx

from ._quality import MIN_NODES, score_structure
from ._types import TopologyMetrics

logger = logging.getLogger(__name__)

MAX_WINDOW: int = 15

CooccurrenceGraph = nx.DiGraph


def build_graph(tokens: Sequence[str]) -> CooccurrenceGraph:
    """Build the weighted, directed co-occurrence graph of a token sequence."""
    graph = nx.DiGraph()
    graph.add_nodes_from(dict.fromkeys(tokens))

    n = len(tokens)
    for i, source in enumerate(tokens):
        last = min(i + MAX_WINDOW, n - 1)
        for j in range(i + 1, last + 1):
            target = tokens[j]
            if target == source:
                continue
            weight = 1.0 / ((j - i) + 1)
            if graph.has_edge(source, target):
                graph[source][target]["weight"] += weight
            else:
                graph.add_edge(source, target, weight=weight)

    return graph


def _empty_metrics(node_count: int, edge_count: int, components: int, lcc_size: int) -> TopologyMetrics:
    return TopologyMetrics(
        node_count=node_count,
        edge_count=edge_count,
        density=0.0,
        components=components,
        lcc_size=lcc_size,
        lcc_ratio=0.0,
        clustering=0.0,
        avg_path_length=0.0,
        small_world_index=0.0,
        avg_degree=0.0,
        structural_quality=0.0,
    )


def _mean_clustering(undirected: nx.Graph) -> float:
    """Mean local transitivity over nodes of degree >= 2, 0 if none qualify."""
    local = nx.clustering(undirected)
    qualifying = [local[v] for v in undirected if undirected.degree(v) >= 2]
    if not qualifying:
        return 0.0
    return math.fsum(qualifying) / len(qualifying)


def topology(graph: CooccurrenceGraph) -> TopologyMetrics:
    """Derive structural metrics from a co-occurrence graph.

    Graphs with fewer than MIN_NODES nodes report every ratio metric as 0.
    """
    node_count = graph.number_of_nodes()
    edge_count = graph.number_of_edges()
    if node_count == 0:
        return _empty_metrics(0, edge_count, 0, 0)

    undirected = graph.to_undirected()
    # first component of maximal size, in node insertion order
    components = list(nx.connected_components(undirected))
    largest = max(components, key=len)

    if node_count < MIN_NODES:
        return _empty_metrics(node_count, edge_count, len(components), len(largest))

    density = edge_count / (node_count * (node_count - 1))
    lcc_ratio = len(largest) / node_count
    clustering = _mean_clustering(undirected)

    if len(largest) > 1:
        avg_path_length = nx.average_shortest_path_length(
            undirected.subgraph(largest),
        )
    else:
        avg_path_length = 0.0

    small_world_index = (
        clustering / avg_path_length if avg_path_length > 0.0 else 0.0
    )
    avg_degree = (2 * undirected.number_of_edges()) / node_count

    quality = score_structure(density, small_world_index, node_count)

    logger.debug(
        "topology nodes=%d edges=%d density=%.4f clustering=%.4f "
        "path=%.4f sw=%.4f quality=%.4f",
        node_count, edge_count, density, clustering,
        avg_path_length, small_world_index, quality,
    )

    return TopologyMetrics(
        node_count=node_count,
        edge_count=edge_count,
        density=density,
        components=len(components),
        lcc_size=len(largest),
        lcc_ratio=lcc_ratio,
        clustering=clustering,
        avg_path_length=avg_path_length,
        small_world_index=small_world_index,
        avg_degree=avg_degree,
        structural_quality=quality,
    )


def build_graph_and_metrics(tokens: Sequence[str]) -> TopologyMetrics:
    """Build the co-occurrence graph of tokens and return its metrics."""
    return topology(build_graph(tokens))
