"""Layered layout for the canvas "auto layout" button.

Ranks come from networkx: strongly connected components are collapsed with
``nx.condensation`` and the resulting DAG is split into ranks by
``nx.topological_generations``. Nodes in a rank keep their load order and
are spaced on a fixed grid. Positions returned are top-left corners, as the
canvas expects.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Literal, Tuple

import networkx as nx

from ..schemas.topology import Position, TopologyEdge, TopologyNode

NODE_WIDTH = 220
NODE_HEIGHT = 70
RANK_SEP = 80
NODE_SEP = 55

Direction = Literal["TB", "LR"]


def ranks(g: nx.DiGraph) -> List[List[str]]:
    """Nodes grouped by rank; members of a cycle share one rank."""
    order = {n: i for i, n in enumerate(g.nodes)}
    dag = nx.condensation(g)
    return [
        sorted((n for c in generation for n in dag.nodes[c]["members"]), key=order.__getitem__)
        for generation in nx.topological_generations(dag)
    ]


def layered_layout(node_ids: Iterable[str], edges: Iterable[Tuple[str, str]],
                   direction: Direction = "TB") -> Dict[str, Tuple[float, float]]:
    """Centre point of every node."""
    g = nx.DiGraph()
    g.add_nodes_from(node_ids)
    g.add_edges_from((u, v) for u, v in edges if u != v and u in g and v in g)
    if not g:
        return {}

    layers = ranks(g)
    if direction == "TB":
        along, across = NODE_WIDTH + NODE_SEP, NODE_HEIGHT + RANK_SEP
        first_along, first_across = NODE_WIDTH / 2, NODE_HEIGHT / 2
    else:
        along, across = NODE_HEIGHT + NODE_SEP, NODE_WIDTH + RANK_SEP
        first_along, first_across = NODE_HEIGHT / 2, NODE_WIDTH / 2

    widest = max(len(layer) for layer in layers)
    centers: Dict[str, Tuple[float, float]] = {}
    for r, layer in enumerate(layers):
        offset = (widest - len(layer)) * along / 2
        for i, n in enumerate(layer):
            a = first_along + offset + i * along
            b = first_across + r * across
            centers[n] = (a, b) if direction == "TB" else (b, a)
    return centers


def layout_nodes(nodes: List[TopologyNode], edges: List[TopologyEdge],
                 direction: Direction = "TB") -> List[TopologyNode]:
    centers = layered_layout((n.id for n in nodes), ((e.source, e.target) for e in edges), direction)
    return [
        n.model_copy(update={
            "position": Position(x=centers[n.id][0] - NODE_WIDTH / 2, y=centers[n.id][1] - NODE_HEIGHT / 2),
        })
        for n in nodes
    ]
