# citegraph/graph/cycles.py

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from citegraph.graph.model import CitationGraph

logger = logging.getLogger("citegraph.graph")

Cycle = Tuple[str, ...]

_EXHAUSTED = object()


def citation_adjacency(graph: CitationGraph) -> Dict[str, List[str]]:
    """
    Map every node id to the ids it cites, in edge-list order.

    Only ``cites`` edges whose source is a known node contribute; repeated
    edges are kept. Targets need not be known nodes.
    """
    adjacency: Dict[str, List[str]] = {node_id: [] for node_id in graph.node_ids()}
    for edge in graph.edges:
        if edge.is_citation and edge.source in adjacency:
            adjacency[edge.source].append(edge.target)
    return adjacency


def find_cycles(graph: CitationGraph) -> List[Cycle]:
    """
    Find citation cycles with a depth-first search over ``cites`` edges.

    Each cycle is returned closed, e.g. ``("A", "B", "A")``; a self-citation
    is ``("A", "A")``.

    Nodes are never re-entered once fully explored, so the result is a lower
    bound on the number of simple cycles: overlapping cycles through an
    already-explored node are not re-reported. In exchange the search is
    O(V + E) and the output is fully determined by node and edge order.
    """
    adjacency = citation_adjacency(graph)

    cycles: List[Cycle] = []
    visited: Set[str] = set()
    on_stack: Set[str] = set()
    path: List[str] = []

    for root in adjacency:
        if root in visited:
            continue

        visited.add(root)
        on_stack.add(root)
        path.append(root)
        frames: List[Tuple[str, Iterator[str]]] = [(root, iter(adjacency[root]))]

        while frames:
            node, successors = frames[-1]
            nxt = next(successors, _EXHAUSTED)

            if nxt is _EXHAUSTED:
                frames.pop()
                path.pop()
                on_stack.discard(node)
                continue

            if nxt in on_stack:
                start = path.index(nxt)
                cycles.append(tuple(path[start:]) + (nxt,))
                continue

            if nxt in visited:
                continue

            visited.add(nxt)
            on_stack.add(nxt)
            path.append(nxt)
            frames.append((nxt, iter(adjacency.get(nxt, ()))))

    logger.debug("Found %d citation cycle(s)", len(cycles))
    return cycles


def cycle_edges(cycles: Iterable[Cycle]) -> Set[Tuple[str, str]]:
    """(source, target) pairs that lie on any cycle."""
    pairs: Set[Tuple[str, str]] = set()
    for cycle in cycles:
        for i in range(len(cycle) - 1):
            pairs.add((cycle[i], cycle[i + 1]))
    return pairs


def cycle_nodes(cycles: Iterable[Cycle]) -> Set[str]:
    nodes: Set[str] = set()
    for cycle in cycles:
        nodes.update(cycle)
    return nodes
