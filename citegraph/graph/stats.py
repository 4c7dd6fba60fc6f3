# citegraph/graph/stats.py

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from citegraph.graph.model import CitationGraph
from citegraph.models.node import Node


@dataclass(frozen=True)
class GraphStats:
    paper_count: int
    author_count: int
    citation_count: int
    avg_citations_per_paper: float
    cycle_count: Optional[int] = None


def graph_stats(
    graph: CitationGraph,
    cycles: Optional[Sequence[Tuple[str, ...]]] = None,
) -> GraphStats:
    """
    Headline numbers for a loaded graph.

    ``citation_count`` counts ``cites`` edges; ``avg_citations_per_paper``
    averages the papers' own ``citation_count`` attribute, rounded to two
    decimals (0.0 for a graph without papers).
    """
    papers = [n for n in graph.nodes if n.is_paper]
    authors = sum(1 for n in graph.nodes if n.is_author)
    cites = sum(1 for e in graph.edges if e.is_citation)

    if papers:
        counts = np.asarray([p.citation_count for p in papers], dtype=float)
        avg = round(float(counts.mean()), 2)
    else:
        avg = 0.0

    return GraphStats(
        paper_count=len(papers),
        author_count=authors,
        citation_count=cites,
        avg_citations_per_paper=avg,
        cycle_count=None if cycles is None else len(cycles),
    )


def _result_key(node: Node):
    if node.is_paper:
        if node.year is not None:
            return (0, 0, -node.year)
        return (0, 1, 0)
    if node.is_author:
        return (1, (node.name or "").casefold())
    return (2,)


def sort_results(nodes: Iterable[Node]) -> List[Node]:
    """
    Order nodes for a result list.

    Papers come first, newest first, with undated papers after dated ones;
    then authors by name; then everything else. Ties keep input order.
    """
    return sorted(nodes, key=_result_key)


def list_results(
    graph: CitationGraph,
    highlighted: Optional[AbstractSet[str]] = None,
) -> List[Node]:
    """
    Nodes to show in a result list: everything when no filter is active
    (``highlighted`` is None), otherwise just the highlighted ids.
    """
    nodes = graph.unique_nodes()
    if highlighted is not None:
        nodes = (n for n in nodes if n.id in highlighted)
    return sort_results(nodes)
