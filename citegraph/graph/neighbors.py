# citegraph/graph/neighbors.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from citegraph.graph.model import CitationGraph
from citegraph.graph.schema import Direction, Relationship
from citegraph.models.node import Node


@dataclass(frozen=True)
class Neighbor:
    node: Node
    relationship: Relationship
    direction: Direction


@dataclass(frozen=True)
class CitationContext:
    """Sentences in which ``citing`` cites the inspected paper."""

    citing: Node
    contexts: Tuple[str, ...]
    is_influential: bool = False


def resolve_neighbors(graph: CitationGraph, node_id: str) -> List[Neighbor]:
    """
    Return every node connected to ``node_id``, in edge-list order.

    Edges leaving the node are reported as ``cites`` / ``authored by``
    (outgoing); edges arriving at it as ``cited by`` / ``author of``
    (incoming). A self-loop is reported once, as outgoing. Edges whose other
    end is not a known node are skipped.
    """
    neighbors: List[Neighbor] = []

    for edge in graph.edges:
        if edge.source == node_id:
            other = graph.lookup(edge.target)
            if other is None:
                continue
            relationship = Relationship.CITES if edge.is_citation else Relationship.AUTHORED_BY
            neighbors.append(Neighbor(other, relationship, Direction.OUTGOING))
        elif edge.target == node_id:
            other = graph.lookup(edge.source)
            if other is None:
                continue
            relationship = Relationship.CITED_BY if edge.is_citation else Relationship.AUTHOR_OF
            neighbors.append(Neighbor(other, relationship, Direction.INCOMING))

    return neighbors


def group_neighbors(neighbors: List[Neighbor]) -> Dict[Relationship, List[Neighbor]]:
    """
    Bucket neighbors by relationship. Keys always come in display order:
    cites, cited by, authored by, author of.
    """
    grouped: Dict[Relationship, List[Neighbor]] = {rel: [] for rel in Relationship}
    for neighbor in neighbors:
        grouped[neighbor.relationship].append(neighbor)
    return grouped


def paper_authors(graph: CitationGraph, paper_id: str) -> List[Node]:
    """Author nodes linked to a paper by ``authored`` edges, in edge order."""
    paper = graph.lookup(paper_id)
    if paper is None or not paper.is_paper:
        return []

    authors: List[Node] = []
    for edge in graph.edges:
        if not edge.is_authorship or edge.target != paper_id:
            continue
        author = graph.lookup(edge.source)
        if author is not None:
            authors.append(author)
    return authors


def citation_contexts(graph: CitationGraph, paper_id: str) -> List[CitationContext]:
    """
    Citation contexts recorded on ``cites`` edges pointing at a paper.

    Edges without contexts, or whose citing paper is unknown, are skipped.
    """
    paper = graph.lookup(paper_id)
    if paper is None or not paper.is_paper:
        return []

    contexts: List[CitationContext] = []
    for edge in graph.edges:
        if not edge.is_citation or edge.target != paper_id or not edge.contexts:
            continue
        citing = graph.lookup(edge.source)
        if citing is None:
            continue
        contexts.append(CitationContext(citing, edge.contexts, edge.is_influential))
    return contexts
