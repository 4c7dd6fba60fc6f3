# citegraph/graph/export.py

from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence, Tuple

import networkx as nx

from citegraph.graph.cycles import cycle_edges, cycle_nodes
from citegraph.graph.model import CitationGraph
from citegraph.graph.schema import EdgeType
from citegraph.models.node import Node


def node_attributes(node: Node) -> Dict[str, Any]:
    """
    JSON-friendly attributes of a node (tuples become lists, enums strings).
    """
    return {
        "type": node.kind.value,
        "label": node.label,
        "title": node.title,
        "name": node.name,
        "abstract": node.abstract,
        "year": node.year,
        "venue": node.venue,
        "citation_count": node.citation_count,
        "reference_count": node.reference_count,
        "is_open_access": node.is_open_access,
        "fields_of_study": list(node.fields_of_study),
        "authors": list(node.authors),
        "affiliations": list(node.affiliations),
        "url": node.url,
    }


def to_networkx(graph: CitationGraph) -> nx.MultiDiGraph:
    """
    Convert to a NetworkX MultiDiGraph.

    One node per id; one edge per document edge whose endpoints are both
    known, keyed by its position in the edge list.
    """
    G = nx.MultiDiGraph()

    for node in graph.unique_nodes():
        G.add_node(node.id, **node_attributes(node))

    for index, edge in enumerate(graph.edges):
        if edge.source not in graph or edge.target not in graph:
            continue
        G.add_edge(
            edge.source,
            edge.target,
            key=index,
            type=edge.kind.value,
            raw_type=edge.type_label,
            is_influential=edge.is_influential,
            contexts=list(edge.contexts),
        )

    return G


def node_link_payload(
    graph: CitationGraph,
    highlighted: Iterable[str] = (),
    cycles: Sequence[Tuple[str, ...]] = (),
) -> Dict[str, Any]:
    """
    Build the ``{"nodes": [...], "links": [...]}`` document a force-layout
    renderer consumes, with ``highlighted`` / ``in_cycle`` flags attached.
    """
    G = to_networkx(graph)

    highlighted_ids = set(highlighted)
    on_cycle_nodes = cycle_nodes(cycles)
    on_cycle_edges = cycle_edges(cycles)

    for node_id, data in G.nodes(data=True):
        data["highlighted"] = node_id in highlighted_ids
        data["in_cycle"] = node_id in on_cycle_nodes

    for u, v, data in G.edges(data=True):
        data["in_cycle"] = data["type"] == EdgeType.CITES.value and (u, v) in on_cycle_edges

    return nx.node_link_data(G, edges="links")
