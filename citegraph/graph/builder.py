# citegraph/graph/builder.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Union

from citegraph.graph.fields import (
    coerce_count,
    coerce_flag,
    coerce_year,
    decode_string_list,
    endpoint_id,
    optional_str,
)
from citegraph.graph.model import CitationGraph
from citegraph.graph.schema import EdgeType, NodeType
from citegraph.models.edge import Edge
from citegraph.models.node import Node

logger = logging.getLogger("citegraph.graph")

PathLike = Union[str, Path]
RawDocument = Union[Mapping[str, Any], str, bytes, bytearray]


class GraphParseError(ValueError):
    """Raised when a document cannot be turned into a graph."""


def _decode_document(document: RawDocument) -> Mapping[str, Any]:
    if isinstance(document, (bytes, bytearray)):
        try:
            document = document.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GraphParseError(f"Document is not valid UTF-8: {exc}") from exc

    if isinstance(document, str):
        try:
            document = json.loads(document)
        except ValueError as exc:
            raise GraphParseError(f"Document is not valid JSON: {exc}") from exc

    if not isinstance(document, Mapping):
        raise GraphParseError("Document must be a JSON object with 'nodes' and 'edges'.")

    return document


def _require_sequence(document: Mapping[str, Any], key: str) -> List[Any]:
    value = document.get(key)
    if not isinstance(value, (list, tuple)):
        raise GraphParseError(f"Document is missing a '{key}' list.")
    return list(value)


def _node_from_record(record: Any, index: int) -> Node:
    """
    Normalize one raw node record.

    Missing optional fields are defaulted; list-like fields are decoded once
    here so nothing downstream re-checks their shape.
    """
    if not isinstance(record, Mapping):
        raise GraphParseError(f"Node at index {index} is not an object.")

    raw_id = record.get("id")
    node_id = "" if raw_id is None else str(raw_id)
    if not node_id:
        raise GraphParseError(f"Node at index {index} has no 'id'.")

    return Node(
        id=node_id,
        kind=NodeType.parse(record.get("type") or NodeType.UNKNOWN.value),
        title=optional_str(record.get("title")),
        abstract=optional_str(record.get("abstract")),
        year=coerce_year(record.get("year")),
        venue=optional_str(record.get("venue")),
        citation_count=coerce_count(record.get("citation_count")),
        reference_count=coerce_count(record.get("reference_count")),
        is_open_access=coerce_flag(record.get("is_open_access")),
        fields_of_study=decode_string_list(record.get("fields_of_study")),
        authors=decode_string_list(record.get("authors")),
        name=optional_str(record.get("name")),
        affiliations=decode_string_list(record.get("affiliations")),
        url=optional_str(record.get("url")),
        raw=MappingProxyType(dict(record)),
    )


def _edge_from_record(record: Any, index: int) -> Edge:
    if not isinstance(record, Mapping):
        raise GraphParseError(f"Edge at index {index} is not an object.")

    source = endpoint_id(record.get("source"))
    target = endpoint_id(record.get("target"))
    if source is None or target is None:
        raise GraphParseError(f"Edge at index {index} needs both 'source' and 'target'.")

    raw_type = record.get("type")

    return Edge(
        source=source,
        target=target,
        kind=EdgeType.parse(raw_type),
        type_label="" if raw_type is None else str(raw_type),
        is_influential=coerce_flag(record.get("is_influential")),
        contexts=decode_string_list(record.get("contexts")),
    )


def build_graph(document: RawDocument) -> CitationGraph:
    """
    Build an immutable CitationGraph from a raw document.

    Parameters
    ----------
    document:
        A mapping with ``nodes`` and ``edges`` lists, or the same thing as a
        JSON string / UTF-8 bytes.

    Raises
    ------
    GraphParseError
        If the document is not valid JSON, lacks either top-level list, or
        contains entries that are not objects / lack required ids. No partial
        graph is ever returned.
    """
    data = _decode_document(document)

    raw_nodes = _require_sequence(data, "nodes")
    raw_edges = _require_sequence(data, "edges")

    nodes = tuple(_node_from_record(r, i) for i, r in enumerate(raw_nodes))
    edges = tuple(_edge_from_record(r, i) for i, r in enumerate(raw_edges))

    graph = CitationGraph(nodes=nodes, edges=edges)

    duplicates = len(nodes) - len(graph)
    if duplicates:
        logger.warning(
            "Document contains %d duplicate node id(s); later records win.",
            duplicates,
        )

    logger.debug("Built graph with %d nodes and %d edges", len(graph), len(edges))
    return graph


def load_graph_file(path: PathLike) -> CitationGraph:
    """
    Read a JSON document from disk and build a graph from it.
    """
    p = Path(path)
    try:
        content = p.read_bytes()
    except OSError as exc:
        raise GraphParseError(f"Could not read graph file {p}: {exc}") from exc

    return build_graph(content)
