# citegraph/graph/model.py

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from citegraph.models.edge import Edge
from citegraph.models.node import Node


@dataclass(frozen=True)
class CitationGraph:
    """
    Immutable, queryable view of one loaded document.

    ``nodes`` and ``edges`` keep input order (duplicates included).
    The id -> Node lookup is derived once at construction; on duplicate ids
    the later node wins.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    _by_id: Mapping[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_id: Dict[str, Node] = {}
        for node in self.nodes:
            by_id[node.id] = node
        object.__setattr__(self, "_by_id", MappingProxyType(by_id))

    def lookup(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    @property
    def node_by_id(self) -> Mapping[str, Node]:
        return self._by_id

    def node_ids(self) -> Tuple[str, ...]:
        """Distinct node ids, in order of first appearance."""
        return tuple(self._by_id.keys())

    def unique_nodes(self) -> Iterator[Node]:
        """
        One node per id (the surviving record), in order of first appearance.
        """
        for node_id in self._by_id:
            yield self._by_id[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)
