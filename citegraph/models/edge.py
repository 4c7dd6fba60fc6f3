# citegraph/models/edge.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from citegraph.graph.schema import EdgeType


@dataclass(frozen=True)
class Edge:
    """
    A directed relationship between two node ids.

    Endpoints are not required to exist in the node set; dangling edges are
    kept and simply resolve to nothing.
    """

    source: str
    target: str
    kind: EdgeType = EdgeType.OTHER

    # Type string exactly as it appeared in the document
    type_label: str = ""

    # Citation-only attributes
    is_influential: bool = False
    contexts: Tuple[str, ...] = ()

    @property
    def is_citation(self) -> bool:
        return self.kind is EdgeType.CITES

    @property
    def is_authorship(self) -> bool:
        return self.kind is EdgeType.AUTHORED
