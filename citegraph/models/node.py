# citegraph/models/node.py

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from citegraph.graph.schema import NodeType


@dataclass(frozen=True)
class Node:
    """
    A paper or author in the citation graph.

    Paper-only and author-only attributes live side by side; the ones that do
    not apply to a node's kind simply keep their defaults. ``raw`` is the
    input record as loaded, exposed read-only for renderers that want fields
    the model does not type.
    """

    id: str
    kind: NodeType = NodeType.UNKNOWN

    # Paper
    title: Optional[str] = None
    abstract: Optional[str] = None
    year: Optional[int] = None
    venue: Optional[str] = None
    citation_count: int = 0
    reference_count: int = 0
    is_open_access: bool = False
    fields_of_study: Tuple[str, ...] = ()
    authors: Tuple[str, ...] = ()

    # Author
    name: Optional[str] = None
    affiliations: Tuple[str, ...] = ()

    url: Optional[str] = None
    raw: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}),
        compare=False,
        repr=False,
    )

    @property
    def label(self) -> str:
        """Display label: title, else name, else the id."""
        return self.title or self.name or self.id

    @property
    def is_paper(self) -> bool:
        return self.kind is NodeType.PAPER

    @property
    def is_author(self) -> bool:
        return self.kind is NodeType.AUTHOR
