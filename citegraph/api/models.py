# citegraph/api/models.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from citegraph.graph.neighbors import CitationContext, Neighbor
from citegraph.graph.stats import GraphStats
from citegraph.models.node import Node


class NodeSummary(BaseModel):
    """
    Compact description of a node, as shown in result and neighbor lists.
    """
    id: str = Field(..., description="Node identifier.")
    type: str = Field(..., description="paper, author or unknown.")
    label: str = Field(..., description="Title, else name, else the id.")
    year: Optional[int] = Field(None, description="Publication year (papers).")
    citation_count: int = Field(0, description="Citation count (papers).")

    @classmethod
    def from_node(cls, node: Node) -> "NodeSummary":
        return cls(
            id=node.id,
            type=node.kind.value,
            label=node.label,
            year=node.year,
            citation_count=node.citation_count,
        )


class NodeDetail(NodeSummary):
    """
    Everything the model knows about a node.
    """
    title: Optional[str] = None
    name: Optional[str] = None
    abstract: Optional[str] = None
    venue: Optional[str] = None
    reference_count: int = 0
    is_open_access: bool = False
    fields_of_study: List[str] = Field(default_factory=list)
    affiliations: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Input fields the model does not type.",
    )

    @classmethod
    def from_node(cls, node: Node) -> "NodeDetail":
        typed = {
            "id", "type", "title", "name", "abstract", "year", "venue",
            "citation_count", "reference_count", "is_open_access",
            "fields_of_study", "affiliations", "authors", "url",
        }
        return cls(
            id=node.id,
            type=node.kind.value,
            label=node.label,
            year=node.year,
            citation_count=node.citation_count,
            title=node.title,
            name=node.name,
            abstract=node.abstract,
            venue=node.venue,
            reference_count=node.reference_count,
            is_open_access=node.is_open_access,
            fields_of_study=list(node.fields_of_study),
            affiliations=list(node.affiliations),
            url=node.url,
            attributes={k: v for k, v in node.raw.items() if k not in typed},
        )


class CitationContextModel(BaseModel):
    citing: NodeSummary
    contexts: List[str]
    is_influential: bool = False

    @classmethod
    def from_context(cls, ctx: CitationContext) -> "CitationContextModel":
        return cls(
            citing=NodeSummary.from_node(ctx.citing),
            contexts=list(ctx.contexts),
            is_influential=ctx.is_influential,
        )


class NodeView(BaseModel):
    """
    A node plus the paper-only extras of the details panel.
    """
    node: NodeDetail
    authors: List[NodeSummary] = Field(
        default_factory=list,
        description="Authors linked by 'authored' edges (papers only).",
    )
    citation_contexts: List[CitationContextModel] = Field(
        default_factory=list,
        description="Contexts in which other papers cite this one.",
    )


class NeighborModel(BaseModel):
    node: NodeSummary
    relationship: str
    direction: str

    @classmethod
    def from_neighbor(cls, neighbor: Neighbor) -> "NeighborModel":
        return cls(
            node=NodeSummary.from_node(neighbor.node),
            relationship=neighbor.relationship.value,
            direction=neighbor.direction.value,
        )


class NeighborsResult(BaseModel):
    node_id: str
    count: int
    groups: Dict[str, List[NeighborModel]] = Field(
        default_factory=dict,
        description="Neighbors keyed by relationship, in display order.",
    )


class StatsResult(BaseModel):
    paper_count: int
    author_count: int
    citation_count: int
    avg_citations_per_paper: float
    cycle_count: Optional[int] = None

    @classmethod
    def from_stats(cls, stats: GraphStats) -> "StatsResult":
        return cls(
            paper_count=stats.paper_count,
            author_count=stats.author_count,
            citation_count=stats.citation_count,
            avg_citations_per_paper=stats.avg_citations_per_paper,
            cycle_count=stats.cycle_count,
        )


class CyclesResult(BaseModel):
    count: int
    cycles: List[List[str]] = Field(default_factory=list)


class HighlightResult(BaseModel):
    count: int
    node_ids: List[str] = Field(
        default_factory=list,
        description="Highlighted node ids, sorted.",
    )
