# citegraph/graph/filters.py

from __future__ import annotations

from typing import FrozenSet, List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from citegraph.graph.model import CitationGraph
from citegraph.models.node import Node

NodeTypeFilter = Literal["all", "paper", "author"]


class FilterCriteria(BaseModel):
    """
    Options that decide which nodes are highlighted.

    Accepts both the camelCase names used by front-ends (``searchTerm``,
    ``minYear``, ...) and the snake_case attribute names. Instances are
    frozen: callers replace criteria wholesale instead of editing them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    search_term: str = Field(
        default="",
        alias="searchTerm",
        description="Case-insensitive substring of title, abstract or venue.",
    )
    node_type: NodeTypeFilter = Field(
        default="all",
        alias="nodeType",
        description="Restrict to one node kind, or 'all'.",
    )
    min_year: Optional[int] = Field(
        default=None,
        alias="minYear",
        description="Earliest publication year (papers only).",
    )
    author_name: str = Field(
        default="",
        alias="authorName",
        description="Substring of an author's name, or of any author of a paper.",
    )
    fields_of_study: str = Field(
        default="",
        alias="fieldsOfStudy",
        description="Comma-separated substrings; any match is enough (papers only).",
    )
    is_open_access: bool = Field(
        default=False,
        alias="isOpenAccess",
        description="Only open-access papers.",
    )

    @field_validator("min_year", mode="before")
    @classmethod
    def _blank_year_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("node_type", mode="before")
    @classmethod
    def _normalize_node_type(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "all"
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def field_terms(self) -> List[str]:
        if not self.fields_of_study:
            return []
        return [term.strip() for term in self.fields_of_study.lower().split(",")]

    def is_default(self) -> bool:
        return self == FilterCriteria()

    @staticmethod
    def reset() -> "FilterCriteria":
        return FilterCriteria()


def _matches_fields(node: Node, terms: List[str]) -> bool:
    fields = [f.lower() for f in node.fields_of_study]
    return any(term in field for term in terms for field in fields)


def _matches_search(node: Node, needle: str) -> bool:
    title = (node.title or node.name or "").lower()
    abstract = (node.abstract or "").lower()
    venue = (node.venue or "").lower()
    return needle in title or needle in abstract or needle in venue


def evaluate_filters(graph: CitationGraph, criteria: FilterCriteria) -> FrozenSet[str]:
    """
    Return the ids of nodes that satisfy ``criteria``.

    Filters run in a fixed order and the first failing one excludes the node:

    1. node type
    2. minimum year (papers)
    3. open access (papers)
    4. fields of study (papers)
    5. author name; an author node whose name matches is included
       regardless of the remaining filters
    6. search term over title / abstract / venue

    Filters left at their defaults always pass, so default criteria select
    every node. The function is pure; it reads the graph and returns a new set.
    """
    highlighted: Set[str] = set()

    terms = criteria.field_terms()
    author_needle = criteria.author_name.lower()
    search_needle = criteria.search_term.lower()

    for node in graph.nodes:
        if criteria.node_type != "all" and node.kind.value != criteria.node_type:
            continue

        if criteria.min_year and node.is_paper:
            if node.year is None or node.year < criteria.min_year:
                continue

        if criteria.is_open_access and node.is_paper and not node.is_open_access:
            continue

        if terms and node.is_paper and not _matches_fields(node, terms):
            continue

        if author_needle:
            if node.is_author:
                if author_needle not in (node.name or "").lower():
                    continue
                highlighted.add(node.id)
            elif node.is_paper:
                if not any(author_needle in a.lower() for a in node.authors):
                    continue

        if search_needle and not _matches_search(node, search_needle):
            continue

        highlighted.add(node.id)

    return frozenset(highlighted)
