# citegraph/session.py

"""
Load-time state for one caller (a web app, a CLI run, a notebook).

The analysis functions never hold state of their own. A session keeps the
most recent successful load as an immutable snapshot and swaps it wholesale
on the next load; a failed load leaves the previous snapshot in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union

from citegraph.graph.builder import GraphParseError, RawDocument, build_graph, load_graph_file
from citegraph.graph.cycles import Cycle, find_cycles
from citegraph.graph.filters import FilterCriteria, evaluate_filters
from citegraph.graph.model import CitationGraph

logger = logging.getLogger("citegraph.session")


class NoGraphLoadedError(RuntimeError):
    """Raised when a query needs a graph but nothing has been loaded yet."""


@dataclass(frozen=True)
class GraphSnapshot:
    graph: CitationGraph
    cycles: Tuple[Cycle, ...]
    source: Optional[str] = None


def analyze(graph: CitationGraph, source: Optional[str] = None) -> GraphSnapshot:
    return GraphSnapshot(graph=graph, cycles=tuple(find_cycles(graph)), source=source)


class GraphSession:
    def __init__(self) -> None:
        self._snapshot: Optional[GraphSnapshot] = None

    @property
    def snapshot(self) -> Optional[GraphSnapshot]:
        return self._snapshot

    def require_snapshot(self) -> GraphSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise NoGraphLoadedError("No graph has been loaded yet.")
        return snapshot

    def load(self, document: RawDocument, source: Optional[str] = None) -> GraphSnapshot:
        """
        Build and analyze a document, then make it the current snapshot.

        Raises GraphParseError without touching the current snapshot.
        """
        try:
            graph = build_graph(document)
        except GraphParseError as exc:
            logger.warning("Rejected graph document %s: %s", source or "<inline>", exc)
            raise

        return self._install(graph, source)

    def load_file(self, path: Union[str, Path]) -> GraphSnapshot:
        p = Path(path)
        try:
            graph = load_graph_file(p)
        except GraphParseError as exc:
            logger.warning("Rejected graph file %s: %s", p, exc)
            raise

        return self._install(graph, str(p))

    def _install(self, graph: CitationGraph, source: Optional[str]) -> GraphSnapshot:
        snapshot = analyze(graph, source=source)
        self._snapshot = snapshot
        logger.info(
            "Loaded graph %s: %d nodes, %d edges, %d cycle(s)",
            source or "<inline>",
            len(graph),
            len(graph.edges),
            len(snapshot.cycles),
        )
        return snapshot

    def highlight(self, criteria: FilterCriteria) -> FrozenSet[str]:
        return evaluate_filters(self.require_snapshot().graph, criteria)
