from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from citegraph.config.settings import settings
from citegraph.graph.builder import GraphParseError
from citegraph.graph.filters import FilterCriteria, evaluate_filters
from citegraph.graph.neighbors import (
    citation_contexts,
    group_neighbors,
    paper_authors,
    resolve_neighbors,
)
from citegraph.graph.stats import graph_stats, list_results
from citegraph.models.node import Node
from citegraph.session import GraphSession, GraphSnapshot

app = typer.Typer(
    help="Read/query utilities over a citation graph JSON document."
)

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load(graph_file: Path) -> GraphSnapshot:
    """
    Load and analyze a document, exiting with code 1 on failure.
    """
    try:
        return GraphSession().load_file(graph_file)
    except GraphParseError as exc:
        console.print(f"[red]Failed to load graph:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _node_row(node: Node):
    year = str(node.year) if node.year is not None else ""
    cites = str(node.citation_count) if node.is_paper else ""
    return escape(node.id), node.kind.value, escape(node.label), year, cites


def _node_table() -> Table:
    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Node id")
    tbl.add_column("Kind")
    tbl.add_column("Label")
    tbl.add_column("Year", justify="right")
    tbl.add_column("Citations", justify="right")
    return tbl


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("summary")
def summary(
    graph_file: Path = typer.Argument(..., help="JSON document with 'nodes' and 'edges'."),
) -> None:
    """
    Show paper/author/citation counts and the number of citation cycles.
    """
    snapshot = _load(graph_file)
    stats = graph_stats(snapshot.graph, snapshot.cycles)

    console.print(f"[bold]Graph {escape(str(graph_file))}[/bold]")
    console.print(f"  Papers: {stats.paper_count}")
    console.print(f"  Authors: {stats.author_count}")
    console.print(f"  Citations: {stats.citation_count}")
    console.print(f"  Avg Citations per Paper: {stats.avg_citations_per_paper:.2f}")
    console.print(f"  Citation cycles: {stats.cycle_count}")


@app.command("cycles")
def cycles(
    graph_file: Path = typer.Argument(..., help="JSON document with 'nodes' and 'edges'."),
) -> None:
    """
    List the citation cycles found in the graph.
    """
    snapshot = _load(graph_file)

    if not snapshot.cycles:
        console.print("[green]No citation cycles found.[/green]")
        return

    console.print(f"[bold]{len(snapshot.cycles)} citation cycle(s):[/bold]")
    for i, cycle in enumerate(snapshot.cycles, start=1):
        console.print(f"  {i}. " + escape(" -> ".join(cycle)))


@app.command("filter")
def filter_nodes(
    graph_file: Path = typer.Argument(..., help="JSON document with 'nodes' and 'edges'."),
    search: str = typer.Option("", "--search", "-s", help="Substring of title, abstract or venue."),
    node_type: str = typer.Option("all", "--type", "-t", help="all, paper or author."),
    min_year: Optional[int] = typer.Option(None, "--min-year", help="Earliest year (papers)."),
    author: str = typer.Option("", "--author", "-a", help="Substring of an author name."),
    fields: str = typer.Option("", "--fields", "-f", help="Comma-separated fields of study."),
    open_access: bool = typer.Option(False, "--open-access", help="Only open-access papers."),
    limit: int = typer.Option(
        settings.RESULT_LIMIT,
        "--limit",
        "-n",
        min=1,
        help="Max number of rows to display.",
    ),
) -> None:
    """
    Show the nodes matching the given filters, papers first.
    """
    snapshot = _load(graph_file)

    try:
        criteria = FilterCriteria(
            search_term=search,
            node_type=node_type,
            min_year=min_year,
            author_name=author,
            fields_of_study=fields,
            is_open_access=open_access,
        )
    except ValueError as exc:
        console.print(f"[red]Invalid filter:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2)

    highlighted = evaluate_filters(snapshot.graph, criteria)
    nodes = list_results(snapshot.graph, highlighted)

    if not nodes:
        console.print("[yellow]No matching nodes found.[/yellow]")
        return

    console.print(f"[bold]Showing {min(len(nodes), limit)} of {len(nodes)} matching node(s):[/bold]")
    tbl = _node_table()
    for node in nodes[:limit]:
        tbl.add_row(*_node_row(node))
    console.print(tbl)


@app.command("neighbors")
def neighbors(
    graph_file: Path = typer.Argument(..., help="JSON document with 'nodes' and 'edges'."),
    node_id: str = typer.Argument(..., help="Id of the node whose neighborhood to inspect."),
) -> None:
    """
    Show nodes connected to a node, grouped by relationship.
    """
    snapshot = _load(graph_file)

    if node_id not in snapshot.graph:
        console.print(f"[red]Node '{escape(node_id)}' not found in graph.[/red]")
        raise typer.Exit(code=1)

    found = resolve_neighbors(snapshot.graph, node_id)
    if not found:
        console.print("  (no connected nodes)")
        return

    console.print(f"[bold]{len(found)} connected node(s) of '{escape(node_id)}':[/bold]")
    for relationship, items in group_neighbors(found).items():
        if not items:
            continue
        console.print(f"\n[bold]{relationship.value.capitalize()}[/bold]")
        tbl = _node_table()
        for neighbor in items:
            tbl.add_row(*_node_row(neighbor.node))
        console.print(tbl)


@app.command("show")
def show(
    graph_file: Path = typer.Argument(..., help="JSON document with 'nodes' and 'edges'."),
    node_id: str = typer.Argument(..., help="Id of the node to show."),
) -> None:
    """
    Show the details of a single node.
    """
    snapshot = _load(graph_file)
    node = snapshot.graph.lookup(node_id)

    if node is None:
        console.print(f"[red]Node '{escape(node_id)}' not found in graph.[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{escape(node.label)}[/bold] ({node.kind.value}, id={escape(node.id)})")

    if node.is_paper:
        if node.year is not None:
            console.print(f"  Year: {node.year}")
        if node.venue:
            console.print(f"  Venue: {escape(node.venue)}")
        console.print(f"  Citations: {node.citation_count}  References: {node.reference_count}")
        console.print(f"  Open access: {'yes' if node.is_open_access else 'no'}")
        if node.fields_of_study:
            console.print(f"  Fields of study: {escape(', '.join(node.fields_of_study))}")
        if node.abstract:
            console.print(f"[dim]{escape(node.abstract)}[/dim]")

        authors = paper_authors(snapshot.graph, node.id)
        console.print("\n[bold]Authors:[/bold]")
        if not authors:
            console.print("  (none)")
        for a in authors:
            console.print(f"  • {escape(a.label)}")

        contexts = citation_contexts(snapshot.graph, node.id)
        if contexts:
            console.print("\n[bold]Citation contexts:[/bold]")
            for ctx in contexts:
                marker = " [yellow](influential)[/yellow]" if ctx.is_influential else ""
                console.print(f"  {escape(ctx.citing.label)}{marker}")
                for sentence in ctx.contexts:
                    console.print(f"    “{escape(sentence)}”")

    elif node.is_author:
        if node.affiliations:
            console.print(f"  Affiliations: {escape(', '.join(node.affiliations))}")

    if node.url:
        console.print(f"  URL: {escape(node.url)}")
