from pathlib import Path

from citegraph.graph.filters import FilterCriteria, evaluate_filters
from citegraph.graph.neighbors import group_neighbors, resolve_neighbors
from citegraph.session import GraphSession

session = GraphSession()
snapshot = session.load_file(Path(__file__).with_name("sample_graph.json"))

print("Citation cycles:")
for cycle in snapshot.cycles:
    print("  " + " -> ".join(cycle))

criteria = FilterCriteria(searchTerm="graph", minYear=2016)
print("\nRecent papers about graphs:", sorted(evaluate_filters(snapshot.graph, criteria)))

print("\nConnected to P1:")
for relationship, items in group_neighbors(resolve_neighbors(snapshot.graph, "P1")).items():
    for n in items:
        print(f"  {relationship.value:<12} {n.node.label}")
