from citegraph.graph.builder import build_graph
from citegraph.graph.cycles import citation_adjacency, cycle_edges, cycle_nodes, find_cycles

from test_graph_builder import make_document


def _graph(node_ids, edges):
    return build_graph(
        {
            "nodes": [{"id": n, "type": "paper"} for n in node_ids],
            "edges": [{"source": s, "target": t, "type": k} for s, t, k in edges],
        }
    )


def test_no_citation_edges_means_no_cycles():
    G = _graph(["a", "p"], [("a", "p", "authored"), ("p", "a", "authored")])
    assert find_cycles(G) == []


def test_empty_graph():
    assert find_cycles(_graph([], [])) == []


def test_two_cycle_follows_node_order():
    G = _graph(["A", "B"], [("A", "B", "cites"), ("B", "A", "cites")])
    assert find_cycles(G) == [("A", "B", "A")]

    G2 = _graph(["B", "A"], [("A", "B", "cites"), ("B", "A", "cites")])
    assert find_cycles(G2) == [("B", "A", "B")]


def test_self_citation():
    G = _graph(["A"], [("A", "A", "cites")])
    assert find_cycles(G) == [("A", "A")]


def test_cycle_is_suffix_of_path():
    # A -> B -> C -> B: the cycle starts at B, not at the DFS root
    G = _graph(["A", "B", "C"], [("A", "B", "cites"), ("B", "C", "cites"), ("C", "B", "cites")])
    assert find_cycles(G) == [("B", "C", "B")]


def test_visited_nodes_are_not_reexplored():
    # Both cycles pass through B and are closed within the DFS rooted at A.
    G = _graph(
        ["A", "B", "C", "D"],
        [
            ("A", "B", "cites"),
            ("B", "C", "cites"),
            ("C", "A", "cites"),
            ("B", "D", "cites"),
            ("D", "B", "cites"),
        ],
    )
    assert find_cycles(G) == [("A", "B", "C", "A"), ("B", "D", "B")]


def test_pruning_reports_a_lower_bound():
    # A -> B -> C -> A and A -> C -> A share C. Once C is explored from the
    # A -> B branch, the shorter A -> C -> A cycle is not reported.
    G = _graph(
        ["A", "B", "C"],
        [("A", "B", "cites"), ("B", "C", "cites"), ("C", "A", "cites"), ("A", "C", "cites")],
    )
    assert find_cycles(G) == [("A", "B", "C", "A")]


def test_dangling_and_unknown_sources_are_tolerated():
    G = _graph(
        ["A"],
        [("A", "ghost", "cites"), ("ghost", "A", "cites"), ("other", "other", "cites")],
    )
    # edges from unknown sources never enter the adjacency
    assert citation_adjacency(G) == {"A": ["ghost"]}
    assert find_cycles(G) == []


def test_duplicate_edges_are_kept():
    G = _graph(["A", "B"], [("A", "B", "cites"), ("B", "A", "cites"), ("B", "A", "cites")])
    assert find_cycles(G) == [("A", "B", "A"), ("A", "B", "A")]


def test_deterministic_across_runs():
    G = build_graph(make_document())
    first = find_cycles(G)
    assert first == [("p1", "p2", "p3", "p1")]
    assert find_cycles(G) == first


def test_long_chain_does_not_hit_recursion_limit():
    n = 5000
    ids = [f"n{i}" for i in range(n)]
    edges = [(ids[i], ids[i + 1], "cites") for i in range(n - 1)]
    edges.append((ids[-1], ids[0], "cites"))

    cycles = find_cycles(_graph(ids, edges))
    assert len(cycles) == 1
    assert len(cycles[0]) == n + 1
    assert cycles[0][0] == cycles[0][-1] == "n0"


def test_cycle_overlay_helpers():
    cycles = [("A", "B", "A"), ("C", "C")]
    assert cycle_edges(cycles) == {("A", "B"), ("B", "A"), ("C", "C")}
    assert cycle_nodes(cycles) == {"A", "B", "C"}
