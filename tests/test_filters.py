import pytest
from pydantic import ValidationError

from citegraph.graph.builder import build_graph
from citegraph.graph.filters import FilterCriteria, evaluate_filters

from test_graph_builder import make_document

ALL_IDS = {"p1", "p2", "p3", "a1", "a2"}


@pytest.fixture
def graph():
    return build_graph(make_document())


def test_default_criteria_select_everything(graph):
    criteria = FilterCriteria()
    assert criteria.is_default()
    assert evaluate_filters(graph, criteria) == ALL_IDS


def test_node_type_and_min_year(graph):
    papers = evaluate_filters(graph, FilterCriteria(nodeType="paper"))
    assert papers == {"p1", "p2", "p3"}

    recent = evaluate_filters(graph, FilterCriteria(nodeType="paper", minYear=2020))
    # p2 is from 2017, p3 has no year
    assert recent == {"p1"}


def test_min_year_does_not_apply_to_authors(graph):
    assert evaluate_filters(graph, FilterCriteria(min_year=2020)) == {"p1", "a1", "a2"}


def test_min_year_reads_loosely_formatted_years():
    graph = build_graph(
        {
            "nodes": [
                {"id": "dotted", "type": "paper", "year": "2021.0"},
                {"id": "noted", "type": "paper", "year": "2022 (preprint)"},
                {"id": "fraction", "type": "paper", "year": 2020.5},
                {"id": "old", "type": "paper", "year": "1999"},
            ],
            "edges": [],
        }
    )

    hits = evaluate_filters(graph, FilterCriteria(minYear=2020))
    assert hits == {"dotted", "noted", "fraction"}


def test_search_term_checks_title_abstract_and_venue(graph):
    hits = evaluate_filters(graph, FilterCriteria(searchTerm="graph"))
    # p1 by title, p3 by "Graph Theory" in the abstract
    assert hits == {"p1", "p3"}

    by_venue = evaluate_filters(graph, FilterCriteria(searchTerm="nips"))
    assert by_venue == {"p2"}


def test_search_term_matches_author_names(graph):
    assert evaluate_filters(graph, FilterCriteria(searchTerm="bob")) == {"a2"}


def test_open_access_only_filters_papers(graph):
    assert evaluate_filters(graph, FilterCriteria(isOpenAccess=True)) == {"p1", "a1", "a2"}


def test_fields_of_study_any_term(graph):
    hits = evaluate_filters(graph, FilterCriteria(fieldsOfStudy="math, biology"))
    # p3's malformed '[Math' falls back to a single field containing "math"
    assert hits == {"p3", "a1", "a2"}

    cs = evaluate_filters(graph, FilterCriteria(nodeType="paper", fieldsOfStudy=" computer "))
    assert cs == {"p1", "p2"}


def test_fields_filter_excludes_papers_without_fields():
    G = build_graph({"nodes": [{"id": "p", "type": "paper"}], "edges": []})
    assert evaluate_filters(G, FilterCriteria(fieldsOfStudy="ai")) == frozenset()


def test_author_name_matches_authors_and_paper_author_lists(graph):
    hits = evaluate_filters(graph, FilterCriteria(authorName="ALICE"))
    assert hits == {"a1", "p1"}


def test_matching_author_is_included_regardless_of_later_filters(graph):
    hits = evaluate_filters(graph, FilterCriteria(authorName="alice", searchTerm="zzz"))
    assert hits == {"a1"}


def test_author_filter_does_not_affect_unknown_nodes():
    G = build_graph({"nodes": [{"id": "x", "title": "Thing"}], "edges": []})
    assert evaluate_filters(G, FilterCriteria(authorName="alice")) == {"x"}


def test_snake_case_names_are_accepted():
    criteria = FilterCriteria(search_term="x", node_type="author", min_year=1999)
    assert criteria.search_term == "x"
    assert criteria.node_type == "author"
    assert criteria.min_year == 1999


def test_blank_min_year_and_node_type_are_defaults():
    criteria = FilterCriteria(minYear="", nodeType="")
    assert criteria.min_year is None
    assert criteria.node_type == "all"
    assert criteria.is_default()


def test_invalid_node_type_rejected():
    with pytest.raises(ValidationError):
        FilterCriteria(nodeType="venue")


def test_criteria_are_frozen_and_reset():
    criteria = FilterCriteria(searchTerm="graph")
    with pytest.raises(ValidationError):
        criteria.search_term = "other"  # type: ignore[misc]

    assert FilterCriteria.reset() == FilterCriteria()
    assert not criteria.is_default()


def test_evaluation_is_pure(graph):
    criteria = FilterCriteria(nodeType="paper")
    first = evaluate_filters(graph, criteria)
    second = evaluate_filters(graph, criteria)
    assert first == second
    assert first is not second
