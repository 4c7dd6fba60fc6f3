# tests/test_query_cli.py

import json
from pathlib import Path

from typer.testing import CliRunner

from citegraph.cli.main import app as cli_app

from test_graph_builder import make_document

runner = CliRunner()


def _write_graph(tmp_path: Path, document=None) -> Path:
    graph_path = tmp_path / "toy_graph.json"
    graph_path.write_text(json.dumps(document or make_document()), encoding="utf-8")
    return graph_path


def test_cli_summary(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(cli_app, ["query", "summary", str(graph_path)])

    assert result.exit_code == 0
    out = result.stdout
    assert "Papers: 3" in out
    assert "Authors: 2" in out
    assert "Citations: 4" in out
    assert "20.00" in out
    assert "Citation cycles: 1" in out


def test_cli_cycles(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(cli_app, ["query", "cycles", str(graph_path)])

    assert result.exit_code == 0
    assert "p1 -> p2 -> p3 -> p1" in result.stdout


def test_cli_cycles_none(tmp_path):
    graph_path = _write_graph(tmp_path, {"nodes": [{"id": "a"}], "edges": []})

    result = runner.invoke(cli_app, ["query", "cycles", str(graph_path)])

    assert result.exit_code == 0
    assert "No citation cycles" in result.stdout


def test_cli_filter(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(
        cli_app,
        ["query", "filter", str(graph_path), "--type", "paper", "--min-year", "2020"],
    )

    assert result.exit_code == 0
    out = result.stdout
    assert "1 matching" in out
    assert "p1" in out
    assert "p2" not in out


def test_cli_filter_invalid_type(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(cli_app, ["query", "filter", str(graph_path), "--type", "venue"])

    assert result.exit_code == 2


def test_cli_neighbors(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(cli_app, ["query", "neighbors", str(graph_path), "p1"])

    assert result.exit_code == 0
    out = result.stdout
    assert "4 connected" in out
    assert "Cites" in out
    assert "Cited by" in out
    assert "Author of" in out
    assert "a1" in out
    assert "ghost" not in out


def test_cli_show_paper(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(cli_app, ["query", "show", str(graph_path), "p2"])

    assert result.exit_code == 0
    out = result.stdout
    assert "Attention Is All You Need" in out
    assert "Year: 2017" in out
    assert "Bob Jones" in out
    assert "as shown in" in out


def test_cli_unknown_node(tmp_path):
    graph_path = _write_graph(tmp_path)

    result = runner.invoke(cli_app, ["query", "show", str(graph_path), "nope"])

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_cli_bad_document(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"nodes": []}', encoding="utf-8")

    result = runner.invoke(cli_app, ["query", "summary", str(bad)])

    assert result.exit_code == 1
    assert "Failed to load graph" in result.stdout


def _bracketed_document():
    return {
        "nodes": [
            {
                "id": "p[1]",
                "type": "paper",
                "title": "Closing [/b] tags in LaTeX",
                "abstract": "The [bold] hypothesis revisited.",
                "venue": "[red]Workshop",
                "year": 2020,
            },
            {"id": "p2", "type": "paper", "title": "The [bold] hypothesis", "year": 2019},
            {"id": "a1", "type": "author", "name": "[i]Ada[/i]", "affiliations": ["[/] Lab"]},
        ],
        "edges": [
            {"source": "a1", "target": "p[1]", "type": "authored"},
            {"source": "p2", "target": "p[1]", "type": "cites", "contexts": ["see [/link]"]},
            {"source": "p[1]", "target": "p2", "type": "cites"},
        ],
    }


def test_cli_show_prints_bracketed_text_verbatim(tmp_path):
    graph_path = _write_graph(tmp_path, _bracketed_document())

    result = runner.invoke(cli_app, ["query", "show", str(graph_path), "p[1]"])

    assert result.exit_code == 0, result.output
    out = result.stdout
    assert "Closing [/b] tags in LaTeX" in out
    assert "The [bold] hypothesis revisited." in out
    assert "[red]Workshop" in out
    assert "[i]Ada[/i]" in out
    assert "see [/link]" in out


def test_cli_tables_and_cycles_keep_bracketed_text(tmp_path):
    graph_path = _write_graph(tmp_path, _bracketed_document())

    result = runner.invoke(cli_app, ["query", "filter", str(graph_path), "--type", "paper"])
    assert result.exit_code == 0, result.output
    assert "The [bold] hypothesis" in result.stdout

    result = runner.invoke(cli_app, ["query", "cycles", str(graph_path)])
    assert result.exit_code == 0, result.output
    assert "p[1] -> p2 -> p[1]" in result.stdout

    result = runner.invoke(cli_app, ["query", "neighbors", str(graph_path), "p[1]"])
    assert result.exit_code == 0, result.output
    assert "[i]Ada[/i]" in result.stdout

    result = runner.invoke(cli_app, ["query", "show", str(graph_path), "[/missing]"])
    assert result.exit_code == 1
    assert "[/missing]" in result.stdout
