# citegraph/cli/main.py

from __future__ import annotations

import typer
from citegraph.cli import query_cli

app = typer.Typer(help="CLI tools for exploring citation graph documents.")

app.add_typer(query_cli.app, name="query")

if __name__ == "__main__":
    app()
