# tests/test_settings.py

from pathlib import Path

from citegraph.config import settings as settings_module
from citegraph.config.settings import Settings, get_settings


def test_settings_defaults():
    settings = Settings()

    assert settings.GRAPH_FILE is None
    assert settings.RESULT_LIMIT == 200
    assert settings.MAX_UPLOAD_BYTES == 50 * 1024 * 1024
    assert settings.LOG_LEVEL == "INFO"
    assert settings.CORS_ORIGINS == ["*"]


def test_settings_env_override(monkeypatch, tmp_path):
    graph_file = tmp_path / "graph.json"
    monkeypatch.setenv("CITEGRAPH_GRAPH_FILE", str(graph_file))
    monkeypatch.setenv("CITEGRAPH_RESULT_LIMIT", "25")

    settings = Settings()
    assert settings.GRAPH_FILE == Path(graph_file)
    assert settings.RESULT_LIMIT == 25


def test_get_settings_is_a_singleton(monkeypatch):
    monkeypatch.setattr(settings_module, "_settings", None)

    first = get_settings()
    assert get_settings() is first
