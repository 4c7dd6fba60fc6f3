from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
        env_prefix="CITEGRAPH_"
    )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    GRAPH_FILE: Optional[Path] = Field(
        default=None,
        description=(
            "Optional JSON graph document loaded by the web app at startup. "
            "If unset, the app starts empty and waits for an upload."
        ),
    )

    MAX_UPLOAD_BYTES: int = Field(
        default=50 * 1024 * 1024,
        ge=1,
        description="Largest graph document accepted by POST /graph.",
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    RESULT_LIMIT: int = Field(
        default=200,
        ge=1,
        description="Default maximum number of rows in result listings.",
    )

    # ------------------------------------------------------------------
    # Web / logging
    # ------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level used by the web app.",
    )

    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API (the renderer's origin).",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Singleton-style accessor so we only construct Settings once.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
