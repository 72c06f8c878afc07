"""Configuration management for SUBENUM.

Loads configuration from config.yaml, with support for CLI overrides
and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from subenum.core.models import EnumerationOptions


class EngineSettings(BaseModel):
    """How the subfinder binary is located and invoked."""

    binary: str = "subfinder"
    provider_config: Optional[str] = None
    resolvers: List[str] = Field(default_factory=list)
    batch_concurrency: int = 1


class APIConfig(BaseModel):
    """REST API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8005
    api_key: str = ""
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """Log level and optional log file."""

    level: str = "INFO"
    file: Optional[str] = None


class Config(BaseModel):
    """Top-level SUBENUM configuration."""

    defaults: EnumerationOptions = Field(default_factory=EnumerationOptions)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from a YAML file, applying environment variable overrides.

    Args:
        config_path: Optional path to a YAML configuration file. Defaults to
                     ``config.yaml`` in the current working directory.

    Returns:
        Populated :class:`Config` instance.
    """
    path = Path(config_path) if config_path else Path("config.yaml")

    raw: Dict[str, Any] = {}
    if path.exists():
        with path.open("r") as fh:
            raw = yaml.safe_load(fh) or {}

    # Environment variable overrides (SUBENUM__SECTION__KEY=value)
    _apply_env_overrides(raw)

    return Config(**raw)


def _apply_env_overrides(raw: Dict[str, Any]) -> None:
    """Mutate *raw* in-place with values from environment variables.

    Environment variables follow the pattern ``SUBENUM__<SECTION>__<KEY>``.
    For example ``SUBENUM__DEFAULTS__THREADS=20``. List-valued keys accept a
    comma-separated string.
    """
    prefix = "SUBENUM__"
    list_keys = {("engine", "resolvers"), ("api", "cors_origins")}
    for env_key, env_val in os.environ.items():
        if not env_key.startswith(prefix):
            continue
        parts = env_key[len(prefix):].lower().split("__")
        if len(parts) == 2:
            section, key = parts
            value: Any = env_val
            if (section, key) in list_keys:
                value = [item.strip() for item in env_val.split(",") if item.strip()]
            if not isinstance(raw.get(section), dict):
                raw[section] = {}
            raw[section][key] = value
