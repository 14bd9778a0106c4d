"""Nested pydantic-settings configuration.

Each section reads its own ``EPIGON_<SECTION>_`` env vars::

    export EPIGON_STORAGE_FIXTURE_DIR=tests/fixtures
    export EPIGON_API_ERROR_STATUS=500
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class StorageConfig(BaseSettings):
    """Fixture layer configuration.

    Env vars use ``EPIGON_STORAGE_`` prefix.
    """

    model_config = {"env_prefix": "EPIGON_STORAGE_"}

    fixture_dir: Path = Path("./fixtures")
    fixture_suffix: str = ".json"


class APIConfig(BaseSettings):
    """Mock REST service configuration.

    Env vars use ``EPIGON_API_`` prefix.
    """

    model_config = {"env_prefix": "EPIGON_API_"}

    title: str = "epigon"
    description: str = "Fixture-backed mock REST resource tree"
    root: str = "/"
    error_status: int = Field(default=599, ge=100, le=599)
    log_prefix: str = ""


class ObservabilityConfig(BaseSettings):
    """Env vars use ``EPIGON_OBSERVABILITY_`` prefix."""

    model_config = {"env_prefix": "EPIGON_OBSERVABILITY_"}

    log_level: str = "INFO"


class AppSettings(BaseSettings):
    """Top-level settings; each section still honours its own env prefix."""

    model_config = {"env_prefix": "EPIGON_"}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
