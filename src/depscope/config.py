"""Runtime configuration loaded from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from depscope.adapters.npm import NpmAdapter
from depscope.cache import DEFAULT_CACHE_FILE, DEFAULT_TTL

ENV_PREFIX = "DEPSCOPE_"


class Settings(BaseModel):
    """depscope settings.

    Every field can be overridden with a ``DEPSCOPE_<FIELD>`` environment
    variable (or a ``.env`` file loaded by the CLI).
    """

    registry_url: str = NpmAdapter.REGISTRY_URL
    downloads_url: str = NpmAdapter.DOWNLOADS_URL
    timeout: float = Field(default=10.0, gt=0)
    cache_file: Path = DEFAULT_CACHE_FILE
    cache_ttl: float = Field(default=DEFAULT_TTL, ge=0)
    max_concurrency: int = Field(default=0, ge=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw:
                values[field_name] = raw
        settings = cls(**values)
        settings.cache_file = settings.cache_file.expanduser()
        return settings
