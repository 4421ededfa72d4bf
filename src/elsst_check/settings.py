from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from elsst_check import __version__


class ElsstCheckSettings(BaseSettings):
    """Runtime configuration.

    Environment variables are prefixed with ELSST_CHECK_.
    """

    model_config = SettingsConfigDict(env_prefix="ELSST_CHECK_", extra="ignore")

    # --- Core ---
    log_level: str = Field(default="INFO", description="Python logging level")

    # --- OAI-PMH repository ---
    oai_pmh_url: str = "https://datacatalogue.cessda.eu/oai-pmh/v0/oai"
    metadata_prefix: str = "oai_ddi25"

    # --- ELSST label service ---
    elsst_api_url: str = "https://skg-if-openapi.cessda.eu/api/topics"
    max_concurrent_lookups: int = Field(default=16, ge=1)
    lookup_attempts: int = Field(default=3, ge=1, description="Tries per label lookup on transient errors")
    label_cache_scope: Literal["call", "instance"] = Field(
        default="call",
        description="call: labels cached per evaluation; instance: cached for the checker's lifetime",
    )

    # --- HTTP ---
    request_timeout: float = 30.0
    connect_timeout: float = 10.0
    user_agent: str = f"elsst-check/{__version__}"


settings = ElsstCheckSettings()
