"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``.yellowpages/config.toml``
only contains overrides. A fresh catalog needs only ``[catalog] version``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from yellowpages.domain.deps import DEFAULT_DEPTH

# --- config.toml sections ---


class CatalogConfig(BaseModel):
    """[catalog] section."""

    model_config = {"frozen": True}

    version: int = 1


class DepsConfig(BaseModel):
    """[deps] section."""

    model_config = {"frozen": True}

    default_depth: int = DEFAULT_DEPTH


class SearchConfig(BaseModel):
    """[search] section."""

    model_config = {"frozen": True}

    limit: int = 50
    name_weight: float = 3.0
    description_weight: float = 2.0
    tags_weight: float = 1.5
    # Edit budget per query character for terms that prefix nothing; 0 disables.
    fuzzy: float = 0.2


class DiscoverConfig(BaseModel):
    """[discover] section."""

    model_config = {"frozen": True}

    api_url: str = "https://api.github.com"
    token_env_vars: list[str] = Field(default_factory=lambda: ["GITHUB_TOKEN", "GH_TOKEN"])
    include_forks: bool = False
    include_archived: bool = False
    timeout: float = 30.0


class YpConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    deps: DepsConfig = Field(default_factory=DepsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    discover: DiscoverConfig = Field(default_factory=DiscoverConfig)
