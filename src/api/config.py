"""Runtime configuration for the word game API."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from src.core import LLMProvider, create_provider
from src.engine import (
    CachedCategoryMembership,
    CategoryMembership,
    ChainedCategoryMembership,
    LLMCategoryMembership,
    LLMWordSuggester,
    StaticCategoryMembership,
    TaxonomyWordSuggester,
    WordSuggester,
)
from src.history import JsonHistoryStore, PlayHistoryStore, get_data_dir

MembershipMode = Literal["static", "llm", "chained"]
SuggesterMode = Literal["static", "llm"]


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


class AppSettings(BaseModel):
    """Settings for the API process, read from ``WORDGAME_*`` variables."""

    membership: MembershipMode = "static"
    suggester: SuggesterMode = "static"

    # LLM judge / suggester
    llm_provider: str = "openai"
    llm_model: str | None = None

    # Timeouts and caching
    lookup_timeout: float = Field(default=10.0, gt=0)
    history_timeout: float = Field(default=10.0, gt=0)
    cache_ttl: float = Field(default=24 * 60 * 60, ge=0)

    data_dir: str = Field(default_factory=lambda: str(get_data_dir()))
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from the environment, falling back to defaults."""
        values: dict[str, object] = {}
        mapping = {
            "membership": "WORDGAME_MEMBERSHIP",
            "suggester": "WORDGAME_SUGGESTER",
            "llm_provider": "WORDGAME_LLM_PROVIDER",
            "llm_model": "WORDGAME_LLM_MODEL",
            "lookup_timeout": "WORDGAME_LOOKUP_TIMEOUT",
            "history_timeout": "WORDGAME_HISTORY_TIMEOUT",
            "cache_ttl": "WORDGAME_CACHE_TTL",
            "data_dir": "WORDGAME_DATA_DIR",
        }
        for field_name, env_name in mapping.items():
            raw = os.environ.get(env_name)
            if raw:
                values[field_name] = raw.strip()
        values["cors_origins"] = _env_list("WORDGAME_CORS_ORIGINS", ["*"])
        return cls.model_validate(values)

    def get_data_path(self) -> Path:
        return Path(self.data_dir)


def build_provider(settings: AppSettings) -> LLMProvider:
    return create_provider(settings.llm_provider, model=settings.llm_model)


def build_membership(settings: AppSettings, provider: LLMProvider | None = None) -> CategoryMembership:
    """Category judge for the configured mode.

    ``static`` uses the built-in table only; ``llm`` asks the LLM behind a
    cache; ``chained`` tries the table first and the cached LLM second.
    """
    static = StaticCategoryMembership()
    if settings.membership == "static":
        return static

    llm = CachedCategoryMembership(
        LLMCategoryMembership(provider or build_provider(settings)),
        ttl_seconds=settings.cache_ttl,
    )
    if settings.membership == "llm":
        return llm
    return ChainedCategoryMembership([static, llm])


def build_suggester(settings: AppSettings, provider: LLMProvider | None = None) -> WordSuggester:
    static = TaxonomyWordSuggester()
    if settings.suggester == "static":
        return static
    return LLMWordSuggester(provider or build_provider(settings), fallback=static)


def build_store(settings: AppSettings) -> PlayHistoryStore:
    return JsonHistoryStore(settings.get_data_path())
