"""
Pydantic configuration models for AdaptWatch.

These models provide type-safe configuration with validation for:
- The upstream notice source and the jurisdictions it is queried for
- Relevance keyword sets
- Scoring thresholds
- Result ranking and logging
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


def _clean_keywords(values: list[str]) -> list[str]:
    """Lowercase, strip and de-duplicate keywords, keeping first-seen order."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for value in values:
        keyword = str(value).strip().lower()
        if keyword and keyword not in seen:
            seen.add(keyword)
            cleaned.append(keyword)
    return cleaned


# =============================================================================
# Source Configuration
# =============================================================================


DEFAULT_JURISDICTIONS = [
    "Birmingham",
    "Dudley",
    "Sandwell",
    "Walsall",
    "Wolverhampton",
    "Solihull",
    "Coventry",
]

DEFAULT_SEARCH_KEYWORDS = [
    "housing",
    "construction",
    "works",
    "maintenance",
    "services",
]


class SourceConfig(BaseModel):
    """Upstream notice-search settings."""

    base_url: str = Field(
        default="https://www.contractsfinder.service.gov.uk/Published/Notices/OCDS/Search",
        description="OCDS search endpoint",
    )
    notice_url_template: str = Field(
        default="https://www.contractsfinder.service.gov.uk/notice/{id}?origin=SearchResults",
        description="Deep link pattern for a notice, formatted with the notice id",
    )
    jurisdictions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_JURISDICTIONS),
        min_length=1,
        description="Location labels queried in this order",
    )
    search_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_KEYWORDS),
        description="Keywords joined into the upstream keyword disjunction",
    )
    published_within_days: int = Field(
        default=90,
        ge=1,
        le=3650,
        description="Only query notices published in the last N days",
    )
    result_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum releases requested per jurisdiction",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300.0,
        description="Per-jurisdiction time limit, retries included",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per jurisdiction before giving up",
    )
    retry_backoff_factor: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Exponential backoff multiplier for retries",
    )
    concurrency: int = Field(
        default=4,
        ge=1,
        le=20,
        description="Max jurisdiction queries in flight at once",
    )

    @field_validator("jurisdictions")
    @classmethod
    def strip_jurisdictions(cls, v: list[str]) -> list[str]:
        """Drop blank jurisdiction labels."""
        cleaned = [label.strip() for label in v if label and label.strip()]
        if not cleaned:
            raise ValueError("at least one jurisdiction is required")
        return cleaned

    @field_validator("notice_url_template")
    @classmethod
    def template_has_id(cls, v: str) -> str:
        if "{id}" not in v:
            raise ValueError("notice_url_template must contain '{id}'")
        return v

    @property
    def keyword_query(self) -> str:
        """Keyword disjunction string sent upstream."""
        return " OR ".join(self.search_keywords)


# =============================================================================
# Relevance Configuration
# =============================================================================


DEFAULT_CORE_KEYWORDS = [
    "adaptation",
    "disabled facilities grant",
    "dfg",
    "stairlift",
    "stair lift",
    "through floor lift",
    "level access shower",
    "wet room",
    "wheelchair",
    "ramp",
    "hoist",
    "accessible",
    "accessibility",
    "home improvement agency",
]

DEFAULT_EXCLUDE_KEYWORDS = [
    "it system",
    "software",
    "legal services",
    "consultancy",
    "recruitment",
    "training course",
    "insurance services",
    "financial services",
]

DEFAULT_CONTEXT_KEYWORDS = [
    "housing",
    "home",
    "dwelling",
    "property",
    "properties",
    "residential",
    "tenant",
    "installation",
    "works",
]


class RelevanceConfig(BaseModel):
    """Keyword sets for the relevance classifier.

    Matching is case-insensitive substring matching over title and
    description. ``require_context`` enables the stricter mode where a
    context keyword must also be present.
    """

    core_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORE_KEYWORDS),
        min_length=1,
        description="At least one must appear for a tender to be relevant",
    )
    exclude_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_KEYWORDS),
        description="Any match rejects the tender",
    )
    context_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTEXT_KEYWORDS),
        description="Secondary keywords, only used when require_context is set",
    )
    require_context: bool = Field(
        default=False,
        description="Also require a context keyword match",
    )

    @field_validator("core_keywords", "exclude_keywords", "context_keywords")
    @classmethod
    def normalize_keywords(cls, v: list[str]) -> list[str]:
        return _clean_keywords(v)

    @model_validator(mode="after")
    def core_not_empty(self) -> "RelevanceConfig":
        if not self.core_keywords:
            raise ValueError("core_keywords must contain at least one non-blank keyword")
        if self.require_context and not self.context_keywords:
            raise ValueError("require_context needs at least one context keyword")
        return self


# =============================================================================
# Scoring Configuration
# =============================================================================


class ScoringConfig(BaseModel):
    """Gate minimums and status thresholds."""

    minimum_insurance: float = Field(
        default=5_000_000,
        ge=0,
        description="Public liability cover required to avoid the hard gate",
    )
    minimum_experience_years: float = Field(
        default=1,
        ge=0,
        description="Experience below this is a hard gate failure",
    )
    qualified_threshold: int = Field(
        default=25,
        description="Score at or above which a tender is qualified",
    )
    conditional_threshold: int = Field(
        default=15,
        description="Score at or above which a tender is conditional",
    )

    @model_validator(mode="after")
    def thresholds_ordered(self) -> "ScoringConfig":
        if self.qualified_threshold < self.conditional_threshold:
            raise ValueError("qualified_threshold must be >= conditional_threshold")
        return self


# =============================================================================
# Results Configuration
# =============================================================================


class ResultsConfig(BaseModel):
    """Ranking settings for qualification results."""

    top_n: int | None = Field(
        default=5,
        ge=1,
        description="Number of results kept per profile (null keeps all)",
    )


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=Path("logs/adaptwatch.log"),
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    config_dir: Path = Field(
        default=Path("configs"),
        description="Configuration directory",
    )
    profiles_file: Path = Field(
        default=Path("configs/profiles.yaml"),
        description="YAML file holding contractor profiles keyed by account id",
    )

    source: SourceConfig = Field(default_factory=SourceConfig)
    relevance: RelevanceConfig = Field(default_factory=RelevanceConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    results: ResultsConfig = Field(default_factory=ResultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
