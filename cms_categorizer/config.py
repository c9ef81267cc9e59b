"""Configuration management for the CMS categorization engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import CatalogError
from .models.content import CategoryDescriptor, ContentItem


class Settings(BaseSettings):
    """Main application settings."""

    # ── Decision Thresholds ────────────────────────────────────────────────
    visibility_threshold: float = Field(
        0.3, description="Suggestions must score strictly above this to be shown"
    )
    auto_assign_threshold: float = Field(
        0.8, description="Top suggestion must score strictly above this to be auto-assigned"
    )

    # ── Scoring Weights ────────────────────────────────────────────────────
    w_keyword: float = Field(0.4, description="Keyword overlap weight")
    w_description: float = Field(0.3, description="Description similarity weight")
    w_type: float = Field(0.2, description="Content type affinity weight")
    w_history: float = Field(0.1, description="Historical pattern weight")

    # ── Processing Settings ────────────────────────────────────────────────
    history_sample_size: int = Field(10, description="Recent posts sampled per category")
    review_queue_limit: int = Field(50, description="Uncategorized items scanned for review")
    review_top_n: int = Field(3, description="Suggestions kept per review entry")
    words_per_minute: int = Field(200, description="Reading speed for reading-time estimates")

    # ── Storage ────────────────────────────────────────────────────────────
    catalog_path: Path = Field(Path("config/catalog.yaml"), description="YAML catalog for the CLI")

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = Field("INFO", description="Log level")
    json_logging: bool = Field(True, description="Enable JSON logging")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("w_keyword", "w_description", "w_type", "w_history")
    @classmethod
    def validate_weights(cls, v: float) -> float:
        """Validate weight values are between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError("Weight must be between 0 and 1")
        return v

    @field_validator("visibility_threshold", "auto_assign_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Validate confidence thresholds."""
        if not 0 <= v <= 1:
            raise ValueError("Confidence threshold must be between 0 and 1")
        return v

    @field_validator("history_sample_size", "review_queue_limit", "review_top_n", "words_per_minute")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be a positive integer")
        return v


class CatalogConfig:
    """Category catalog and content loader for YAML files."""

    def __init__(self, config_path: str | Path = "config/catalog.yaml"):
        self.config_path = Path(config_path)
        self._config: dict[str, Any] = {}
        self.load_config()

    def load_config(self) -> None:
        """Load catalog data from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Catalog file not found: {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise CatalogError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise CatalogError(f"Catalog root must be a mapping: {self.config_path}")
        self._config = data

    def get_categories(self) -> list[CategoryDescriptor]:
        """Get the category catalog."""
        try:
            return [CategoryDescriptor(**entry) for entry in self._config.get("categories", [])]
        except (TypeError, ValidationError) as e:
            raise CatalogError(f"Invalid category entry in {self.config_path}: {e}") from e

    def get_posts(self) -> list[ContentItem]:
        """Get the content items (categorized or not)."""
        try:
            return [ContentItem(**entry) for entry in self._config.get("posts", [])]
        except (TypeError, ValidationError) as e:
            raise CatalogError(f"Invalid post entry in {self.config_path}: {e}") from e


# Global instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def load_catalog(path: str | Path | None = None) -> CatalogConfig:
    """Load the YAML catalog, defaulting to the configured path."""
    return CatalogConfig(path or get_settings().catalog_path)


def validate_config(settings: Settings) -> bool:
    """Validate configuration completeness."""
    from .logging import get_logger

    logger = get_logger(__name__)
    try:
        weight_sum = (
            settings.w_keyword
            + settings.w_description
            + settings.w_type
            + settings.w_history
        )
        if abs(weight_sum - 1.0) > 0.01:
            raise ValueError(f"Scoring weights sum to {weight_sum}, should be 1.0")

        if settings.visibility_threshold >= settings.auto_assign_threshold:
            raise ValueError(
                "Visibility threshold must be below the auto-assign threshold"
            )

        return True

    except ValueError as e:
        logger.error("config_validation_failed", error=str(e))
        return False
