"""
Application Settings - Pydantic Settings for configuration management.

Supports environment variables and .env file loading.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import BeforeValidator, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from beacon_validator.config.semantic_groups import SemanticGroup


def normalize_to_uppercase(v: object) -> object:
    """Normalize semantic group codes to uppercase.

    Accepts a list or a comma separated string such as ``gene,diso`` (the form
    read from VALIDATOR_SEMANTIC_GROUPS).
    """
    if isinstance(v, str):
        return [part.strip().upper() for part in v.split(",") if part.strip()]
    if isinstance(v, (list, tuple)):
        return [item.upper() if isinstance(item, str) else item for item in v]
    return v


class BeaconSettings(BaseSettings):
    """Knowledge Beacon endpoint settings."""

    model_config = SettingsConfigDict(env_prefix="BEACON_")

    base_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the beacon under test",
    )
    timeout_seconds: float = Field(default=60.0, gt=0, description="Per-request timeout in seconds")
    api_token: SecretStr | None = Field(default=None, description="Optional bearer token")
    user_agent: str = Field(default="beacon-validator", description="User-Agent header value")


class ValidatorSettings(BaseSettings):
    """Validation suite settings."""

    model_config = SettingsConfigDict(env_prefix="VALIDATOR_")

    keywords: str = Field(default="e", min_length=1, description="Keyword filter used by concept queries")
    workflow_page_size: int = Field(default=1, ge=1, description="Page size of workflow queries")
    paging_page_size: int = Field(default=50, ge=1, description="Page size of the full page in paging checks")
    semantic_page_size: int = Field(default=50, ge=1, description="Page size of semantic filter queries")

    # Vocabulary probed by the semantic filter checks (case-insensitive)
    semantic_groups: Annotated[
        list[SemanticGroup],
        NoDecode,
        BeforeValidator(normalize_to_uppercase),
    ] = Field(
        default_factory=lambda: list(SemanticGroup),
        description="Semantic groups probed by the semantic filter checks",
    )

    fail_on_error: bool = Field(
        default=False,
        description="Treat errored checks (transport failures) as a failed run",
    )

    @field_validator("keywords")
    @classmethod
    def keywords_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("keywords must not be blank")
        return v


class ObservabilitySettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_")

    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format (json for CI pipelines, console for terminals)"
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="beacon-validator", description="Service name on every log event")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )

    # Sub-settings
    beacon: BeaconSettings = Field(default_factory=BeaconSettings)
    validator: ValidatorSettings = Field(default_factory=ValidatorSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
