"""Engine configuration loading and validation."""

import logging
import re
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import (
    ALT_LANGUAGE_DEFAULT,
    EMAIL_PATTERN,
    LANGUAGE_DEFAULT,
    RESOLVER_CONCURRENCY_DEFAULT,
    RESOLVER_TIMEOUT_DEFAULT,
    WEIGHT_CONDITIONAL_FIELDS,
    WEIGHT_DEPTH_SQUARED,
    WEIGHT_FIELDS,
    WEIGHT_LINKS,
)
from .errors import ConfigException

logger = logging.getLogger(__name__)

ENV_PREFIX = "FORMRULES_"


class ResolverConfig(BaseModel):
    """Option-set resolution settings."""

    timeout: float = Field(default=RESOLVER_TIMEOUT_DEFAULT, gt=0)
    concurrency: int = Field(default=RESOLVER_CONCURRENCY_DEFAULT, ge=1)


class MetricsConfig(BaseModel):
    """Weights of the hierarchy complexity score."""

    fields: float = Field(default=WEIGHT_FIELDS, ge=0)
    links: float = Field(default=WEIGHT_LINKS, ge=0)
    conditional_fields: float = Field(default=WEIGHT_CONDITIONAL_FIELDS, ge=0)
    depth_squared: float = Field(default=WEIGHT_DEPTH_SQUARED, ge=0)


class ValidationConfig(BaseModel):
    email_pattern: str = EMAIL_PATTERN

    @field_validator("email_pattern")
    @classmethod
    def validate_email_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid email pattern: {e}") from e
        return v


class EngineConfig(BaseSettings):
    """Engine configuration."""

    language: str = Field(default=LANGUAGE_DEFAULT)
    alt_language: str | None = Field(default=ALT_LANGUAGE_DEFAULT)

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
    )

    @field_validator("language", "alt_language", mode="before")
    @classmethod
    def normalize_language(cls, v):
        if v is None:
            return v
        v = str(v).strip()
        if not v:
            return None
        return v

    @model_validator(mode="after")
    def validate_languages(self) -> "EngineConfig":
        if not self.language:
            raise ValueError("language cannot be empty")
        if self.alt_language == self.language:
            self.alt_language = None
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str | Path) -> "EngineConfig":
        """Load configuration from specified path."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigException(f"Configuration file not found: {config_path}")

        class _EngineConfig(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path),
                env_prefix=ENV_PREFIX,
                env_nested_delimiter="__",
            )

        try:
            config = _EngineConfig()
        except ValidationError as e:
            error_lines = ["Configuration validation failed:"]
            for error in e.errors():
                loc = " -> ".join(str(item) for item in error["loc"])
                error_lines.append(f"  - {loc}: {error['msg']}")
            raise ConfigException("\n".join(error_lines)) from e
        except ValueError as e:
            raise ConfigException(f"Invalid configuration file {config_path}: {e}") from e

        logger.debug(f"Loaded engine configuration from {path}")
        return config
