"""Configuration module for the mailcraft application.

This module defines all configuration models and parsing logic for the application.
"""

import sys
import typing as t

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .attachment.constants import DEFAULT_ATTACHMENT_TOTAL_SIZE
from .db.db import DBConfig
from .db.db_loader import get_db_module

# Default lifetime of a session ticket: 20 minutes
DEFAULT_SESSION_TICKET_TTL = 20 * 60


class StrictBaseModel(BaseModel):
    """Base model with immutable (frozen) configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class LanguageConfig(StrictBaseModel):
    """Configuration for a single language.

    Attributes:
        name: Display name of the language
        flag: Flag icon code (country code)
        country: Country code
    """

    name: str = Field(alias="name")
    flag: str = Field(alias="flag")
    country: str = Field(alias="country")


Languages = dict[str, LanguageConfig]


class AttachmentConfig(StrictBaseModel):
    """Limits applied when attaching files to messages.

    Attributes:
        total_size_in_bytes: Maximum total size of all files attached to one message
    """

    total_size_in_bytes: int = Field(
        default=DEFAULT_ATTACHMENT_TOTAL_SIZE, alias="TOTAL_SIZE_IN_BYTES", gt=0
    )


class TelemetryConfig(StrictBaseModel):
    """OpenTelemetry configuration for application tracing.

    Attributes:
        enabled: Enable or disable telemetry tracing
        endpoint: OTLP endpoint URL (e.g., http://localhost:4317)
        console_export: Export traces to console for debugging
        timeout: Timeout in seconds for exporter (default: 10)
        deployment_environment: Deployment environment (e.g., production, staging, dev)
        service_instance_id: Service instance ID (auto-generated if not provided)
    """

    enabled: bool = Field(default=False, alias="enabled")
    endpoint: t.Optional[str] = Field(default=None, alias="endpoint")
    console_export: bool = Field(default=False, alias="console_export")
    timeout: int = Field(default=10, alias="timeout", gt=0)
    deployment_environment: t.Optional[str] = Field(default=None, alias="deployment_environment")
    service_instance_id: t.Optional[str] = Field(default=None, alias="service_instance_id")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: t.Optional[str]) -> t.Optional[str]:
        """Validate endpoint URL format."""
        if v is None:
            return v

        from urllib.parse import urlparse

        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"Invalid endpoint: '{v}'. Must be http(s)://host[:port]")

        return v


class Config(StrictBaseModel):
    """Main application configuration.

    Attributes:
        app_name: Application name
        secret_key: Flask secret key for sessions
        db: Database configuration
        languages: Supported languages configuration
        translation_directories: Additional translation directories
        attachments: Attachment size limits
        session_ticket_ttl: Seconds a session ticket stays valid after login
        fake_login: Enable development login routes (debug/testing only)
        debug: Enable debug mode
        testing: Enable testing mode
        telemetry: OpenTelemetry configuration
    """

    app_name: str = Field(alias="APP_NAME")
    secret_key: str = Field(alias="SECRET_KEY")
    db: DBConfig = Field(alias="DB")
    languages: Languages = Field(default_factory=dict, alias="LANGUAGES")
    translation_directories: list[str] = Field(
        default_factory=list,
        alias="TRANSLATION_DIRECTORIES",
    )
    attachments: AttachmentConfig = Field(default_factory=AttachmentConfig, alias="ATTACHMENTS")
    session_ticket_ttl: int = Field(
        default=DEFAULT_SESSION_TICKET_TTL, alias="SESSION_TICKET_TTL", gt=0
    )
    fake_login: bool = Field(default=False, alias="FAKE_LOGIN")
    debug: bool = Field(default=False, alias="DEBUG")
    testing: bool = Field(default=False, alias="TESTING")
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig, alias="TELEMETRY")

    @classmethod
    def model_validate(
        cls,
        obj: t.Any,
        *,
        strict: bool | None = None,
        from_attributes: bool | None = None,
        context: dict[str, t.Any] | None = None,
    ) -> "Config":
        """Validate and construct Config from dictionary.

        The DB section is validated with the configuration class of the selected
        backend, so backend-specific keys are kept.

        Args:
            obj: Configuration dictionary
            strict: Enable strict validation
            from_attributes: Populate from object attributes
            context: Additional validation context

        Returns:
            Validated Config instance
        """
        db_cfg_type = get_db_module(obj["DB"]["TYPE"]).db_config_type()
        obj["DB"] = db_cfg_type.model_validate(obj["DB"])
        return super().model_validate(
            obj, strict=strict, from_attributes=from_attributes, context=context
        )

    @classmethod
    def parse_yaml(cls, path: str) -> "Config":
        """Parse configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated Config instance

        Raises:
            SystemExit: If config file is not found
        """
        try:
            with open(path, "r") as f:
                return cls.model_validate(yaml.safe_load(f))
        except FileNotFoundError:
            print(f"Config file not found: {path}", file=sys.stderr)
            raise SystemExit(1)
