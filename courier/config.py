"""
Configuration using pydantic-settings.

The environment-tag → account mapping lives here instead of in code, so a new
account or region is a settings change. Values can be overridden from the
environment with the COURIER_ prefix, e.g.

    COURIER_DEFAULT_ENVIRONMENT=production
    COURIER_ENVIRONMENTS='{"dev": {"account_id": "123", "region": "us-east-1"}}'
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from courier.domain.models import AccountTarget

# Pre-provisioned accounts. These change whenever a new AWS account is created.
_DEFAULT_ENVIRONMENTS: dict[str, AccountTarget] = {
    "staging": AccountTarget(account_id="384553929753", region="ap-southeast-2"),
    "production": AccountTarget(account_id="966972755541", region="ap-southeast-2"),
}


class CourierSettings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COURIER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environments: dict[str, AccountTarget] = Field(
        default_factory=lambda: dict(_DEFAULT_ENVIRONMENTS),
        description="Environment tag to account/region mapping",
    )
    default_environment: str = Field(
        default="staging",
        description="Environment used when a tag is not in `environments`",
    )
    sqs_host_template: str = Field(
        default="https://sqs.{region}.amazonaws.com",
        description="Regional SQS host, formatted with the target region",
    )
    max_key_attempts: int = Field(
        default=10,
        ge=1,
        description="Existence checks before unique key generation gives up",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @model_validator(mode="after")
    def _default_environment_is_mapped(self) -> CourierSettings:
        if self.default_environment not in self.environments:
            raise ValueError(
                f"default_environment {self.default_environment!r} "
                "is not a key of environments"
            )
        return self

    def account_for(self, environment: str) -> AccountTarget:
        target = self.environments.get(environment)
        if target is None:
            return self.environments[self.default_environment]
        return target


@lru_cache
def get_settings() -> CourierSettings:
    """Return the process-wide settings instance."""
    return CourierSettings()
