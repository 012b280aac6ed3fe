"""
Domain models for courier — backed by Pydantic v2.

All models are frozen (immutable). Queue responses and message bodies are
not modelled: they are the transport's raw dicts and opaque JSON text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from courier.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from courier.config import CourierSettings

_MISSING_PARAMETERS = (
    "All parameters are mandatory, please provide an app_name, slice, "
    "environment and queue_name"
)


class AccountTarget(BaseModel):
    """The AWS account and region an environment tag maps to."""

    model_config = ConfigDict(frozen=True)

    account_id: str
    region: str


class QueueAddress(BaseModel):
    """
    Naming inputs for a pre-provisioned queue.

    Queues follow the convention {app_name}-{slice}-{queue_name}, e.g.
    "alfred-ons-123-work-items", and live in the account selected by
    `environment`.
    """

    model_config = ConfigDict(frozen=True)

    app_name: str
    slice: str
    environment: str
    queue_name: str

    @classmethod
    def build(
        cls,
        app_name: str | None,
        slice: str | None,
        environment: str | None,
        queue_name: str | None,
    ) -> QueueAddress:
        """Factory — raises ConfigurationError if any input is None or empty."""
        if not app_name or not slice or not environment or not queue_name:
            raise ConfigurationError(_MISSING_PARAMETERS)
        return cls(
            app_name=app_name,
            slice=slice,
            environment=environment,
            queue_name=queue_name,
        )

    @property
    def queue_name_full(self) -> str:
        return f"{self.app_name}-{self.slice}-{self.queue_name}"

    def target(self, settings: CourierSettings) -> AccountTarget:
        """Account for this environment; unrecognised tags use the default."""
        return settings.account_for(self.environment)

    def url(self, settings: CourierSettings) -> str:
        target = self.target(settings)
        host = settings.sqs_host_template.format(region=target.region)
        return f"{host}/{target.account_id}/{self.queue_name_full}"


class MessageEvent(BaseModel):
    """Published when a poll tick received at least one message."""

    model_config = ConfigDict(frozen=True)

    response: dict[str, Any]


class FailureEvent(BaseModel):
    """Published when a poll tick failed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    error: Exception
