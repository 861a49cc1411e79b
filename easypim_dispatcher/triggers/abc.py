"""Base ABC for platform trigger clients."""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from easypim_dispatcher.configuration.exceptions import RequiredConfigurationElementError
from easypim_dispatcher.configuration.models import Platform
from easypim_dispatcher.routing.models import ExecutionParameters
from easypim_dispatcher.triggers.results import TriggerOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def format_flag(value: bool) -> str:
    """Format a flag the way workflow and pipeline parameters expect it."""
    return "true" if value else "false"


class PlatformTrigger(ABC):
    """Base ABC for platform trigger clients.

    ``trigger`` never raises. Missing configuration short-circuits before any
    network call, and every error raised while dispatching becomes a failed
    TriggerOutcome. No retries are attempted here; the caller's HTTP status
    tells the event delivery system whether to redeliver.
    """

    platform: Platform

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Initialize the trigger with the timeout bounding its outbound call."""
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def missing_configuration(self) -> list[RequiredConfigurationElementError]:
        """Return the required configuration elements that are not set."""
        pass

    @abstractmethod
    def build_parameters(self, secret_name: str, params: ExecutionParameters) -> dict[str, Any]:
        """Map execution parameters to the platform's declared input names."""
        pass

    @abstractmethod
    async def _dispatch(self, secret_name: str, vault_name: str, params: ExecutionParameters) -> TriggerOutcome:
        """Issue the authenticated trigger call. May raise."""
        pass

    def describe_error(self, exc: Exception) -> str:
        """Describe an error raised while dispatching."""
        return f"{type(exc).__name__}: {exc}"

    async def trigger(self, secret_name: str, vault_name: str, params: ExecutionParameters) -> TriggerOutcome:
        """Trigger a run on the platform and normalize the result."""
        missing_settings = await self.missing_configuration()
        if missing_settings:
            error = "Missing required configuration for {platform}: {settings}".format(
                platform=self.platform.value,
                settings=", ".join(f"{setting.name} (environment variable {setting.env_name})" for setting in missing_settings),
            )
            logger.error(
                "Platform credentials are incomplete, not triggering",
                platform=self.platform.value,
                missing=[setting.env_name for setting in missing_settings],
            )
            return TriggerOutcome.failed(self.platform, error)

        logger.info("Triggering platform run", platform=self.platform.value, secret_name=secret_name, **params.as_log_fields())
        try:
            outcome = await self._dispatch(secret_name, vault_name, params)
        except Exception as exc:
            error = self.describe_error(exc)
            logger.error("Platform trigger failed", platform=self.platform.value, error=error, error_type=type(exc).__name__)
            return TriggerOutcome.failed(self.platform, error, status_code=getattr(getattr(exc, "response", None), "status_code", None))

        if outcome.success:
            logger.info("Platform run triggered", platform=self.platform.value, run_reference=outcome.run_reference, run_url=outcome.run_url)
        else:
            logger.error("Platform trigger failed", platform=self.platform.value, error=outcome.error, status_code=outcome.status_code)
        return outcome
