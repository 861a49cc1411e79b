"""ASGI application receiving Event Grid notifications.

Usage:
    uvicorn easypim_dispatcher.app:app --host 0.0.0.0 --port 8080
"""

from typing import Annotated, Any

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from easypim_dispatcher.configuration.env import Settings
from easypim_dispatcher.configuration.models import DispatcherConfig, Platform
from easypim_dispatcher.configuration.reconcile import (
    reconcile_dispatcher_configuration,
    validate_azure_devops_credentials,
    validate_github_actions_credentials,
)
from easypim_dispatcher.dispatch.dispatcher import TriggerSelector, dispatch_notification
from easypim_dispatcher.triggers.factory import get_platform_trigger
from easypim_dispatcher.utils.logging import configure_logging

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

SECRET_CHANGE_ROUTE = "/api/secret-change"
HEALTH_ROUTE = "/api/health"


async def get_dispatcher_config() -> DispatcherConfig:
    """Build a fresh configuration snapshot for the current request."""
    return await reconcile_dispatcher_configuration()


def get_trigger_selector() -> TriggerSelector:
    """Return the function selecting a trigger client for a platform."""
    return get_platform_trigger


def create_app(configure_logs: bool = True) -> FastAPI:
    """Create the FastAPI application."""
    if configure_logs:
        settings = Settings()
        configure_logging(debug=settings.DEBUG, json_logs=True)

    application = FastAPI(title="EasyPIM event dispatcher")

    @application.post(SECRET_CHANGE_ROUTE)
    async def secret_change(
        request: Request,
        config: Annotated[DispatcherConfig, Depends(get_dispatcher_config)],
        trigger_selector: Annotated[TriggerSelector, Depends(get_trigger_selector)],
    ) -> JSONResponse:
        """Receive a Key Vault notification from Event Grid."""
        # Read the raw body so that non-JSON payloads reach the parser.
        body = await request.body()
        logger.debug("Received notification", content_length=len(body), aeg_event_type=request.headers.get("aeg-event-type"))
        result = await dispatch_notification(body, config, trigger_selector=trigger_selector)
        return JSONResponse(status_code=result.status_code, content=result.body)

    @application.get(HEALTH_ROUTE)
    async def health(config: Annotated[DispatcherConfig, Depends(get_dispatcher_config)]) -> dict[str, Any]:
        """Report liveness and which platforms have complete credentials."""
        return {
            "status": "ok",
            "platforms": {
                Platform.GITHUB_ACTIONS.value: not await validate_github_actions_credentials(config.github),
                Platform.AZURE_DEVOPS.value: not await validate_azure_devops_credentials(config.azure_devops),
            },
        }

    return application


app = create_app()
