"""Sequences parsing, routing and triggering for one inbound notification."""

from typing import Any, Callable

import structlog

from easypim_dispatcher.configuration.models import DispatcherConfig, Platform
from easypim_dispatcher.dispatch.results import DispatchResult, DispatchState
from easypim_dispatcher.events.handshake import build_handshake_response, is_handshake
from easypim_dispatcher.events.models import UNKNOWN_PLACEHOLDER, ChangeNotification, NotificationKind
from easypim_dispatcher.events.parser import RawBody, parse_notification
from easypim_dispatcher.routing.classifier import classify_platform
from easypim_dispatcher.routing.models import ExecutionParameters, RoutingDecision
from easypim_dispatcher.routing.parameters import derive_execution_parameters
from easypim_dispatcher.triggers.abc import PlatformTrigger
from easypim_dispatcher.triggers.factory import get_platform_trigger
from easypim_dispatcher.triggers.results import TriggerOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TriggerSelector = Callable[[Platform, DispatcherConfig], PlatformTrigger]

HTTP_OK = 200
HTTP_TRIGGER_FAILED = 500


def _parameters_response_fields(parameters: ExecutionParameters) -> dict[str, Any]:
    return {
        "whatIf": parameters.preview_only,
        "mode": parameters.mode.value,
        "verbose": parameters.verbose,
        "description": parameters.description,
    }


def _respond_no_op(notification: ChangeNotification) -> DispatchResult:
    logger.info("Notification ignored", reason=notification.reason)
    return DispatchResult(
        state=DispatchState.NO_OP,
        status_code=HTTP_OK,
        body={"status": "ignored", "reason": notification.reason or "unrecognized notification"},
        notification=notification,
    )


def _respond_trigger(
    notification: ChangeNotification,
    decision: RoutingDecision,
    parameters: ExecutionParameters,
    outcome: TriggerOutcome,
) -> DispatchResult:
    body: dict[str, Any] = {
        "status": "triggered" if outcome.success else "failed",
        "secretName": notification.secret_name,
        "vaultName": notification.vault_name,
        "parameters": _parameters_response_fields(parameters),
        **outcome.to_response_fields(),
    }
    if notification.event_id:
        body["eventId"] = notification.event_id
    return DispatchResult(
        state=DispatchState.TRIGGERED if outcome.success else DispatchState.TRIGGER_FAILED,
        status_code=HTTP_OK if outcome.success else HTTP_TRIGGER_FAILED,
        body=body,
        notification=notification,
        decision=decision,
        parameters=parameters,
        outcome=outcome,
    )


async def dispatch_notification(
    body: RawBody,
    config: DispatcherConfig,
    trigger_selector: TriggerSelector = get_platform_trigger,
) -> DispatchResult:
    """Handle one inbound notification and build the HTTP response.

    Exactly one terminal state is reached per call: the handshake is answered,
    the notification is ignored, or one platform is triggered. Failures to
    trigger are answered with HTTP 500 so the event delivery system retries.
    """
    notification = parse_notification(body)

    with structlog.contextvars.bound_contextvars(
        event_id=notification.event_id,
        event_type=notification.event_type,
    ):
        if is_handshake(notification):
            logger.info("Answering subscription validation handshake")
            return DispatchResult(
                state=DispatchState.HANDSHAKE_RESPONDED,
                status_code=HTTP_OK,
                body=build_handshake_response(notification),
                notification=notification,
            )

        if notification.kind is not NotificationKind.SECRET_CHANGED:
            return _respond_no_op(notification)

        secret_name = notification.secret_name or UNKNOWN_PLACEHOLDER
        vault_name = notification.vault_name or UNKNOWN_PLACEHOLDER
        with structlog.contextvars.bound_contextvars(secret_name=secret_name, vault_name=vault_name):
            decision = classify_platform(secret_name)
            parameters = derive_execution_parameters(secret_name, vault_name, config.overrides)
            logger.info("Routed secret change", platform=decision.platform.value, **parameters.as_log_fields())

            trigger = trigger_selector(decision.platform, config)
            outcome = await trigger.trigger(secret_name, vault_name, parameters)
            return _respond_trigger(notification, decision, parameters, outcome)
