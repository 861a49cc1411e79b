"""Decodes raw request bodies into change notifications."""

import json
from typing import Any

import structlog
from pydantic import ValidationError

from easypim_dispatcher.events.models import UNKNOWN_PLACEHOLDER, ChangeNotification, NotificationKind
from easypim_dispatcher.schemas.event_grid import (
    SECRET_NEW_VERSION_CREATED_EVENT_TYPE,
    SUBSCRIPTION_VALIDATION_EVENT_TYPE,
    EventGridEvent,
    SecretNewVersionCreatedData,
    SubscriptionValidationData,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

RawBody = str | bytes | dict[str, Any] | list[Any] | None


def _unrecognized(reason: str, event: EventGridEvent | None = None) -> ChangeNotification:
    logger.warning("Unrecognized notification", reason=reason, event_type=event.event_type if event else None)
    return ChangeNotification(
        kind=NotificationKind.UNRECOGNIZED,
        event_id=event.id if event else None,
        event_type=event.event_type if event else None,
        subject=event.subject if event else None,
        reason=reason,
    )


def _decode_body(body: RawBody) -> Any:
    """Decode a raw body into structured data.

    Raises:
        ValueError: If the body is not valid UTF-8 JSON.
        RecursionError: If the body is nested too deeply to decode.
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if isinstance(body, str):
        return json.loads(body)
    return body


def parse_notification(body: RawBody) -> ChangeNotification:
    """Parse a raw request body into a ChangeNotification.

    Never raises. Bodies that are not JSON, not in the Event Grid schema, or
    of an event type we do not act on are returned as UNRECOGNIZED.
    """
    if body is None or (isinstance(body, (str, bytes)) and not body.strip()):
        return _unrecognized("empty body")

    try:
        payload = _decode_body(body)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        return _unrecognized(f"body is not valid JSON: {exc}")
    except RecursionError:
        return _unrecognized("body is nested too deeply to decode")

    # Event Grid delivers events as a JSON array.
    if isinstance(payload, list):
        if not payload:
            return _unrecognized("empty event array")
        if len(payload) > 1:
            logger.warning("Event batch contains more than one event, only the first is processed", ignored_events=len(payload) - 1)
        payload = payload[0]

    if not isinstance(payload, dict):
        return _unrecognized(f"expected a JSON object, got {type(payload).__name__}")

    try:
        event = EventGridEvent.model_validate(payload)
    except ValidationError as exc:
        return _unrecognized(f"body is not an Event Grid event: {exc.error_count()} validation error(s)")

    if event.event_type == SUBSCRIPTION_VALIDATION_EVENT_TYPE:
        try:
            validation_data = SubscriptionValidationData.model_validate(event.data)
        except ValidationError:
            return _unrecognized("subscription validation event data is malformed", event)
        if not validation_data.validation_code:
            return _unrecognized("subscription validation event has no validationCode", event)
        return ChangeNotification(
            kind=NotificationKind.VALIDATION,
            validation_code=validation_data.validation_code,
            event_id=event.id,
            event_type=event.event_type,
            subject=event.subject,
        )

    if event.event_type == SECRET_NEW_VERSION_CREATED_EVENT_TYPE:
        try:
            secret_data = SecretNewVersionCreatedData.model_validate(event.data)
        except ValidationError:
            return _unrecognized("secret change event data is malformed", event)
        if not secret_data.vault_name or not secret_data.object_name:
            logger.warning(
                "Secret change event is missing vault or secret name",
                event_id=event.id,
                vault_name=secret_data.vault_name,
                secret_name=secret_data.object_name,
            )
        return ChangeNotification(
            kind=NotificationKind.SECRET_CHANGED,
            vault_name=secret_data.vault_name or UNKNOWN_PLACEHOLDER,
            secret_name=secret_data.object_name or UNKNOWN_PLACEHOLDER,
            event_id=event.id,
            event_type=event.event_type,
            subject=event.subject,
        )

    return _unrecognized(f"unsupported event type {event.event_type!r}", event)
