"""Answers the Event Grid subscription validation handshake."""

from typing import Any

from easypim_dispatcher.events.models import ChangeNotification, NotificationKind


def is_handshake(notification: ChangeNotification) -> bool:
    """Return True when the notification is a subscription validation request."""
    return notification.kind is NotificationKind.VALIDATION and bool(notification.validation_code)


def build_handshake_response(notification: ChangeNotification) -> dict[str, Any]:
    """Build the body that echoes the validation code back to Event Grid.

    Raises:
        ValueError: If the notification is not a handshake.
    """
    if not is_handshake(notification):
        raise ValueError(f"Notification of kind {notification.kind.value} is not a subscription validation handshake")
    return {"validationResponse": notification.validation_code}
