"""Typed representation of an inbound change notification."""

from dataclasses import dataclass
from enum import Enum

UNKNOWN_PLACEHOLDER = "Unknown"


class NotificationKind(Enum):
    """Enum for the kinds of notification the dispatcher distinguishes."""

    VALIDATION = "validation"
    SECRET_CHANGED = "secret_changed"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ChangeNotification:
    """A parsed notification, scoped to a single invocation.

    ``event_id`` is passed through untouched. Delivery is at-least-once, so
    callers that need exactly-once triggering must deduplicate on it.
    """

    kind: NotificationKind
    validation_code: str | None = None
    vault_name: str | None = None
    secret_name: str | None = None
    event_id: str | None = None
    event_type: str | None = None
    subject: str | None = None
    reason: str | None = None
