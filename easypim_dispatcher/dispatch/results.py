"""Contains results of a dispatcher invocation."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from easypim_dispatcher.events.models import ChangeNotification
from easypim_dispatcher.routing.models import ExecutionParameters, RoutingDecision
from easypim_dispatcher.triggers.results import TriggerOutcome


class DispatchState(Enum):
    """Terminal states of a dispatcher invocation."""

    HANDSHAKE_RESPONDED = "handshake_responded"
    TRIGGERED = "triggered"
    TRIGGER_FAILED = "trigger_failed"
    NO_OP = "no_op"


@dataclass(frozen=True)
class DispatchResult:
    """The HTTP response to send and how the invocation got there."""

    state: DispatchState
    status_code: int
    body: dict[str, Any]
    notification: ChangeNotification
    decision: RoutingDecision | None = None
    parameters: ExecutionParameters | None = None
    outcome: TriggerOutcome | None = None
