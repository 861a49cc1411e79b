"""Routing and execution parameter models derived from a secret change."""

from dataclasses import dataclass

from easypim_dispatcher.configuration.models import ExecutionMode, Platform


@dataclass(frozen=True)
class RoutingDecision:
    """The platform selected to run the policy update."""

    platform: Platform
    matched_rule: str | None = None


@dataclass(frozen=True)
class ExecutionParameters:
    """Parameters passed to the downstream policy orchestrator run."""

    preview_only: bool = False
    mode: ExecutionMode = ExecutionMode.DELTA
    verbose: bool = False
    description: str = ""

    def as_log_fields(self) -> dict[str, object]:
        """Return the parameters as structured log fields."""
        return {
            "preview_only": self.preview_only,
            "mode": self.mode.value,
            "verbose": self.verbose,
        }
