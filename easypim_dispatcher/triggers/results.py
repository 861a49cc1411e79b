"""Contains the normalized result of a trigger call."""

from dataclasses import dataclass
from typing import Any

from easypim_dispatcher.configuration.models import Platform


@dataclass(frozen=True)
class TriggerOutcome:
    """Outcome of triggering a downstream platform run."""

    success: bool
    platform: Platform
    run_reference: str | None = None
    run_url: str | None = None
    error: str | None = None
    status_code: int | None = None

    @classmethod
    def succeeded(
        cls, platform: Platform, run_reference: str | None = None, run_url: str | None = None, status_code: int | None = None
    ) -> "TriggerOutcome":
        """Create a successful outcome."""
        return cls(success=True, platform=platform, run_reference=run_reference, run_url=run_url, status_code=status_code)

    @classmethod
    def failed(cls, platform: Platform, error: str, status_code: int | None = None) -> "TriggerOutcome":
        """Create a failed outcome."""
        return cls(success=False, platform=platform, error=error, status_code=status_code)

    def to_response_fields(self) -> dict[str, Any]:
        """Return the outcome as camelCase response fields, omitting empty values."""
        fields: dict[str, Any] = {
            "success": self.success,
            "platform": self.platform.value,
            "runReference": self.run_reference,
            "runUrl": self.run_url,
            "error": self.error,
        }
        return {k: v for k, v in fields.items() if v is not None}
