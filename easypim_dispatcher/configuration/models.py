"""Models for configuration shared by the dispatcher components."""

from dataclasses import dataclass
from enum import Enum


class Platform(str, Enum):
    """Enum for the downstream automation platforms."""

    GITHUB_ACTIONS = "GitHubActions"
    AZURE_DEVOPS = "AzureDevOps"


class ExecutionMode(str, Enum):
    """Enum for the reconciliation mode passed to the policy orchestrator."""

    DELTA = "delta"
    INITIAL = "initial"


@dataclass(frozen=True)
class GitHubActionsCredentials:
    """Credentials and coordinates for the GitHub Actions workflow dispatch."""

    token: str | None
    repository: str | None
    workflow_id: str
    ref: str
    api_url: str
    server_url: str

    def __repr__(self) -> str:
        """Represent the credentials without the token."""
        return f"GitHubActionsCredentials(repository={self.repository!r}, workflow_id={self.workflow_id!r}, ref={self.ref!r})"


@dataclass(frozen=True)
class AzureDevOpsCredentials:
    """Credentials and coordinates for the Azure DevOps pipeline run."""

    organization: str | None
    project: str | None
    pipeline_id: str | None
    pat: str | None
    api_url: str
    source_branch: str

    def __repr__(self) -> str:
        """Represent the credentials without the personal access token."""
        return (
            f"AzureDevOpsCredentials(organization={self.organization!r}, project={self.project!r}, "
            f"pipeline_id={self.pipeline_id!r})"
        )


@dataclass(frozen=True)
class ExecutionOverrides:
    """Operator overrides. None means no valid override is present."""

    preview_only: bool | None = None
    mode: ExecutionMode | None = None
    verbose: bool | None = None


@dataclass(frozen=True)
class DispatcherConfig:
    """Read-only configuration snapshot for a single invocation."""

    debug: bool
    timeout_seconds: float
    github: GitHubActionsCredentials
    azure_devops: AzureDevOpsCredentials
    overrides: ExecutionOverrides
