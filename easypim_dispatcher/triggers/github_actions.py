"""Triggers the policy orchestrator workflow on GitHub Actions."""

from typing import Any

import structlog
from githubkit import GitHub
from githubkit.exception import RequestFailed, RequestTimeout

from easypim_dispatcher.configuration.exceptions import RequiredConfigurationElementError
from easypim_dispatcher.configuration.models import GitHubActionsCredentials, Platform
from easypim_dispatcher.configuration.reconcile import validate_github_actions_credentials
from easypim_dispatcher.github.client import get_github_token_client
from easypim_dispatcher.routing.models import ExecutionParameters
from easypim_dispatcher.triggers.abc import DEFAULT_TIMEOUT_SECONDS, PlatformTrigger, format_flag
from easypim_dispatcher.triggers.results import TriggerOutcome
from easypim_dispatcher.utils.github import build_workflow_runs_url, split_repository_in_configuration

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitHubActionsTrigger(PlatformTrigger):
    """Dispatches the orchestrator workflow through the workflow_dispatch API."""

    platform = Platform.GITHUB_ACTIONS

    def __init__(
        self,
        credentials: GitHubActionsCredentials,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: GitHub[Any] | None = None,
    ) -> None:
        """Initialize the trigger. A client is created on demand when not given."""
        super().__init__(timeout_seconds)
        self.credentials = credentials
        self._client = client

    async def missing_configuration(self) -> list[RequiredConfigurationElementError]:
        """Return the GitHub settings that are not set."""
        return await validate_github_actions_credentials(self.credentials)

    def build_parameters(self, secret_name: str, params: ExecutionParameters) -> dict[str, Any]:
        """Map execution parameters to the workflow's inputs."""
        return {
            "configSecretName": secret_name,
            "WhatIf": format_flag(params.preview_only),
            "Mode": params.mode.value,
            "Verbose": format_flag(params.verbose),
            "run_description": params.description,
        }

    def describe_error(self, exc: Exception) -> str:
        """Describe githubkit errors with the HTTP status or timeout."""
        if isinstance(exc, RequestFailed):
            try:
                message = exc.response.json().get("message", "")
            except Exception:
                message = exc.response.text
            return f"GitHub API returned HTTP {exc.response.status_code}: {message}"
        if isinstance(exc, RequestTimeout):
            return f"GitHub API request timed out after {self.timeout_seconds} seconds"
        return super().describe_error(exc)

    async def _dispatch(self, secret_name: str, vault_name: str, params: ExecutionParameters) -> TriggerOutcome:
        owner, repository = await split_repository_in_configuration(repo=self.credentials.repository)
        client = self._client
        if client is None:
            client = get_github_token_client(
                github_token=self.credentials.token or "",
                github_api_url=self.credentials.api_url,
                timeout_seconds=self.timeout_seconds,
            )

        logger.debug(
            "Dispatching workflow",
            owner=owner,
            repository=repository,
            workflow_id=self.credentials.workflow_id,
            ref=self.credentials.ref,
            vault_name=vault_name,
        )
        response = await client.rest.actions.async_create_workflow_dispatch(
            owner=owner,
            repo=repository,
            workflow_id=self.credentials.workflow_id,
            ref=self.credentials.ref,
            inputs=self.build_parameters(secret_name, params),
        )

        run_reference: str | None = None
        run_url = build_workflow_runs_url(self.credentials.server_url, owner, repository, self.credentials.workflow_id)
        # The dispatch endpoint answers 204 with no body unless run details are returned.
        if response.status_code != 204 and response.content:
            try:
                details = response.json()
            except ValueError:
                details = {}
            if isinstance(details, dict):
                if details.get("workflow_run_id") is not None:
                    run_reference = str(details["workflow_run_id"])
                run_url = details.get("html_url") or run_url

        return TriggerOutcome.succeeded(self.platform, run_reference=run_reference, run_url=run_url, status_code=response.status_code)
