"""Triggers the policy orchestrator pipeline on Azure DevOps."""

import base64
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from easypim_dispatcher.configuration.exceptions import RequiredConfigurationElementError
from easypim_dispatcher.configuration.models import AzureDevOpsCredentials, Platform
from easypim_dispatcher.configuration.reconcile import validate_azure_devops_credentials
from easypim_dispatcher.routing.models import ExecutionParameters
from easypim_dispatcher.triggers.abc import DEFAULT_TIMEOUT_SECONDS, PlatformTrigger, format_flag
from easypim_dispatcher.triggers.results import TriggerOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

AZURE_DEVOPS_API_VERSION = "7.0"


def build_basic_auth_header(pat: str) -> str:
    """Build the Basic authorization header value for a personal access token."""
    encoded = base64.b64encode(f":{pat}".encode()).decode("ascii")
    return f"Basic {encoded}"


class AzureDevOpsTrigger(PlatformTrigger):
    """Queues a pipeline run through the Azure DevOps Pipelines API."""

    platform = Platform.AZURE_DEVOPS

    def __init__(
        self,
        credentials: AzureDevOpsCredentials,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the trigger. ``transport`` replaces the network layer in tests."""
        super().__init__(timeout_seconds)
        self.credentials = credentials
        self._transport = transport

    async def missing_configuration(self) -> list[RequiredConfigurationElementError]:
        """Return the Azure DevOps settings that are not set."""
        return await validate_azure_devops_credentials(self.credentials)

    @property
    def runs_url(self) -> str:
        """URL of the pipeline runs endpoint."""
        organization = quote(self.credentials.organization or "", safe="")
        project = quote(self.credentials.project or "", safe="")
        pipeline_id = quote(self.credentials.pipeline_id or "", safe="")
        return f"{self.credentials.api_url}/{organization}/{project}/_apis/pipelines/{pipeline_id}/runs"

    def build_parameters(self, secret_name: str, params: ExecutionParameters) -> dict[str, Any]:
        """Map execution parameters to the pipeline's template parameters."""
        return {
            "configSecretName": secret_name,
            "whatIfMode": format_flag(params.preview_only),
            "mode": params.mode.value,
            "verbose": format_flag(params.verbose),
            "runDescription": params.description,
        }

    def build_request_body(self, secret_name: str, params: ExecutionParameters) -> dict[str, Any]:
        """Build the run request body."""
        return {
            "resources": {"repositories": {"self": {"refName": self.credentials.source_branch}}},
            "templateParameters": self.build_parameters(secret_name, params),
        }

    def describe_error(self, exc: Exception) -> str:
        """Describe httpx errors with the HTTP status or timeout."""
        if isinstance(exc, httpx.HTTPStatusError):
            return f"Azure DevOps API returned HTTP {exc.response.status_code}: {exc.response.text[:500]}"
        if isinstance(exc, httpx.TimeoutException):
            return f"Azure DevOps API request timed out after {self.timeout_seconds} seconds"
        return super().describe_error(exc)

    async def _dispatch(self, secret_name: str, vault_name: str, params: ExecutionParameters) -> TriggerOutcome:
        headers = {
            "Authorization": build_basic_auth_header(self.credentials.pat or ""),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        logger.debug(
            "Queuing pipeline run",
            organization=self.credentials.organization,
            project=self.credentials.project,
            pipeline_id=self.credentials.pipeline_id,
            source_branch=self.credentials.source_branch,
            vault_name=vault_name,
        )
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.post(
                self.runs_url,
                params={"api-version": AZURE_DEVOPS_API_VERSION},
                headers=headers,
                json=self.build_request_body(secret_name, params),
            )
        response.raise_for_status()

        # A rejected PAT is answered with 203 and an HTML sign-in page.
        if response.status_code == 203:
            return TriggerOutcome.failed(
                self.platform,
                "Azure DevOps API returned HTTP 203; the personal access token was not accepted",
                status_code=response.status_code,
            )

        try:
            run = response.json()
        except (ValueError, RecursionError):
            run = {}
        if not isinstance(run, dict):
            run = {}

        run_reference = str(run["id"]) if run.get("id") is not None else None
        run_url: str | None = None
        links = run.get("_links")
        web = links.get("web") if isinstance(links, dict) else None
        if isinstance(web, dict) and isinstance(web.get("href"), str):
            run_url = web["href"]
        if not run_url and isinstance(run.get("url"), str):
            run_url = run["url"]
        return TriggerOutcome.succeeded(self.platform, run_reference=run_reference, run_url=run_url, status_code=response.status_code)
