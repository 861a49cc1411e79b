"""Fixtures for unit tests."""

from typing import Any, Callable, Generator

import pytest
import structlog

from easypim_dispatcher.configuration.models import (
    AzureDevOpsCredentials,
    DispatcherConfig,
    ExecutionOverrides,
    GitHubActionsCredentials,
)


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


DISPATCHER_ENVIRONMENT_VARIABLES = (
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_SERVER_URL",
    "GITHUB_WORKFLOW_ID",
    "GITHUB_REF",
    "ADO_ORGANIZATION",
    "ADO_PROJECT",
    "ADO_PIPELINE_ID",
    "ADO_PAT",
    "ADO_API_URL",
    "ADO_SOURCE_BRANCH",
    "EASYPIM_WHATIF",
    "EASYPIM_MODE",
    "EASYPIM_VERBOSE",
    "DISPATCH_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def isolate_dispatcher_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove dispatcher settings inherited from the environment running the tests."""
    for name in DISPATCHER_ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def github_credentials() -> GitHubActionsCredentials:
    """Complete GitHub Actions credentials."""
    return GitHubActionsCredentials(
        token="ghp_test_token",
        repository="contoso/easypim-governance",
        workflow_id="easypim-orchestrator.yml",
        ref="main",
        api_url="https://api.github.com",
        server_url="https://github.com",
    )


@pytest.fixture
def azure_devops_credentials() -> AzureDevOpsCredentials:
    """Complete Azure DevOps credentials."""
    return AzureDevOpsCredentials(
        organization="contoso",
        project="Identity Governance",
        pipeline_id="42",
        pat="ado-test-pat",
        api_url="https://dev.azure.com",
        source_branch="refs/heads/main",
    )


@pytest.fixture
def make_config(
    github_credentials: GitHubActionsCredentials,
    azure_devops_credentials: AzureDevOpsCredentials,
) -> Callable[..., DispatcherConfig]:
    """Factory building a DispatcherConfig with selected fields replaced."""

    def _make_config(**kwargs: Any) -> DispatcherConfig:
        values: dict[str, Any] = {
            "debug": False,
            "timeout_seconds": 5.0,
            "github": github_credentials,
            "azure_devops": azure_devops_credentials,
            "overrides": ExecutionOverrides(),
        }
        values.update(kwargs)
        return DispatcherConfig(**values)

    return _make_config
