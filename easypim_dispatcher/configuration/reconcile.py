"""Reconcile dispatcher configuration from environment settings."""

import structlog

from easypim_dispatcher.configuration.env import Settings
from easypim_dispatcher.configuration.exceptions import InvalidOverrideValueError, RequiredConfigurationElementError
from easypim_dispatcher.configuration.models import (
    AzureDevOpsCredentials,
    DispatcherConfig,
    ExecutionMode,
    ExecutionOverrides,
    GitHubActionsCredentials,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

TRUE_LITERALS = ("true", "1", "yes")
FALSE_LITERALS = ("false", "0", "no")


def parse_boolean_override(env_name: str, value: str) -> bool:
    """Parse a boolean override literal.

    Raises:
        InvalidOverrideValueError: If the value is not a recognized boolean literal.
    """
    normalized = value.strip().lower()
    if normalized in TRUE_LITERALS:
        return True
    if normalized in FALSE_LITERALS:
        return False
    raise InvalidOverrideValueError(env_name, value, list(TRUE_LITERALS + FALSE_LITERALS))


def parse_mode_override(env_name: str, value: str) -> ExecutionMode:
    """Parse an execution mode override literal.

    Raises:
        InvalidOverrideValueError: If the value is not a known execution mode.
    """
    normalized = value.strip().lower()
    for mode in ExecutionMode:
        if mode.value == normalized:
            return mode
    raise InvalidOverrideValueError(env_name, value, [mode.value for mode in ExecutionMode])


async def reconcile_execution_overrides(
    whatif: str | None,
    mode: str | None,
    verbose: str | None,
) -> ExecutionOverrides:
    """Reconciles the raw override environment values into typed overrides.

    Unset or blank values mean "no override". Invalid values are logged and
    ignored so that a typo never blocks dispatching.

    Args:
        whatif (str | None): Raw value of EASYPIM_WHATIF.
        mode (str | None): Raw value of EASYPIM_MODE.
        verbose (str | None): Raw value of EASYPIM_VERBOSE.

    Returns:
        ExecutionOverrides: The valid overrides.
    """
    preview_only_override: bool | None = None
    mode_override: ExecutionMode | None = None
    verbose_override: bool | None = None

    try:
        if whatif is not None and whatif.strip():
            preview_only_override = parse_boolean_override("EASYPIM_WHATIF", whatif)
    except InvalidOverrideValueError as exc:
        logger.warning("Ignoring invalid execution override", env_name=exc.env_name, value=exc.value, accepted=exc.accepted)

    try:
        if mode is not None and mode.strip():
            mode_override = parse_mode_override("EASYPIM_MODE", mode)
    except InvalidOverrideValueError as exc:
        logger.warning("Ignoring invalid execution override", env_name=exc.env_name, value=exc.value, accepted=exc.accepted)

    try:
        if verbose is not None and verbose.strip():
            verbose_override = parse_boolean_override("EASYPIM_VERBOSE", verbose)
    except InvalidOverrideValueError as exc:
        logger.warning("Ignoring invalid execution override", env_name=exc.env_name, value=exc.value, accepted=exc.accepted)

    return ExecutionOverrides(preview_only=preview_only_override, mode=mode_override, verbose=verbose_override)


async def reconcile_dispatcher_configuration(settings: Settings | None = None) -> DispatcherConfig:
    """Builds the read-only configuration snapshot for one invocation.

    Args:
        settings (Settings | None): Settings to reconcile. Read from the
            environment when not provided.

    Returns:
        DispatcherConfig: The reconciled configuration.
    """
    if settings is None:
        settings = Settings()

    overrides = await reconcile_execution_overrides(
        whatif=settings.EASYPIM_WHATIF,
        mode=settings.EASYPIM_MODE,
        verbose=settings.EASYPIM_VERBOSE,
    )

    return DispatcherConfig(
        debug=settings.DEBUG,
        timeout_seconds=settings.DISPATCH_TIMEOUT_SECONDS,
        github=GitHubActionsCredentials(
            token=settings.GITHUB_TOKEN or None,
            repository=settings.GITHUB_REPOSITORY or None,
            workflow_id=settings.GITHUB_WORKFLOW_ID,
            ref=settings.GITHUB_REF,
            api_url=settings.GITHUB_API_URL.rstrip("/"),
            server_url=settings.GITHUB_SERVER_URL.rstrip("/"),
        ),
        azure_devops=AzureDevOpsCredentials(
            organization=settings.ADO_ORGANIZATION or None,
            project=settings.ADO_PROJECT or None,
            pipeline_id=settings.ADO_PIPELINE_ID or None,
            pat=settings.ADO_PAT or None,
            api_url=settings.ADO_API_URL.rstrip("/"),
            source_branch=settings.ADO_SOURCE_BRANCH,
        ),
        overrides=overrides,
    )


async def validate_github_actions_credentials(credentials: GitHubActionsCredentials) -> list[RequiredConfigurationElementError]:
    """Returns the configuration elements missing for a GitHub Actions dispatch."""
    missing_settings: list[RequiredConfigurationElementError] = []
    if not credentials.token:
        missing_settings.append(RequiredConfigurationElementError("GitHub token", "GITHUB_TOKEN"))
    return missing_settings


async def validate_azure_devops_credentials(credentials: AzureDevOpsCredentials) -> list[RequiredConfigurationElementError]:
    """Returns the configuration elements missing for an Azure DevOps pipeline run."""
    missing_settings: list[RequiredConfigurationElementError] = []
    if not credentials.organization:
        missing_settings.append(RequiredConfigurationElementError("Azure DevOps organization", "ADO_ORGANIZATION"))
    if not credentials.project:
        missing_settings.append(RequiredConfigurationElementError("Azure DevOps project", "ADO_PROJECT"))
    if not credentials.pipeline_id:
        missing_settings.append(RequiredConfigurationElementError("Azure DevOps pipeline ID", "ADO_PIPELINE_ID"))
    if not credentials.pat:
        missing_settings.append(RequiredConfigurationElementError("Azure DevOps personal access token", "ADO_PAT"))
    return missing_settings
