"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the dispatcher."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    DISPATCH_TIMEOUT_SECONDS: float = 30.0

    # GitHub Actions settings
    GITHUB_TOKEN: str | None = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_SERVER_URL: str = "https://github.com"
    GITHUB_REPOSITORY: str = "kayasax/EasyPIM-EventDriven-Governance"
    GITHUB_WORKFLOW_ID: str = "easypim-orchestrator.yml"
    GITHUB_REF: str = "main"

    # Azure DevOps settings
    ADO_ORGANIZATION: str | None = None
    ADO_PROJECT: str | None = None
    ADO_PIPELINE_ID: str | None = None
    ADO_PAT: str | None = None
    ADO_API_URL: str = "https://dev.azure.com"
    ADO_SOURCE_BRANCH: str = "refs/heads/main"

    # Execution overrides. Kept as raw strings so that invalid literals can be
    # ignored instead of failing settings validation.
    EASYPIM_WHATIF: str | None = None
    EASYPIM_MODE: str | None = None
    EASYPIM_VERBOSE: str | None = None
