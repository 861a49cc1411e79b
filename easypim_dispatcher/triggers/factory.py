"""Selects the trigger client for a routing decision."""

from typing import Callable

from easypim_dispatcher.configuration.models import DispatcherConfig, Platform
from easypim_dispatcher.triggers.abc import PlatformTrigger
from easypim_dispatcher.triggers.azure_devops import AzureDevOpsTrigger
from easypim_dispatcher.triggers.github_actions import GitHubActionsTrigger

TriggerBuilder = Callable[[DispatcherConfig], PlatformTrigger]

TRIGGER_BUILDERS: dict[Platform, TriggerBuilder] = {
    Platform.GITHUB_ACTIONS: lambda config: GitHubActionsTrigger(config.github, timeout_seconds=config.timeout_seconds),
    Platform.AZURE_DEVOPS: lambda config: AzureDevOpsTrigger(config.azure_devops, timeout_seconds=config.timeout_seconds),
}


def get_platform_trigger(platform: Platform, config: DispatcherConfig) -> PlatformTrigger:
    """Build the trigger client for the platform from the configuration snapshot."""
    try:
        builder = TRIGGER_BUILDERS[platform]
    except KeyError as exc:
        raise ValueError(f"No trigger client registered for platform {platform!r}") from exc
    return builder(config)
