"""Unit tests for the configuration driver module."""

from unittest.mock import AsyncMock, patch

from easypim_dispatcher.configuration import driver
from easypim_dispatcher.configuration.env import Settings
from easypim_dispatcher.configuration.models import ExecutionMode


def test_get_dispatcher_config_reconciles_settings() -> None:
    """Test that the driver reconciles the given settings synchronously."""
    config = driver.get_dispatcher_config(Settings(_env_file=None, GITHUB_TOKEN="token", EASYPIM_MODE="Initial"))

    assert config.github.token == "token"
    assert config.overrides.mode is ExecutionMode.INITIAL


def test_get_dispatcher_config_delegates_to_reconcile() -> None:
    """Test that the driver awaits the reconcile coroutine."""
    sentinel = object()
    with patch(
        "easypim_dispatcher.configuration.reconcile.reconcile_dispatcher_configuration",
        new=AsyncMock(return_value=sentinel),
    ) as mock_reconcile:
        result = driver.get_dispatcher_config()

    mock_reconcile.assert_awaited_once_with(settings=None)
    assert result is sentinel
