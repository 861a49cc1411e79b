"""Unit tests for the dispatcher."""

import json
from dataclasses import replace
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from easypim_dispatcher.configuration.env import Settings
from easypim_dispatcher.configuration.models import DispatcherConfig, ExecutionMode, ExecutionOverrides, Platform
from easypim_dispatcher.configuration.reconcile import reconcile_dispatcher_configuration
from easypim_dispatcher.dispatch.dispatcher import dispatch_notification
from easypim_dispatcher.dispatch.results import DispatchState
from easypim_dispatcher.triggers.results import TriggerOutcome


def secret_event_body(secret_name: str, vault_name: str = "kv-prod", event_id: str = "evt-1") -> str:
    """Build a JSON body holding one secret change event."""
    return json.dumps(
        [
            {
                "id": event_id,
                "eventType": "Microsoft.KeyVault.SecretNewVersionCreated",
                "subject": secret_name,
                "data": {"VaultName": vault_name, "ObjectName": secret_name, "ObjectType": "Secret"},
            }
        ]
    )


class SelectorSpy:
    """Trigger selector returning a mocked trigger and recording the platform asked for."""

    def __init__(self, outcome: TriggerOutcome | None = None) -> None:
        """Initialize the spy with the outcome its trigger returns."""
        self.platforms: list[Platform] = []
        self.trigger = MagicMock()
        self.trigger.trigger = AsyncMock(side_effect=lambda secret_name, vault_name, params: outcome or TriggerOutcome.succeeded(self.platforms[-1]))

    def __call__(self, platform: Platform, config: DispatcherConfig) -> Any:
        """Select the mocked trigger."""
        self.platforms.append(platform)
        return self.trigger


@pytest.mark.asyncio
async def test_handshake_short_circuits(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test that the handshake is answered without routing or triggering."""
    selector = SelectorSpy()
    body = json.dumps(
        [{"id": "v-1", "eventType": "Microsoft.EventGrid.SubscriptionValidationEvent", "data": {"validationCode": "ABC-123"}}]
    )

    result = await dispatch_notification(body, make_config(), trigger_selector=selector)

    assert result.state is DispatchState.HANDSHAKE_RESPONDED
    assert result.status_code == 200
    assert result.body == {"validationResponse": "ABC-123"}
    assert selector.platforms == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["not json at all", "", "{}", '{"eventType": "Microsoft.KeyVault.SecretNearExpiry", "data": {}}'])
async def test_unrecognized_bodies_are_no_op(make_config: Callable[..., DispatcherConfig], body: str) -> None:
    """Test that malformed or unsupported notifications trigger nothing and are not errors."""
    selector = SelectorSpy()

    result = await dispatch_notification(body, make_config(), trigger_selector=selector)

    assert result.state is DispatchState.NO_OP
    assert result.status_code == 200
    assert result.body["status"] == "ignored"
    assert selector.platforms == []


@pytest.mark.asyncio
async def test_test_ado_secret_routes_to_azure_devops(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test the routing and parameters for a test secret naming Azure DevOps."""
    outcome = TriggerOutcome.succeeded(Platform.AZURE_DEVOPS, run_reference="1234", run_url="https://dev.azure.com/run/1234")
    selector = SelectorSpy(outcome)

    result = await dispatch_notification(secret_event_body("easypim-test-ado"), make_config(), trigger_selector=selector)

    assert result.state is DispatchState.TRIGGERED
    assert result.status_code == 200
    assert selector.platforms == [Platform.AZURE_DEVOPS]
    assert result.parameters is not None
    assert result.parameters.preview_only is True
    assert result.parameters.mode is ExecutionMode.DELTA
    assert result.body == {
        "status": "triggered",
        "secretName": "easypim-test-ado",
        "vaultName": "kv-prod",
        "parameters": {
            "whatIf": True,
            "mode": "delta",
            "verbose": False,
            "description": "Triggered by secret change: easypim-test-ado in kv-prod [preview only]",
        },
        "success": True,
        "platform": "AzureDevOps",
        "runReference": "1234",
        "runUrl": "https://dev.azure.com/run/1234",
        "eventId": "evt-1",
    }
    selector.trigger.trigger.assert_awaited_once_with("easypim-test-ado", "kv-prod", result.parameters)


@pytest.mark.asyncio
async def test_initial_setup_secret_routes_to_github_actions(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test the routing and parameters for an initial setup secret."""
    selector = SelectorSpy()

    result = await dispatch_notification(secret_event_body("easypim-initial-setup"), make_config(), trigger_selector=selector)

    assert selector.platforms == [Platform.GITHUB_ACTIONS]
    assert result.decision is not None
    assert result.decision.platform is Platform.GITHUB_ACTIONS
    assert result.parameters is not None
    assert result.parameters.preview_only is False
    assert result.parameters.mode is ExecutionMode.INITIAL


@pytest.mark.asyncio
async def test_overrides_from_configuration_are_applied(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test that configuration overrides reach the triggered parameters."""
    selector = SelectorSpy()
    config = make_config(overrides=ExecutionOverrides(preview_only=True, mode=ExecutionMode.INITIAL))

    result = await dispatch_notification(secret_event_body("easypim-config"), config, trigger_selector=selector)

    assert result.parameters is not None
    assert result.parameters.preview_only is True
    assert result.parameters.mode is ExecutionMode.INITIAL


@pytest.mark.asyncio
async def test_trigger_failure_returns_server_error(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test that a failed trigger is answered with HTTP 500 so delivery is retried."""
    selector = SelectorSpy(TriggerOutcome.failed(Platform.GITHUB_ACTIONS, "GitHub API returned HTTP 404: Not Found", status_code=404))

    result = await dispatch_notification(secret_event_body("easypim-config"), make_config(), trigger_selector=selector)

    assert result.state is DispatchState.TRIGGER_FAILED
    assert result.status_code == 500
    assert result.body["status"] == "failed"
    assert result.body["error"] == "GitHub API returned HTTP 404: Not Found"


@pytest.mark.asyncio
async def test_missing_ado_pat_fails_without_network_call(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test the default trigger selection when the Azure DevOps PAT is missing."""
    config = make_config()
    config = replace(config, azure_devops=replace(config.azure_devops, pat=None))

    result = await dispatch_notification(secret_event_body("easypim-ado"), config)

    assert result.status_code == 500
    assert result.outcome is not None
    assert result.outcome.success is False
    assert result.outcome.platform is Platform.AZURE_DEVOPS
    assert "ADO_PAT" in (result.outcome.error or "")


@pytest.mark.asyncio
async def test_missing_names_still_dispatch_with_placeholders(make_config: Callable[..., DispatcherConfig]) -> None:
    """Test that a secret event without names is dispatched with visible placeholders."""
    selector = SelectorSpy()
    body = {"id": "evt-2", "eventType": "Microsoft.KeyVault.SecretNewVersionCreated", "data": {}}

    result = await dispatch_notification(body, make_config(), trigger_selector=selector)

    assert result.body["secretName"] == "Unknown"
    assert result.body["vaultName"] == "Unknown"
    selector.trigger.trigger.assert_awaited_once()


@pytest.mark.asyncio
async def test_token_only_configuration_dispatches_github_workflow() -> None:
    """Test that a deployment configuring only GITHUB_TOKEN dispatches to the default repository."""
    config = await reconcile_dispatcher_configuration(Settings(_env_file=None, GITHUB_TOKEN="ghp_token"))
    client = MagicMock()
    client.rest.actions.async_create_workflow_dispatch = AsyncMock(return_value=MagicMock(status_code=204, content=b""))

    with patch("easypim_dispatcher.triggers.github_actions.get_github_token_client", return_value=client):
        result = await dispatch_notification(secret_event_body("easypim-config"), config)

    assert result.state is DispatchState.TRIGGERED
    assert result.status_code == 200
    assert result.body["platform"] == "GitHubActions"
    call = client.rest.actions.async_create_workflow_dispatch.await_args
    assert call.kwargs["owner"] == "kayasax"
    assert call.kwargs["repo"] == "EasyPIM-EventDriven-Governance"
