"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio

from easypim_dispatcher.configuration import reconcile
from easypim_dispatcher.configuration.env import Settings
from easypim_dispatcher.configuration.models import DispatcherConfig


def get_dispatcher_config(settings: Settings | None = None) -> DispatcherConfig:
    """Synchronously get the reconciled dispatcher configuration."""
    return asyncio.run(reconcile.reconcile_dispatcher_configuration(settings=settings))
