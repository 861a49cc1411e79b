"""Utility modules for shared functionality."""

from .github import build_workflow_runs_url, split_repository_in_configuration
from .logging import configure_logging, mask_credentials

__all__ = [
    "build_workflow_runs_url",
    "split_repository_in_configuration",
    "configure_logging",
    "mask_credentials",
]
