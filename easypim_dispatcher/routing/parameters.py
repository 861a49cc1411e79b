"""Derives execution parameters from a secret name and operator overrides.

Precedence, lowest to highest:

1. Defaults (delta mode, no preview, not verbose).
2. Pattern rules on the secret name, applied in declaration order.
3. Valid environment overrides (EASYPIM_WHATIF, EASYPIM_MODE, EASYPIM_VERBOSE).

The description is synthesized last from the final values.
"""

from dataclasses import replace
from types import MappingProxyType
from typing import Any, Mapping

import structlog

from easypim_dispatcher.configuration.models import ExecutionMode, ExecutionOverrides
from easypim_dispatcher.routing.models import ExecutionParameters
from easypim_dispatcher.routing.rules import PatternRule, all_matches, compile_tokens

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

PARAMETER_RULES: tuple[PatternRule[Mapping[str, Any]], ...] = (
    PatternRule(name="preview-only", pattern=compile_tokens("test", "debug"), effect=MappingProxyType({"preview_only": True})),
    PatternRule(
        name="initial-mode",
        pattern=compile_tokens("initial", "setup", "bootstrap"),
        effect=MappingProxyType({"mode": ExecutionMode.INITIAL}),
    ),
    PatternRule(name="verbose", pattern=compile_tokens("verbose", "debug"), effect=MappingProxyType({"verbose": True})),
)


def apply_pattern_rules(
    parameters: ExecutionParameters,
    secret_name: str,
    rules: tuple[PatternRule[Mapping[str, Any]], ...] = PARAMETER_RULES,
) -> ExecutionParameters:
    """Apply every matching rule's field updates to the parameters."""
    for rule in all_matches(rules, secret_name):
        parameters = replace(parameters, **rule.effect)
    return parameters


def apply_overrides(parameters: ExecutionParameters, overrides: ExecutionOverrides) -> ExecutionParameters:
    """Replace each field for which a valid override is present."""
    if overrides.preview_only is not None:
        parameters = replace(parameters, preview_only=overrides.preview_only)
    if overrides.mode is not None:
        parameters = replace(parameters, mode=overrides.mode)
    if overrides.verbose is not None:
        parameters = replace(parameters, verbose=overrides.verbose)
    return parameters


def build_description(secret_name: str, vault_name: str, parameters: ExecutionParameters) -> str:
    """Build the informational run description."""
    description = f"Triggered by secret change: {secret_name} in {vault_name}"
    if parameters.mode is ExecutionMode.INITIAL:
        description += " [mode: initial]"
    if parameters.preview_only:
        description += " [preview only]"
    return description


def derive_execution_parameters(
    secret_name: str,
    vault_name: str,
    overrides: ExecutionOverrides | None = None,
) -> ExecutionParameters:
    """Derive the execution parameters for a secret change."""
    parameters = apply_pattern_rules(ExecutionParameters(), secret_name)
    if overrides is not None:
        overridden = apply_overrides(parameters, overrides)
        if overridden != parameters:
            logger.info(
                "Execution overrides applied",
                secret_name=secret_name,
                derived=parameters.as_log_fields(),
                effective=overridden.as_log_fields(),
            )
        parameters = overridden
    return replace(parameters, description=build_description(secret_name, vault_name, parameters))
