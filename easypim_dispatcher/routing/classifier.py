"""Decides which automation platform handles a secret change."""

import structlog

from easypim_dispatcher.configuration.models import Platform
from easypim_dispatcher.routing.models import RoutingDecision
from easypim_dispatcher.routing.rules import PatternRule, compile_tokens, first_match

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DEFAULT_PLATFORM = Platform.GITHUB_ACTIONS

# Evaluated in order, first match wins.
PLATFORM_RULES: tuple[PatternRule[Platform], ...] = (
    PatternRule(
        name="azure-devops-token",
        pattern=compile_tokens("ado", "azdo", "devops"),
        effect=Platform.AZURE_DEVOPS,
    ),
)


def classify_platform(secret_name: str, rules: tuple[PatternRule[Platform], ...] = PLATFORM_RULES) -> RoutingDecision:
    """Classify a secret name into a routing decision.

    Every name yields a decision: names matching no rule go to GitHub Actions.
    """
    rule = first_match(rules, secret_name)
    if rule is None:
        decision = RoutingDecision(platform=DEFAULT_PLATFORM)
    else:
        decision = RoutingDecision(platform=rule.effect, matched_rule=rule.name)
    logger.debug("Classified secret name", secret_name=secret_name, platform=decision.platform.value, matched_rule=decision.matched_rule)
    return decision
