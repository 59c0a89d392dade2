"""Enforcement decision: block or pass a request given its violations."""

import logging

from .models import (
    AggregatedViolations,
    DEFAULT_POLICY,
    EnforcementPolicy,
    EnforcementResult,
    ViolationSeverity,
)


logger = logging.getLogger(__name__)


def decide(
    aggregated: AggregatedViolations,
    policy: EnforcementPolicy = DEFAULT_POLICY
) -> EnforcementResult:
    """Compute the enforcement result for aggregated violations.

    ``blocked = (errors and block_on_errors) or (warnings and block_on_warnings)``.
    Errors take precedence when reporting what caused the block.

    Args:
        aggregated: Violations partitioned by severity
        policy: Blocking policy for the route

    Returns:
        EnforcementResult for this request
    """
    blocked_by = None
    if aggregated.errors and policy.block_on_errors:
        blocked_by = ViolationSeverity.ERROR
    elif aggregated.warnings and policy.block_on_warnings:
        blocked_by = ViolationSeverity.WARNING

    result = EnforcementResult(
        errors=aggregated.errors,
        warnings=aggregated.warnings,
        blocked=blocked_by is not None,
        blocked_by=blocked_by,
    )

    logger.debug(
        f"Enforcement decision: blocked={result.blocked}, "
        f"errors={len(result.errors)}, warnings={len(result.warnings)}"
    )

    return result
