"""Violation aggregation: partition by severity."""

from typing import Iterable

from .models import AggregatedViolations, Violation, ViolationSeverity


def aggregate(violations: Iterable[Violation]) -> AggregatedViolations:
    """Split violations into errors and warnings.

    No deduplication; input order is preserved within each partition.

    Args:
        violations: Violations from one evaluation

    Returns:
        AggregatedViolations with disjoint errors/warnings
    """
    errors: list[Violation] = []
    warnings: list[Violation] = []

    for violation in violations:
        if violation.severity is ViolationSeverity.ERROR:
            errors.append(violation)
        elif violation.severity is ViolationSeverity.WARNING:
            warnings.append(violation)
        else:
            raise ValueError(f"Unhandled violation severity: {violation.severity!r}")

    return AggregatedViolations(errors=tuple(errors), warnings=tuple(warnings))
