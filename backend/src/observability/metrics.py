"""Prometheus metrics for business rule enforcement.

Updated by the request governor only; the rule evaluators never read them.
"""

from prometheus_client import Counter, Histogram

governance_evaluations_total = Counter(
    "governance_evaluations_total",
    "Business rule evaluations by outcome",
    ["entity_kind", "outcome"]  # outcome: passed|blocked|failed
)

governance_violations_total = Counter(
    "governance_violations_total",
    "Business rule violations found",
    ["entity_kind", "code", "severity"]
)

governance_evaluation_duration_seconds = Histogram(
    "governance_evaluation_duration_seconds",
    "Time spent evaluating business rules for one request",
    ["entity_kind"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)
