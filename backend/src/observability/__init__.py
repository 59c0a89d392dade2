"""Observability module: structured logging, metrics and health checks."""

from .logging_config import configure_logging, get_logger
from .metrics import (
    governance_evaluation_duration_seconds,
    governance_evaluations_total,
    governance_violations_total,
)
from .request_id import (
    generate_request_id,
    get_governed_route,
    get_request_id,
    request_id_var,
    set_governed_route,
    set_request_id,
)
from .health import ComponentHealth, HealthStatus
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "governance_evaluations_total",
    "governance_violations_total",
    "governance_evaluation_duration_seconds",
    # Request context
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "get_governed_route",
    "set_governed_route",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
