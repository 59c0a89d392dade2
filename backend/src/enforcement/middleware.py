"""Request governor: business rule enforcement as ASGI middleware.

For a request matching a governed route the governor:
1. Reads the JSON body (must be an object)
2. Opens a data port scope and runs the route's evaluator
3. Aggregates violations and applies the route's blocking policy
4. Returns 409 when blocked, or passes the request on with violations on
   ``request.state`` and warnings in a response header

Any failure of the governor itself fails closed with a 500. Each request is
evaluated at most once; nothing is retried.
"""

import json
import logging
import time
from contextlib import AbstractAsyncContextManager
from typing import Callable, Iterable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from auth.middleware import get_actor
from config import get_settings
from domain.governance.aggregator import aggregate
from domain.governance.models import EnforcementResult, EvaluationContext, Violation
from domain.governance.policy import decide
from domain.governance.port import GovernanceDataPort
from observability.metrics import (
    governance_evaluation_duration_seconds,
    governance_evaluations_total,
    governance_violations_total,
)
from observability.request_id import set_governed_route

from .responses import blocked_response, validation_failure_response
from .routes import GovernedRoute


logger = logging.getLogger(__name__)


PortFactory = Callable[[], AbstractAsyncContextManager[GovernanceDataPort]]


class PayloadError(ValueError):
    """Raised when a governed request body is not a JSON object."""
    pass


async def read_payload(request: Request) -> dict:
    """Parse the request body as a JSON object; an empty body is ``{}``."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise PayloadError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise PayloadError(f"Request body must be a JSON object, got {type(payload).__name__}")
    return payload


class RequestGovernorMiddleware(BaseHTTPMiddleware):
    """Evaluate business rules for governed routes before the handler runs.

    Usage:
        app.add_middleware(
            RequestGovernorMiddleware,
            routes=default_routes(),
            port_factory=sqlalchemy_port_scope(SessionLocal),
        )
    """

    def __init__(
        self,
        app: ASGIApp,
        routes: Iterable[GovernedRoute],
        port_factory: PortFactory,
        header_name: Optional[str] = None
    ):
        super().__init__(app)
        self.routes = tuple(routes)
        self.port_factory = port_factory
        self.header_name = header_name or get_settings().GOVERNANCE_WARNINGS_HEADER

    def match(self, request: Request) -> Optional[tuple[GovernedRoute, dict]]:
        for route in self.routes:
            params = route.match(request.method, request.url.path)
            if params is not None:
                return route, params
        return None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        matched = self.match(request)
        if matched is None:
            return await call_next(request)

        route, path_params = matched
        kind = route.kind.value
        set_governed_route(route.key)

        start = time.perf_counter()
        try:
            violations, result = await self.evaluate(request, route, path_params)
        except Exception as e:
            logger.error(
                f"Business rule validation failed for {route.key}: {e}",
                extra={"entity_kind": kind},
                exc_info=True
            )
            governance_evaluations_total.labels(entity_kind=kind, outcome="failed").inc()
            return validation_failure_response()
        finally:
            governance_evaluation_duration_seconds.labels(entity_kind=kind).observe(
                time.perf_counter() - start
            )

        self.record(route, result)

        if result.blocked:
            return blocked_response(result)

        request.state.business_rule_violations = violations
        request.state.enforcement_result = result

        response = await call_next(request)
        if result.warnings:
            response.headers[self.header_name] = json.dumps(
                [v.to_dict() for v in result.warnings]
            )
        return response

    async def evaluate(
        self,
        request: Request,
        route: GovernedRoute,
        path_params: dict
    ) -> tuple[list[Violation], EnforcementResult]:
        payload = await read_payload(request)
        entity_id = path_params.get(route.entity_id_param) if route.entity_id_param else None

        async with self.port_factory() as port:
            context = EvaluationContext(
                payload=payload,
                data=port,
                actor=get_actor(request),
                entity_id=str(entity_id) if entity_id is not None else None,
            )
            violations = await route.evaluator.evaluate(context)

        return violations, decide(aggregate(violations), route.policy)

    def record(self, route: GovernedRoute, result: EnforcementResult) -> None:
        """Log the decision and update metrics."""
        kind = route.kind.value
        outcome = "blocked" if result.blocked else "passed"
        governance_evaluations_total.labels(entity_kind=kind, outcome=outcome).inc()
        for violation in result.violations:
            governance_violations_total.labels(
                entity_kind=kind,
                code=violation.code,
                severity=violation.severity.value,
            ).inc()

        extra = {
            "entity_kind": kind,
            "violation_codes": [v.code for v in result.violations],
            "blocked": result.blocked,
        }
        if result.blocked:
            logger.warning(
                f"Blocked {route.key}: {len(result.errors)} errors, {len(result.warnings)} warnings",
                extra=extra
            )
        else:
            logger.info(
                f"Passed {route.key} with {len(result.warnings)} warnings",
                extra=extra
            )
