"""Request-scoped context for log correlation.

Holds the request ID and the governance route being evaluated in context
variables, so log records emitted anywhere during a request (including the
rule evaluators) carry them without explicit plumbing.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
governed_route_var: ContextVar[Optional[str]] = ContextVar("governed_route", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID v4)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID, or "no-request-id" outside a request."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_governed_route() -> Optional[str]:
    """Get the governed route key (``POST /api/v1/orders``) for the current request."""
    return governed_route_var.get()


def set_governed_route(route_key: Optional[str]) -> None:
    governed_route_var.set(route_key)
