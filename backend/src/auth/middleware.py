"""Middleware that attaches the acting user to the request.

The request governor runs after this middleware and reads
``request.state.actor``. Authentication itself is enforced elsewhere; a
missing or invalid token simply leaves the actor unset.
"""

import logging
from typing import Callable, Optional

import jwt
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from auth.jwt import decode_token
from domain.governance.models import Actor


logger = logging.getLogger(__name__)


def actor_from_claims(claims: dict) -> Optional[Actor]:
    """Build an Actor from decoded token claims, or None without a subject."""
    user_id = claims.get("sub")
    if not user_id:
        return None
    return Actor(
        user_id=str(user_id),
        org_id=claims.get("org_id"),
        role=claims.get("role"),
        email=claims.get("email"),
    )


class ActorContextMiddleware(BaseHTTPMiddleware):
    """Extract the Bearer token and attach an Actor to ``request.state.actor``.

    Usage:
        app.add_middleware(ActorContextMiddleware)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.actor = None

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return await call_next(request)

        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return await call_next(request)

        try:
            request.state.actor = actor_from_claims(decode_token(parts[1]))
        except (jwt.InvalidTokenError, ValueError) as e:
            logger.debug(f"Ignoring unusable bearer token: {e}")

        return await call_next(request)


def get_actor(request: Request) -> Optional[Actor]:
    """Return the Actor set by ActorContextMiddleware, or None."""
    return getattr(request.state, "actor", None)
