"""JWT token generation and validation for actor context.

Tokens are issued by the upstream identity service; this module only needs
to decode them so the request governor knows who is acting. ``create_access_token``
exists for tooling and tests.

Claims:
- sub: User ID
- org_id: Organization (tenant) ID
- role: User's role within the organization
- email: User's email address
- iat / exp: Issued-at and expiration timestamps

Algorithm is HS256 by default, keyed by JWT_SECRET.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from config import get_settings


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from settings.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = get_settings().JWT_SECRET
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def create_access_token(
    user_id: str,
    org_id: Optional[str],
    role: Optional[str],
    email: Optional[str],
    expires_in: timedelta = timedelta(minutes=60)
) -> str:
    """Create a signed JWT carrying actor claims.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user_id),
        'org_id': str(org_id) if org_id is not None else None,
        'role': role,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int((now + expires_in).timestamp())
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=get_settings().JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
        ValueError: If JWT_SECRET is not set
    """
    secret = _get_jwt_secret()

    try:
        return jwt.decode(token, secret, algorithms=[get_settings().JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")
