"""
phoenix/auth_context.py

Token guard for protected routes.

Contains:
- AuthContext: identity resolved from a verified token
- verify_token: JWT signature/expiry check
- require_auth_context: FastAPI dependency applied per router

The token travels in the x-auth-token header. Its payload carries only the
user id, so every authenticated user can reach every protected route.
"""

from __future__ import annotations

from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from phoenix.config import ALGORITHM, Settings
from phoenix.db import AppContext, get_context
from phoenix.errors import Unauthorized
from phoenix.logging_config import get_logger

_logger = get_logger(__name__)

TOKEN_HEADER = "x-auth-token"

# auto_error=False so a missing header renders our own 401 body
token_header = APIKeyHeader(name=TOKEN_HEADER, auto_error=False)


class AuthContext(BaseModel):
    """Identity derived from a verified token. The only trusted source of user_id."""
    user_id: str

    model_config = {"frozen": True}


def verify_token(token: str, settings: Settings) -> dict:
    """
    Verify a token and return its decoded payload.

    Raises:
        Unauthorized: bad signature, malformed token or expired
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        _logger.info("auth.token_expired")
        raise Unauthorized("Token is not valid")
    except jwt.InvalidTokenError:
        _logger.info("auth.token_invalid")
        raise Unauthorized("Token is not valid")


def require_auth_context(
    token: Optional[str] = Depends(token_header),
    ctx: AppContext = Depends(get_context),
) -> AuthContext:
    """
    Gate for protected routes.

    Usage:
        router = APIRouter(dependencies=[Depends(require_auth_context)])

        @router.get("/thing")
        def thing(auth: AuthContext = Depends(require_auth_context)):
            ...

    Raises:
        Unauthorized: header missing, token invalid/expired, or no user id in payload
    """
    if not token:
        raise Unauthorized("No token, authorization denied")

    payload = verify_token(token, ctx.settings)

    user = payload.get("user")
    user_id = user.get("id") if isinstance(user, dict) else None
    if not isinstance(user_id, str) or not user_id:
        _logger.info("auth.token_missing_user")
        raise Unauthorized("Token is not valid")

    return AuthContext(user_id=user_id)
