# phoenix/security.py
# Password hashing (bcrypt) and access token issuing (PyJWT)

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from phoenix.config import ALGORITHM, Settings


# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: str, settings: Settings) -> str:
    """
    Sign a token carrying only the user id.

    Payload: {"user": {"id": "<user id>"}, "iat": ..., "exp": iat + TOKEN_EXPIRES_HOURS}
    """
    issued_at = datetime.now(timezone.utc)
    payload = {
        "user": {"id": user_id},
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.token_expires_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)
