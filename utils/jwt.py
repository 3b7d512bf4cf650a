import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import config

logger = logging.getLogger(__name__)


def create_jwt(user_id: int, expires_in: Optional[timedelta] = None) -> str:
    """
    Sign a bearer token for a user

    Args:
        user_id: ID of the authenticated user
        expires_in: Token lifetime, JWT_EXPIRES_MINUTES by default

    Returns:
        Encoded JWT string
    """
    if expires_in is None:
        expires_in = timedelta(minutes=config.JWT_EXPIRES_MINUTES)

    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, config.JWT_KEY, algorithm=config.JWT_ALGORITHM)


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify JWT token and return payload

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        # Signature and expiration are both checked by PyJWT
        return jwt.decode(
            token,
            config.JWT_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.warning("JWT verification failed: %s", exc)
        return None


def get_user_id_from_token(token: str) -> Optional[int]:
    """
    Extract user ID from JWT token

    Args:
        token: JWT token string

    Returns:
        User ID if valid token, None otherwise
    """
    payload = verify_jwt(token)
    if payload:
        user_id = payload.get("id")
        if isinstance(user_id, int):
            return user_id
    return None
