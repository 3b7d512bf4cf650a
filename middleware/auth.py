from fastapi import Depends, Request
from sqlmodel import Session

from database import get_session
from errors import ForbiddenError, UnauthorizedError
from models import User
from services.users import get_user
from utils.jwt import get_user_id_from_token


def get_current_user(
    request: Request,
    session: Session = Depends(get_session),
) -> User:
    """
    Dependency resolving the user behind the bearer token in the
    Authorization header

    Args:
        request: FastAPI request object
        session: Database session

    Returns:
        The authenticated user, also stored on request.state.current_user

    Raises:
        UnauthorizedError: If the token is missing or its user no longer exists
        ForbiddenError: If the token is invalid or expired
    """
    auth_header = request.headers.get("Authorization")

    parts = auth_header.split() if auth_header else []
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Access token missing.")

    user_id = get_user_id_from_token(parts[1])
    if user_id is None:
        raise ForbiddenError("Invalid or expired token.")

    user = get_user(session, user_id)
    if not user:
        raise UnauthorizedError("Invalid user token.")

    # Attach user info to request state
    request.state.current_user = user
    return user
