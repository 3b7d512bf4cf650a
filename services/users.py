import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from errors import ConflictError, UnauthorizedError
from models import User
from schemas import LoginRequest, SignUpRequest
from utils.jwt import create_jwt
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


def prepare_user(data: SignUpRequest) -> User:
    """Normalize identifiers and hash the password before the row is persisted"""
    return User(
        display_name=data.display_name,
        email=data.email.lower(),
        username=data.username.lower(),
        password=hash_password(data.password),
    )


def get_user(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)


def find_by_identifier(session: Session, identifier: str) -> Optional[User]:
    """Look a user up by email or username, ignoring case"""
    identifier = identifier.strip().lower()
    query = select(User).where(
        or_(User.email == identifier, User.username == identifier)
    )
    return session.exec(query).first()


def sign_up(session: Session, data: SignUpRequest) -> str:
    """
    Create a user and sign a token for it

    Raises:
        ConflictError: If the email or username is already taken
    """
    user = prepare_user(data)

    existing = session.exec(
        select(User).where(
            or_(User.email == user.email, User.username == user.username)
        )
    ).first()
    if existing:
        if existing.email == user.email:
            raise ConflictError("Email already used.")
        raise ConflictError("Username already used.")

    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race against a concurrent sign-up with the same identifiers
        session.rollback()
        raise ConflictError("Email or username already in use.")
    session.refresh(user)

    logger.info("User %s signed up", user.id)
    return create_jwt(user.id)


def login(session: Session, data: LoginRequest) -> str:
    """
    Check credentials and sign a token

    Unknown identifiers and wrong passwords fail the same way.

    Raises:
        UnauthorizedError: If the credentials do not match a user
    """
    user = find_by_identifier(session, data.identifier)

    if not user or not verify_password(data.password, user.password):
        logger.info("Failed login attempt")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    return create_jwt(user.id)
