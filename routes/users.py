from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from database import get_session
from schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    SignUpRequest,
    SignUpResponse,
    ValidationErrorResponse,
)
from services import users as user_service

router = APIRouter()


@router.post(
    "/sign-up",
    status_code=status.HTTP_201_CREATED,
    response_model=SignUpResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def sign_up(
    data: SignUpRequest,
    session: Session = Depends(get_session)
) -> SignUpResponse:
    """
    Register a new user

    Args:
        data: Sign-up fields
        session: Database session

    Returns:
        Confirmation message and a bearer token for the new user
    """
    token = user_service.sign_up(session, data)
    return SignUpResponse(message="User created successfully.", token=token)


@router.post(
    "/login",
    status_code=status.HTTP_201_CREATED,
    response_model=LoginResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": ErrorResponse},
    },
)
def login(
    data: LoginRequest,
    session: Session = Depends(get_session)
) -> LoginResponse:
    """
    Exchange an email or username and a password for a bearer token
    """
    token = user_service.login(session, data)
    return LoginResponse(msg="User authentication is successful.", token=token)
