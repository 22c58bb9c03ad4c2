from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.auth import get_current_user, get_token_claims
from src.api.database import get_db
from src.api.mailer import Mailer, get_mailer
from src.api.models import User
from src.api.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
)
from src.api.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


# PUBLIC_INTERFACE
@router.post("/signup", response_model=MessageResponse, summary="Register a new user")
def signup(payload: SignupRequest, db: Session = Depends(get_db), mailer: Mailer = Depends(get_mailer)):
    """
    Register a new, unverified user and send a verification email.

    Raises:
        400 Conflict if the email is already registered.
    """
    return MessageResponse(message=auth_service.signup(db, mailer, payload.email, payload.password))


# PUBLIC_INTERFACE
@router.get("/verify-email", response_model=MessageResponse, summary="Verify an email address")
def verify_email(token: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """
    Consume the verification token from the emailed link.

    Raises:
        400 InvalidToken if no user holds the token.
    """
    return MessageResponse(message=auth_service.verify_email(db, token))


# PUBLIC_INTERFACE
@router.post("/forgot-password", response_model=MessageResponse, summary="Email a password reset link")
def forgot_password(
    payload: ForgotPasswordRequest, db: Session = Depends(get_db), mailer: Mailer = Depends(get_mailer)
):
    """
    Issue a new reset token and email it.

    Raises:
        400 NotFound for an unknown email, unless CONCEAL_UNKNOWN_EMAILS is set.
    """
    return MessageResponse(message=auth_service.forgot_password(db, mailer, payload.email))


# PUBLIC_INTERFACE
@router.post("/reset-password", response_model=MessageResponse, summary="Reset a password")
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    """
    Consume a reset token and store the new password.

    Raises:
        400 InvalidToken if the token is unknown or expired.
    """
    return MessageResponse(message=auth_service.reset_password(db, payload.token, payload.password))


# PUBLIC_INTERFACE
@router.post("/login", response_model=LoginResponse, summary="Login and obtain a session token")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange email and password for a signed session token.

    Returns:
        LoginResponse with the token and the user's public fields.

    Raises:
        400 NotFound for an unknown email, 400 InvalidCredentials for a wrong password,
        403 EmailNotVerified when verification is required and missing.
    """
    token, user = auth_service.login(db, payload.email, payload.password)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


# PUBLIC_INTERFACE
@router.post("/logout", response_model=MessageResponse, summary="Revoke the current session token")
def logout(claims: dict = Depends(get_token_claims), db: Session = Depends(get_db)):
    return MessageResponse(message=auth_service.logout(db, claims))


# PUBLIC_INTERFACE
@router.get("/me", response_model=UserResponse, summary="Current user")
def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
