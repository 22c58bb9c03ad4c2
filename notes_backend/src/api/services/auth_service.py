"""
Account lifecycle: signup, email verification, login/logout and password reset.

Verification and reset tokens are single-use: they are stored as digests and
cleared once consumed. Raw tokens only leave the server inside emailed links.
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from src.api.auth import (
    create_access_token,
    get_password_hash,
    hash_token,
    new_opaque_token,
    verify_password,
)
from src.api.config import (
    CONCEAL_UNKNOWN_EMAILS,
    REQUIRE_VERIFIED_EMAIL,
    RESET_TOKEN_EXPIRE_MINUTES,
)
from src.api.errors import (
    Conflict,
    EmailNotVerified,
    InvalidCredentials,
    InvalidToken,
    NotFound,
)
from src.api.mailer import Mailer, send_reset_email, send_verification_email
from src.api.models import RevokedToken, User, utcnow

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == normalize_email(email)).first()


def signup(db: Session, mailer: Mailer, email: str, password: str) -> str:
    """Register an unverified user and email them a verification link."""
    email = normalize_email(email)
    if find_user_by_email(db, email) is not None:
        raise Conflict("User already exists")

    token = new_opaque_token()
    user = User(
        email=email,
        password_hash=get_password_hash(password),
        verified=False,
        verification_token=hash_token(token),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User signed up", extra={"event": "signup", "extra_data": {"user_id": user.id}})

    send_verification_email(mailer, user.email, token)
    return "Signup successful. Please check your email to verify your account."


def verify_email(db: Session, token: str) -> str:
    user = db.query(User).filter(User.verification_token == hash_token(token)).first()
    if user is None:
        logger.warning("Unknown verification token", extra={"event": "invalid_token", "extra_data": {"purpose": "verify"}})
        raise InvalidToken("Invalid or expired verification token")
    user.verified = True
    user.verification_token = None
    db.commit()
    logger.info("Email verified", extra={"event": "email_verified", "extra_data": {"user_id": user.id}})
    return "Email verified successfully. You can now log in."


def login(db: Session, email: str, password: str):
    """Return `(token, user)` for valid credentials."""
    user = find_user_by_email(db, email)
    if user is None:
        raise NotFound("User not found")
    if not verify_password(password, user.password_hash):
        logger.warning("Failed login", extra={"event": "login_failed", "extra_data": {"user_id": user.id}})
        raise InvalidCredentials("Invalid credentials")
    if REQUIRE_VERIFIED_EMAIL and not user.verified:
        raise EmailNotVerified()
    token = create_access_token(user.id)
    logger.info("User logged in", extra={"event": "login", "extra_data": {"user_id": user.id}})
    return token, user


def logout(db: Session, claims: dict) -> str:
    """Revoke the presented token until its natural expiry."""
    expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc).replace(tzinfo=None)
    db.add(RevokedToken(jti=claims["jti"], user_id=int(claims["sub"]), expires_at=expires_at))
    # Entries past their expiry can no longer match a valid token
    db.query(RevokedToken).filter(RevokedToken.expires_at < utcnow()).delete()
    db.commit()
    logger.info("User logged out", extra={"event": "logout", "extra_data": {"user_id": claims["sub"]}})
    return "Logged out"


def forgot_password(db: Session, mailer: Mailer, email: str) -> str:
    message = "Password reset email sent. Please check your inbox."
    user = find_user_by_email(db, email)
    if user is None:
        if CONCEAL_UNKNOWN_EMAILS:
            return message
        raise NotFound("User not found")

    token = new_opaque_token()
    user.reset_password_token = hash_token(token)
    user.reset_password_expires_at = utcnow() + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()
    logger.info("Password reset requested", extra={"event": "password_reset_requested", "extra_data": {"user_id": user.id}})

    send_reset_email(mailer, user.email, token)
    return message


def reset_password(db: Session, token: str, new_password: str) -> str:
    user = db.query(User).filter(User.reset_password_token == hash_token(token)).first()
    if user is None or (
        user.reset_password_expires_at is not None and user.reset_password_expires_at < utcnow()
    ):
        logger.warning("Unknown or expired reset token", extra={"event": "invalid_token", "extra_data": {"purpose": "reset"}})
        raise InvalidToken("Invalid or expired reset token")
    user.password_hash = get_password_hash(new_password)
    user.reset_password_token = None
    user.reset_password_expires_at = None
    db.commit()
    logger.info("Password reset", extra={"event": "password_reset", "extra_data": {"user_id": user.id}})
    return "Password reset successful. You can now log in."
