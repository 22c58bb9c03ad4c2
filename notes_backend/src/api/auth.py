import hashlib
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from src.api.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from src.api.database import get_db
from src.api.errors import Unauthorized
from src.api.models import RevokedToken, User

logger = logging.getLogger(__name__)

# Setup password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# The raw signed token travels in a custom header, not "Authorization: Bearer"
AUTH_HEADER = "x-auth-token"
token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a plaintext password."""
    return pwd_context.hash(password)


def new_opaque_token() -> str:
    """Random URL-safe token for email verification and password reset links."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT asserting the user id, with issued-at, expiry and a unique id."""
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": expire,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the claims of a valid token; raises Unauthorized otherwise."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise Unauthorized("Token verification failed")
    if payload.get("sub") is None or payload.get("jti") is None:
        raise Unauthorized("Token verification failed")
    return payload


# PUBLIC_INTERFACE
def get_token_claims(
    token: Optional[str] = Depends(token_header), db: Session = Depends(get_db)
) -> dict:
    """
    Dependency that validates the x-auth-token header and returns its claims.

    Raises:
        401 if the header is missing, the token is invalid/expired, or it was revoked.
    """
    if not token:
        raise Unauthorized("No auth token")
    payload = decode_access_token(token)
    if db.get(RevokedToken, payload["jti"]) is not None:
        logger.warning("Revoked token presented", extra={"event": "token_revoked_use", "extra_data": {"sub": payload["sub"]}})
        raise Unauthorized("Token has been revoked")
    return payload


# PUBLIC_INTERFACE
def get_current_user(claims: dict = Depends(get_token_claims), db: Session = Depends(get_db)) -> User:
    """
    Dependency that returns the currently authenticated user based on the session token.

    Raises:
        401 if credentials are invalid or user not found.
    """
    try:
        user_id = int(claims["sub"])
    except ValueError:
        raise Unauthorized("Token verification failed")
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthorized()
    return user
