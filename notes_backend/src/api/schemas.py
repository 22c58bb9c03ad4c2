from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, EmailStr, field_validator

from src.api.models import DEFAULT_NOTE_TITLE

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class MessageResponse(BaseModel):
    """Generic acknowledgement"""
    message: str


# Auth / Tokens

class SignupRequest(BaseModel):
    """Request model to register a new user"""
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=6, description="Plaintext password (min 6 chars)")


class LoginRequest(BaseModel):
    """Credentials for login"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset link"""
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Consume a reset token and set a new password"""
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, description="New plaintext password (min 6 chars)")


# Users

class UserResponse(BaseModel):
    """User response without sensitive fields"""
    id: int
    email: EmailStr
    verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Token response for successful login"""
    token: str = Field(..., description="Signed JWT, sent back in the x-auth-token header")
    user: UserResponse


# Notes

class NoteCreateRequest(BaseModel):
    """Create note request; a palette color is assigned when color is omitted"""
    title: str = Field(DEFAULT_NOTE_TITLE, max_length=255)
    content: str = Field("", description="Note content")
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN, description="Hex color, e.g. #f6d365")

    @field_validator("color", mode="before")
    @classmethod
    def blank_color_is_unset(cls, value):
        """An empty color means "not supplied"."""
        return value or None


class NoteUpdateRequest(BaseModel):
    """Update note request (full replacement)"""
    title: str = Field(..., max_length=255)
    content: str
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    pinned: bool


class NoteResponse(BaseModel):
    """Note response model"""
    id: int
    title: str
    content: str
    color: str
    pinned: bool
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
