from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, Integer, String, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

DEFAULT_NOTE_TITLE = "Untitled Note"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how SQLite hands DateTime columns back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """
    User entity with unique email, hashed password and the single-use
    verification / password-reset tokens (stored as SHA-256 digests).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String(64), nullable=True, index=True)
    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    notes = relationship("Note", back_populates="owner", cascade="all, delete-orphan")


class Note(Base):
    """
    Note entity owned by a user with color tag, pin flag and timestamps.
    """
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), default=DEFAULT_NOTE_TITLE, nullable=False, index=True)
    content = Column(Text, default="", nullable=False)
    color = Column(String(7), nullable=False)
    pinned = Column(Boolean, default=False, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="notes")

    __table_args__ = (
        Index("ix_notes_user_title", "user_id", "title"),
    )


class RevokedToken(Base):
    """Session token invalidated by logout; kept until it would have expired anyway."""
    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, default=utcnow, nullable=False)
