import os
import secrets

from dotenv import load_dotenv

# Loads notes_backend/.env when present; real environment variables win
load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Use SQLite file by default; can be overridden by DATABASE_URL env
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./notes.db")

# JWT settings. Without SECRET_KEY every restart invalidates issued tokens.
SECRET_KEY = os.getenv("SECRET_KEY") or secrets.token_urlsafe(32)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))

# Links in outgoing emails point at the frontend
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000").strip().rstrip("/")

# Email delivery: "console" logs messages, "resend" posts to the Resend API
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "console").strip().lower()
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "").strip()
MAIL_FROM = os.getenv("MAIL_FROM", "Notes <no-reply@localhost>").strip()

REQUIRE_VERIFIED_EMAIL = _flag("REQUIRE_VERIFIED_EMAIL")
CONCEAL_UNKNOWN_EMAILS = _flag("CONCEAL_UNKNOWN_EMAILS")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Bind address for the `notes-api` command
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
