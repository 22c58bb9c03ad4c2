from fastapi import Request, status
from fastapi.responses import JSONResponse


class NotesAppError(Exception):
    """Base class for errors surfaced to API callers as `{error, detail}`."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def kind(self) -> str:
        return type(self).__name__


class Conflict(NotesAppError):
    default_detail = "User already exists"


class NotFound(NotesAppError):
    default_detail = "User not found"


class NoteNotFound(NotFound):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Note not found"

    @property
    def kind(self) -> str:
        return "NotFound"


class InvalidCredentials(NotesAppError):
    default_detail = "Invalid credentials"


class InvalidToken(NotesAppError):
    default_detail = "Invalid or expired token"


class EmailNotVerified(NotesAppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Email not verified"


class Unauthorized(NotesAppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


# PUBLIC_INTERFACE
async def notes_app_error_handler(request: Request, exc: NotesAppError) -> JSONResponse:
    """Render a domain error with its HTTP status."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.detail},
    )
