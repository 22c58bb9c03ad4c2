"""
HTTP client for the Notes API.

`NotesApiClient` keeps the session token in a `TokenStore` and attaches it as
the `x-auth-token` header on every notes call. A missing token, or a token the
server rejects, raises `NotAuthenticated` so the caller can send the user back
to login.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"
DEFAULT_TOKEN_PATH = Path(os.getenv("NOTES_TOKEN_FILE", Path.home() / ".notes_token"))


class ClientError(Exception):
    """Base class for client-side failures."""


class ApiError(ClientError):
    """The server rejected a request, or it never reached the server."""

    def __init__(self, message: str, status_code: Optional[int] = None, kind: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.kind = kind


class NotAuthenticated(ClientError):
    """No usable session token; the user has to log in again."""


class TokenStore:
    """Session token persisted in a local file."""

    def __init__(self, path: Path = DEFAULT_TOKEN_PATH):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only from creation; a pre-existing file is tightened before the write
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        if hasattr(os, "fchmod"):
            os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(token)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _error_from_response(resp: httpx.Response) -> ApiError:
    try:
        body = resp.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    kind = body.get("error") if isinstance(body, dict) else None
    message = detail if isinstance(detail, str) else f"Request failed with status {resp.status_code}"
    return ApiError(message, status_code=resp.status_code, kind=kind)


class NotesApiClient:
    def __init__(self, http: httpx.Client, token_store: TokenStore, prefix: str = "/api"):
        self.http = http
        self.token_store = token_store
        self.prefix = prefix.rstrip("/")

    @classmethod
    def connect(cls, base_url: str, token_store: Optional[TokenStore] = None, timeout: float = 10):
        return cls(httpx.Client(base_url=base_url, timeout=timeout), token_store or TokenStore())

    def close(self) -> None:
        self.http.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token_store.load() is not None

    def _request(self, method: str, path: str, authenticated: bool = True, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if authenticated:
            token = self.token_store.load()
            if token is None:
                raise NotAuthenticated("Not logged in")
            headers[AUTH_HEADER] = token
        try:
            resp = self.http.request(method, self.prefix + path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(str(exc)) from exc
        if authenticated and resp.status_code == 401:
            self.token_store.clear()
            raise NotAuthenticated(_error_from_response(resp).message)
        if resp.is_error:
            raise _error_from_response(resp)
        return resp.json()

    # Auth

    def signup(self, email: str, password: str) -> str:
        body = self._request("POST", "/auth/signup", authenticated=False, json={"email": email, "password": password})
        return body["message"]

    def verify_email(self, token: str) -> str:
        return self._request("GET", "/auth/verify-email", authenticated=False, params={"token": token})["message"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/login", authenticated=False, json={"email": email, "password": password})
        self.token_store.save(body["token"])
        return body["user"]

    def forgot_password(self, email: str) -> str:
        return self._request("POST", "/auth/forgot-password", authenticated=False, json={"email": email})["message"]

    def reset_password(self, token: str, password: str) -> str:
        body = self._request(
            "POST", "/auth/reset-password", authenticated=False, json={"token": token, "password": password}
        )
        return body["message"]

    def logout(self) -> None:
        """Revoke the token server-side when possible; always forget it locally."""
        try:
            self._request("POST", "/auth/logout")
        except (ApiError, NotAuthenticated) as exc:
            logger.warning("Server-side logout failed: %s", exc)
        finally:
            self.token_store.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # Notes

    def list_notes(self, q: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"q": q} if q else None
        return self._request("GET", "/notes", params=params)

    def create_note(self, title: str = "Untitled Note", content: str = "", color: Optional[str] = None) -> Dict[str, Any]:
        payload = {"title": title, "content": content}
        if color:
            payload["color"] = color
        return self._request("POST", "/notes", json=payload)

    def get_note(self, note_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/notes/{note_id}")

    def update_note(self, note_id: int, title: str, content: str, color: str, pinned: bool) -> Dict[str, Any]:
        payload = {"title": title, "content": content, "color": color, "pinned": pinned}
        return self._request("PUT", f"/notes/{note_id}", json=payload)

    def delete_note(self, note_id: int) -> None:
        self._request("DELETE", f"/notes/{note_id}")
