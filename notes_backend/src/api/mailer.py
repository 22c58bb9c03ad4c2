import logging

import httpx

from src.api.config import APP_BASE_URL, EMAIL_BACKEND, MAIL_FROM, RESEND_API_KEY

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


class Mailer:
    """Outbound email transport."""

    def send(self, to: str, subject: str, html: str) -> None:
        raise NotImplementedError


class ConsoleMailer(Mailer):
    """Writes messages to the log instead of delivering them (development)."""

    def send(self, to: str, subject: str, html: str) -> None:
        logger.info(
            "Email not delivered (console backend)",
            extra={"event": "email_console", "extra_data": {"to": to, "subject": subject, "html": html}},
        )


class ResendMailer(Mailer):
    """Delivers through the Resend HTTP API."""

    def __init__(self, api_key: str, sender: str, timeout: float = 20, transport: httpx.BaseTransport = None):
        if not api_key:
            raise RuntimeError("RESEND_API_KEY not set")
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    def send(self, to: str, subject: str, html: str) -> None:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            r = client.post(
                RESEND_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={"from": self.sender, "to": [to], "subject": subject, "html": html},
            )
            r.raise_for_status()
        logger.info("Email sent", extra={"event": "email_sent", "extra_data": {"to": to, "subject": subject}})


def verify_link(token: str) -> str:
    return f"{APP_BASE_URL}/verify-email?token={token}"


def reset_link(token: str) -> str:
    return f"{APP_BASE_URL}/reset-password?token={token}"


def send_verification_email(mailer: Mailer, to: str, token: str) -> None:
    url = verify_link(token)
    mailer.send(
        to=to,
        subject="Verify your email",
        html=f'<p>Click <a href="{url}">here</a> to verify your email.</p>',
    )


def send_reset_email(mailer: Mailer, to: str, token: str) -> None:
    url = reset_link(token)
    mailer.send(
        to=to,
        subject="Reset your password",
        html=f'<p>Click <a href="{url}">here</a> to reset your password.</p>',
    )


_mailer = None


# PUBLIC_INTERFACE
def get_mailer() -> Mailer:
    """Dependency returning the configured mailer (built once per process)."""
    global _mailer
    if _mailer is None:
        if EMAIL_BACKEND == "resend":
            _mailer = ResendMailer(RESEND_API_KEY, MAIL_FROM)
        elif EMAIL_BACKEND == "console":
            _mailer = ConsoleMailer()
        else:
            raise RuntimeError(f"Unknown EMAIL_BACKEND: {EMAIL_BACKEND}")
    return _mailer
