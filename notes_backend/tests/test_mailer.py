import json
import logging

import httpx
import pytest

from src.api import mailer as mailer_module
from src.api.mailer import ConsoleMailer, ResendMailer, send_reset_email, send_verification_email


def test_links_embed_raw_token():
    assert mailer_module.verify_link("abc") == "http://frontend.test/verify-email?token=abc"
    assert mailer_module.reset_link("abc") == "http://frontend.test/reset-password?token=abc"


def test_console_mailer_logs_message(caplog):
    with caplog.at_level(logging.INFO, logger="src.api.mailer"):
        send_verification_email(ConsoleMailer(), "a@x.com", "tok123")
    record = caplog.records[-1]
    assert record.event == "email_console"
    assert record.extra_data["to"] == "a@x.com"
    assert "verify-email?token=tok123" in record.extra_data["html"]


def test_resend_mailer_posts_message():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "msg_1"})

    mailer = ResendMailer("key-1", "Notes <no-reply@x.com>", transport=httpx.MockTransport(handler))
    send_reset_email(mailer, "a@x.com", "tok456")

    request = seen[0]
    assert str(request.url) == mailer_module.RESEND_URL
    assert request.headers["Authorization"] == "Bearer key-1"
    body = json.loads(request.content)
    assert body["to"] == ["a@x.com"]
    assert body["subject"] == "Reset your password"
    assert "reset-password?token=tok456" in body["html"]


def test_resend_mailer_raises_on_failure():
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    mailer = ResendMailer("key-1", "Notes <no-reply@x.com>", transport=transport)
    with pytest.raises(httpx.HTTPStatusError):
        mailer.send("a@x.com", "s", "<p>x</p>")


def test_resend_mailer_needs_api_key():
    with pytest.raises(RuntimeError):
        ResendMailer("", "Notes <no-reply@x.com>")


def test_get_mailer_defaults_to_console(monkeypatch):
    monkeypatch.setattr(mailer_module, "_mailer", None)
    assert isinstance(mailer_module.get_mailer(), ConsoleMailer)
