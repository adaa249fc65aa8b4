"""
Unit tests for email delivery.

Both transports are mocked; nothing leaves the machine.
"""
import smtplib
import pytest
import httpx
from unittest.mock import MagicMock, patch

from app.core.config import settings
from app.services import email as email_service
from app.services.email import (
    EmailDeliveryError, send_email, forgot_password_email_html, forgot_username_email_html
)


@pytest.fixture
def mailgun_settings(monkeypatch):
    monkeypatch.setattr(settings, "MAILGUN_API_KEY", "key-test")
    monkeypatch.setattr(settings, "MAILGUN_DOMAIN", "mg.example.com")
    monkeypatch.setattr(settings, "EMAIL_USER", "sender@example.com")
    monkeypatch.setattr(settings, "EMAIL_PASSWORD", "abcd efgh ijkl mnop")


@pytest.fixture
def smtp_only_settings(monkeypatch):
    monkeypatch.setattr(settings, "MAILGUN_API_KEY", None)
    monkeypatch.setattr(settings, "MAILGUN_DOMAIN", None)
    monkeypatch.setattr(settings, "EMAIL_USER", "sender@example.com")
    monkeypatch.setattr(settings, "EMAIL_PASSWORD", "abcd efgh ijkl mnop")


def test_mailgun_is_used_when_configured(mailgun_settings):
    response = MagicMock(status_code=200)
    response.json.return_value = {"id": "<msg-1>"}

    with patch.object(email_service.httpx, "post", return_value=response) as post, \
            patch.object(email_service.smtplib, "SMTP") as smtp:
        assert send_email("to@example.com", "Hi", "<p>hi</p>") is True

    post.assert_called_once()
    url = post.call_args.args[0]
    assert url.endswith("/mg.example.com/messages")
    assert post.call_args.kwargs["auth"] == ("api", "key-test")
    assert post.call_args.kwargs["data"]["to"] == "to@example.com"
    smtp.assert_not_called()


def test_falls_back_to_smtp_when_mailgun_fails(mailgun_settings):
    with patch.object(email_service.httpx, "post", side_effect=httpx.ConnectError("down")), \
            patch.object(email_service.smtplib, "SMTP") as smtp:
        assert send_email("to@example.com", "Hi", "<p>hi</p>") is True

    server = smtp.return_value.__enter__.return_value
    server.starttls.assert_called_once()
    # App passwords are accepted with the spaces Google shows them with
    server.login.assert_called_once_with("sender@example.com", "abcdefghijklmnop")
    server.send_message.assert_called_once()


def test_mailgun_error_status_falls_back(mailgun_settings):
    response = MagicMock(status_code=401, text="Forbidden")

    with patch.object(email_service.httpx, "post", return_value=response), \
            patch.object(email_service.smtplib, "SMTP") as smtp:
        send_email("to@example.com", "Hi", "<p>hi</p>")

    smtp.assert_called_once()


def test_smtp_failure_raises(smtp_only_settings):
    with patch.object(email_service.smtplib, "SMTP", side_effect=smtplib.SMTPConnectError(421, "busy")):
        with pytest.raises(EmailDeliveryError):
            send_email("to@example.com", "Hi", "<p>hi</p>")


def test_missing_smtp_credentials_raise(monkeypatch, smtp_only_settings):
    monkeypatch.setattr(settings, "EMAIL_PASSWORD", None)

    with pytest.raises(EmailDeliveryError):
        send_email("to@example.com", "Hi", "<p>hi</p>")


def test_templates_escape_user_values():
    html = forgot_password_email_html("<script>", "https://x.test/reset?token=a&b=1")

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "token=a&amp;b=1" in html
    assert "24 hours" in html

    assert "alice_01" in forgot_username_email_html("alice_01")
