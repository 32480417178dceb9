import smtplib

import pytest

from app.core.config import Settings
from app.services import notification
from app.services.notification import EmailNotifier


class FakeSMTP:
    """Records what would have gone over the wire."""
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.messages.append(message)


class BrokenSMTP(FakeSMTP):
    def send_message(self, message):
        raise smtplib.SMTPRecipientsRefused({message["To"]: (550, b"unknown")})


@pytest.fixture(autouse=True)
def reset_fake_smtp():
    FakeSMTP.instances = []


def test_unconfigured_notifier_does_not_send(monkeypatch):
    monkeypatch.setattr(notification.smtplib, "SMTP", FakeSMTP)
    notifier = EmailNotifier(host=None)

    assert notifier.send("ana@example.com", "Ana") is False
    assert FakeSMTP.instances == []


def test_send_success(monkeypatch):
    monkeypatch.setattr(notification.smtplib, "SMTP", FakeSMTP)
    notifier = EmailNotifier(
        host="smtp.example.com", port=2525, user="clinic", password="secret",
        sender="queue@clinic.com"
    )

    assert notifier.send("ana@example.com", "Ana") is True

    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 2525)
    assert smtp.started_tls is True
    assert smtp.logged_in == ("clinic", "secret")
    message = smtp.messages[0]
    assert message["To"] == "ana@example.com"
    assert message["From"] == "queue@clinic.com"
    assert "Ana" in message.get_body(preferencelist=("plain",)).get_content()


def test_send_failure_returns_false(monkeypatch):
    monkeypatch.setattr(notification.smtplib, "SMTP", BrokenSMTP)
    notifier = EmailNotifier(host="smtp.example.com", sender="queue@clinic.com")

    assert notifier.send("ana@example.com", "Ana") is False


def test_connection_error_returns_false(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no server")

    monkeypatch.setattr(notification.smtplib, "SMTP", refuse)
    notifier = EmailNotifier(host="smtp.example.com", sender="queue@clinic.com")

    assert notifier.send("ana@example.com", None) is False


def test_from_settings():
    settings = Settings(
        SMTP_HOST="smtp.example.com",
        SMTP_PORT=465,
        SMTP_USER="clinic@example.com",
        SMTP_USE_TLS=False,
    )
    notifier = EmailNotifier.from_settings(settings)

    assert notifier.host == "smtp.example.com"
    assert notifier.port == 465
    # Falls back to the SMTP user when no sender is configured
    assert notifier.sender == "clinic@example.com"
    assert notifier.use_tls is False
    assert notifier.configured is True


def test_header_injection_returns_false(monkeypatch):
    monkeypatch.setattr(notification.smtplib, "SMTP", FakeSMTP)
    notifier = EmailNotifier(host="smtp.example.com", sender="queue@clinic.com")

    assert notifier.send("ana@example.com\nBcc: x@evil.com", "Ana") is False
    assert FakeSMTP.instances == []


def test_timeout_comes_from_smtp_setting():
    notifier = EmailNotifier.from_settings(
        Settings(SMTP_HOST="smtp.example.com", SMTP_TIMEOUT=3, STORE_TIMEOUT_SECONDS=10)
    )

    assert notifier.timeout == 3
