"""Message composition and SMTP conversation of :class:`EmailClient`."""

from __future__ import annotations

import smtplib
from dataclasses import dataclass, field
from typing import Any

import pytest

from jbouquet.domain.errors import ParseError, SendError
from jbouquet.mail import Attachment, Email, EmailClient


@dataclass
class RecordingSMTP:
    """Stand-in for :class:`smtplib.SMTP` that records the conversation."""

    host: str
    port: int
    timeout: float | None = None
    calls: list[tuple[str, Any]] = field(default_factory=list)
    fail_on: str | None = None

    def __enter__(self) -> "RecordingSMTP":
        return self

    def __exit__(self, *exc: object) -> None:
        self.calls.append(("quit", None))

    def _record(self, name: str, payload: Any = None) -> None:
        if self.fail_on == name:
            raise smtplib.SMTPAuthenticationError(535, b"rejected")
        self.calls.append((name, payload))

    def set_debuglevel(self, level: int) -> None:
        self._record("debug", level)

    def starttls(self) -> None:
        self._record("starttls")

    def login(self, user: str, password: str) -> None:
        self._record("login", (user, password))

    def send_message(self, message, from_addr=None, to_addrs=None) -> None:
        self._record("send", (message, from_addr, list(to_addrs or [])))


@pytest.fixture
def smtp_sessions(monkeypatch: pytest.MonkeyPatch) -> list[RecordingSMTP]:
    sessions: list[RecordingSMTP] = []

    def factory(host: str, port: int, timeout: float | None = None) -> RecordingSMTP:
        session = RecordingSMTP(host, port, timeout)
        sessions.append(session)
        return session

    monkeypatch.setattr(smtplib, "SMTP", factory)
    return sessions


def sample_email() -> Email:
    return Email(
        from_address="ops@example.com",
        to=["a@example.com"],
        bcc=["b@example.com"],
        subject="Report",
        html="<p>Hi</p>",
        attachments=[Attachment("r.pdf", "application/pdf", b"%PDF-1.4")],
    )


def test_message_is_multipart_with_html_first() -> None:
    message = EmailClient("mx").build_message(sample_email())
    assert message.get_content_type() == "multipart/mixed"
    parts = list(message.iter_parts())
    assert len(parts) == 2
    assert parts[0].get_content_type() == "text/html"
    assert parts[0].get_content().strip() == "<p>Hi</p>"
    assert parts[1].get_content_type() == "application/pdf"
    assert parts[1].get_filename() == "r.pdf"
    assert parts[1].get_content() == b"%PDF-1.4"


def test_headers() -> None:
    message = EmailClient("mx").build_message(sample_email())
    assert message["From"] == "ops@example.com"
    assert message["To"] == "a@example.com"
    assert message["Subject"] == "Report"


def test_recipient_headers_list_every_address() -> None:
    email = Email(
        from_address="F@example.com",
        to=["A@example.com", "B@example.com"],
        bcc=["C@example.com"],
        subject="S",
        html="<b>H</b>",
    )
    message = EmailClient("mx").build_message(email)
    assert message["To"] == "A@example.com, B@example.com"
    assert message["Bcc"] == "C@example.com"
    assert email.recipients() == ["A@example.com", "B@example.com", "C@example.com"]


def test_empty_lists_omit_headers() -> None:
    email = Email(from_address="ops@example.com", bcc=["hidden@example.com"], subject="s")
    message = EmailClient("mx").build_message(email)
    assert message["To"] is None
    assert len(list(message.iter_parts())) == 1


def test_attachment_without_type_defaults_to_octet_stream() -> None:
    email = Email(from_address="ops@example.com", to=["a@example.com"], attachments=[Attachment("blob", "", b"\x00")])
    part = list(EmailClient("mx").build_message(email).iter_parts())[1]
    assert part.get_content_type() == "application/octet-stream"


def test_send_with_authentication(smtp_sessions: list[RecordingSMTP]) -> None:
    client = EmailClient("mx.example.com", 2525, "mailer", "secret", timeout=5.0)
    client.send(sample_email())
    (session,) = smtp_sessions
    assert (session.host, session.port, session.timeout) == ("mx.example.com", 2525, 5.0)
    names = [name for name, _ in session.calls]
    assert names == ["login", "send", "quit"]
    assert session.calls[0][1] == ("mailer", "secret")
    _, from_addr, recipients = session.calls[1][1]
    assert from_addr == "ops@example.com"
    assert recipients == ["a@example.com", "b@example.com"]


def test_send_without_user_skips_login(smtp_sessions: list[RecordingSMTP]) -> None:
    EmailClient("mx", starttls=True, debug=True).send(sample_email())
    names = [name for name, _ in smtp_sessions[0].calls]
    assert names == ["debug", "starttls", "send", "quit"]


def test_send_failure_raises_send_error(monkeypatch: pytest.MonkeyPatch) -> None:
    session = RecordingSMTP("mx", 25, fail_on="login")
    monkeypatch.setattr(smtplib, "SMTP", lambda host, port, timeout=None: session)
    with pytest.raises(SendError) as info:
        EmailClient("mx", username="mailer", password="bad").send(sample_email())
    assert isinstance(info.value.__cause__, smtplib.SMTPException)
    assert ("quit", None) in session.calls


def test_connection_refused_raises_send_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(host: str, port: int, timeout: float | None = None) -> RecordingSMTP:
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    with pytest.raises(SendError):
        EmailClient("mx").send(sample_email())


def test_send_without_recipients(smtp_sessions: list[RecordingSMTP]) -> None:
    with pytest.raises(SendError):
        EmailClient("mx").send(Email(from_address="ops@example.com", subject="nobody"))
    assert smtp_sessions == []


def test_from_mapping_reads_settings() -> None:
    client = EmailClient.from_mapping(
        {"smtp-host": "mx", "smtp-port": "587", "smtp-user": "u", "smtp-pass": "p", "smtp-starttls": "true"}
    )
    assert (client.host, client.port, client.username, client.password) == ("mx", 587, "u", "p")
    assert client.starttls is True
    assert client.auth_enabled


def test_from_mapping_empty_user_disables_auth() -> None:
    client = EmailClient.from_mapping({"smtp-host": "mx", "smtp-port": "", "smtp-user": ""})
    assert client.port == 25
    assert not client.auth_enabled


@pytest.mark.parametrize("config", [{}, {"smtp-host": ""}, {"smtp-host": "mx", "smtp-port": "twenty"}])
def test_from_mapping_rejects_bad_settings(config: dict[str, str]) -> None:
    with pytest.raises(ParseError):
        EmailClient.from_mapping(config)
