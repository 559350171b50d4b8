"""SMTP client for multipart HTML email with attachments.

Purpose
-------
Compose a ``multipart/mixed`` message (HTML body first, then one part per
attachment) and hand it to a preconfigured SMTP relay.

Contents
--------
* :data:`EMAIL_CONFIG_FILE` – name of the settings file read by
  :meth:`EmailClient.configured`.
* :class:`EmailClient` – message builder and sender.

Settings file
-------------
``email-client.yaml`` is a flat YAML mapping found through
:class:`jbouquet.core.ConfigurationFinder`::

    smtp-host: mx.example.com
    smtp-port: 25
    smtp-user: mailer
    smtp-pass: secret

Authentication is used only when ``smtp-user`` is non-empty. Every send opens
a fresh connection and closes it on every exit path.
"""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING, Final, Mapping

from ..adapters.resources.default import DEFAULT_TIMEOUT
from ..domain.errors import ParseError, SendError
from ..observability import log_debug, log_error, log_info
from ..text import is_empty
from .models import Email

if TYPE_CHECKING:
    from ..core import ConfigurationFinder

EMAIL_CONFIG_FILE: Final[str] = "email-client.yaml"
DEFAULT_PORT: Final[int] = 25
_DEFAULT_ATTACHMENT_TYPE = ("application", "octet-stream")


class EmailClient:
    """Send :class:`Email` messages through one SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        username: str | None = None,
        password: str | None = None,
        *,
        starttls: bool = False,
        timeout: float | None = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout
        self.debug = debug

    @classmethod
    def configured(cls, finder: ConfigurationFinder | None = None) -> EmailClient:
        """Return a client built from ``email-client.yaml``.

        The file is resolved through *finder* (a default
        :class:`ConfigurationFinder` when omitted).
        """

        if finder is None:
            from ..core import ConfigurationFinder

            finder = ConfigurationFinder()
        return cls.from_mapping(finder.as_map(EMAIL_CONFIG_FILE))

    @classmethod
    def from_mapping(cls, config: Mapping[str, str]) -> EmailClient:
        """Build a client from ``smtp-*`` settings.

        Examples
        --------
        >>> client = EmailClient.from_mapping({"smtp-host": "mx", "smtp-port": "2525"})
        >>> (client.host, client.port, client.auth_enabled)
        ('mx', 2525, False)
        """

        host = config.get("smtp-host")
        if is_empty(host):
            raise ParseError(f"{EMAIL_CONFIG_FILE} does not define smtp-host")
        raw_port = config.get("smtp-port")
        try:
            port = DEFAULT_PORT if is_empty(raw_port) else int(raw_port)
        except ValueError as exc:
            raise ParseError(f"Invalid smtp-port {raw_port!r} in {EMAIL_CONFIG_FILE}") from exc
        starttls = str(config.get("smtp-starttls", "")).lower() in {"1", "true", "yes", "on"}
        return cls(
            host,
            port,
            config.get("smtp-user") or None,
            config.get("smtp-pass") or None,
            starttls=starttls,
        )

    @property
    def auth_enabled(self) -> bool:
        return not is_empty(self.username)

    def build_message(self, email: Email) -> EmailMessage:
        """Compose the MIME message for *email* without sending it.

        ``To`` and ``Bcc`` headers are omitted when their lists are empty.
        The ``Bcc`` header stays on the returned message for inspection;
        :meth:`send` removes it from the transmitted copy.
        """

        message = EmailMessage()
        message["From"] = email.from_address
        if email.to:
            message["To"] = ", ".join(email.to)
        if email.bcc:
            message["Bcc"] = ", ".join(email.bcc)
        message["Subject"] = email.subject
        message.set_content(email.html, subtype="html")
        message.make_mixed()
        for attachment in email.attachments:
            maintype, subtype = _split_mime_type(attachment.mime_type)
            message.add_attachment(
                attachment.data,
                maintype=maintype,
                subtype=subtype,
                filename=attachment.filename,
            )
        return message

    def send(self, email: Email) -> None:
        """Connect, authenticate when configured, and transmit *email*.

        Raises
        ------
        SendError
            On any SMTP protocol or socket failure, or when the message has
            no recipients.
        """

        recipients = email.recipients()
        if not recipients:
            raise SendError(f"Email {email.subject!r} has no recipients")
        message = self.build_message(email)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.debug:
                    smtp.set_debuglevel(1)
                if self.starttls:
                    smtp.starttls()
                if self.auth_enabled:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message, from_addr=email.from_address, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as exc:
            log_error("email_send_failed", host=self.host, port=self.port, error=str(exc))
            raise SendError(f"Could not send email via {self.host}:{self.port}: {exc}") from exc
        log_info("email_sent", host=self.host, port=self.port, recipients=len(recipients))

    def __repr__(self) -> str:
        return f"EmailClient(host={self.host!r}, port={self.port}, auth={self.auth_enabled})"


def _split_mime_type(mime_type: str | None) -> tuple[str, str]:
    if is_empty(mime_type) or "/" not in mime_type:
        log_debug("attachment_type_defaulted", mime_type=mime_type)
        return _DEFAULT_ATTACHMENT_TYPE
    maintype, subtype = mime_type.split("/", 1)
    return maintype.strip(), subtype.split(";", 1)[0].strip()
