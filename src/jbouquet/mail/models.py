"""Email value objects consumed by :class:`jbouquet.mail.client.EmailClient`."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Attachment:
    """Binary attachment: file name shown to the recipient, MIME type, and payload."""

    filename: str
    mime_type: str
    data: bytes


@dataclass
class Email:
    """One outbound message.

    ``to`` and ``bcc`` are ordered address lists; an empty list produces no
    header of that kind.

    Examples
    --------
    >>> email = Email(from_address="ops@example.com", to=["a@example.com"], subject="hi", html="<p>hi</p>")
    >>> email.recipients()
    ['a@example.com']
    """

    from_address: str
    to: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    subject: str = ""
    html: str = ""
    attachments: list[Attachment] = field(default_factory=list)

    def recipients(self) -> list[str]:
        """Envelope recipients: ``to`` followed by ``bcc``."""

        return [*self.to, *self.bcc]
