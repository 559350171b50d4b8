"""Email adapter: multipart HTML messages over SMTP.

Contents:
    * :class:`.models.Email` / :class:`.models.Attachment` - message values.
    * :class:`.client.EmailClient` - builder and SMTP sender.
"""

from __future__ import annotations

from .client import EMAIL_CONFIG_FILE, EmailClient
from .models import Attachment, Email

__all__ = [
    "EMAIL_CONFIG_FILE",
    "Attachment",
    "Email",
    "EmailClient",
]
