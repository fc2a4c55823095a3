# -*- coding: utf-8 -*-
"""
Mail transport. ``send`` never raises: the outcome is returned as a
``DeliveryResult`` so callers can tell "sent" from "failed but tolerated".
"""

from dataclasses import dataclass, field
from email.message import EmailMessage
import enum
import logging
import smtplib
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    filename: str
    content: bytes
    maintype: str = "application"
    subtype: str = "octet-stream"


@dataclass
class InlineImage:
    cid: str
    content: bytes
    subtype: str = "png"


@dataclass
class MailMessage:
    to: str
    subject: str
    html: str
    text: str = ""
    attachments: List[Attachment] = field(default_factory=list)
    inline_images: List[InlineImage] = field(default_factory=list)


class DeliveryStatus(str, enum.Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    status: DeliveryStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != DeliveryStatus.FAILED


def build_email(message: MailMessage, sender: str) -> EmailMessage:
    email = EmailMessage()
    email["From"] = sender
    email["To"] = message.to
    email["Subject"] = message.subject
    email.set_content(message.text or "This message requires an HTML capable mail client.")
    email.add_alternative(message.html, subtype="html")

    if message.inline_images:
        html_part = email.get_payload()[1]
        for image in message.inline_images:
            html_part.add_related(image.content, maintype="image", subtype=image.subtype, cid=f"<{image.cid}>")

    for attachment in message.attachments:
        email.add_attachment(
            attachment.content,
            maintype=attachment.maintype,
            subtype=attachment.subtype,
            filename=attachment.filename,
        )
    return email


class SmtpMailer:
    def __init__(self, host, port=587, username=None, password=None, sender=None, use_tls=True, timeout=15.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, message: MailMessage) -> DeliveryResult:
        logger.info("Sending email '%s' to %s", message.subject, message.to)
        try:
            email = build_email(message, self.sender)
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email '%s' to %s: %s", message.subject, message.to, e, exc_info=True)
            return DeliveryResult(DeliveryStatus.FAILED, str(e))

        logger.info("Email '%s' sent to %s", message.subject, message.to)
        return DeliveryResult(DeliveryStatus.SENT)


class NullMailer:
    """Used when no SMTP host is configured."""

    def send(self, message: MailMessage) -> DeliveryResult:
        logger.info("Mail transport not configured, skipping '%s' to %s", message.subject, message.to)
        return DeliveryResult(DeliveryStatus.SKIPPED)


def mailer_from_settings(settings):
    if not settings.email_host:
        return NullMailer()
    return SmtpMailer(
        host=settings.email_host,
        port=settings.email_port,
        username=settings.email_user,
        password=settings.email_password,
        sender=settings.email_from,
        use_tls=settings.email_use_tls,
        timeout=settings.email_timeout,
    )
