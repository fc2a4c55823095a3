# -*- coding: utf-8 -*-
"""
Builds the confirmation and certificate emails from the Jinja2 templates in
``eventnest/templates/email``.
"""

import re

from jinja2 import Environment, PackageLoader, select_autoescape

from eventnest.image_utils import data_url_to_bytes
from eventnest.services.mailer import Attachment, InlineImage, MailMessage

QR_CID = "ticket-qr"

_env = Environment(
    loader=PackageLoader("eventnest", "templates"),
    autoescape=select_autoescape(["html"]),
)
_env.filters["long_date"] = lambda value: f"{value:%A, %B} {value.day}, {value.year}"
_env.filters["long_datetime"] = lambda value: f"{value:%A, %B} {value.day}, {value.year} {value:%H:%M}"


def safe_filename(title):
    return re.sub(r"[^a-zA-Z0-9]", "_", title)


def confirmation_message(user, event, registration, frontend_url) -> MailMessage:
    inline_images = []
    if registration.qr_code:
        inline_images.append(InlineImage(cid=QR_CID, content=data_url_to_bytes(registration.qr_code)))

    html = _env.get_template("email/confirmation.html").render(
        user=user,
        event=event,
        registration=registration,
        qr_cid=QR_CID if inline_images else None,
        frontend_url=frontend_url.rstrip("/"),
    )
    text = (
        f"Hi {user.name},\n\nYou are registered for {event.title}.\n"
        f"Ticket code: {registration.ticket_code}\n"
    )
    return MailMessage(
        to=user.email,
        subject=f"Ticket Confirmation: {event.title}",
        html=html,
        text=text,
        inline_images=inline_images,
    )


def certificate_message(user, event, certificate, pdf_bytes, frontend_url) -> MailMessage:
    html = _env.get_template("email/certificate.html").render(
        user=user,
        event=event,
        certificate=certificate,
        frontend_url=frontend_url.rstrip("/"),
    )
    text = (
        f"Congratulations, {user.name}!\n\nYour certificate of participation for "
        f"{event.title} is attached.\nCertificate ID: {certificate.id}\n"
    )
    return MailMessage(
        to=user.email,
        subject=f"Certificate: {event.title}",
        html=html,
        text=text,
        attachments=[
            Attachment(
                filename=f"Certificate-{safe_filename(event.title)}.pdf",
                content=pdf_bytes,
                maintype="application",
                subtype="pdf",
            )
        ],
    )
