# -*- coding: utf-8 -*-
"""
Document renderers: the QR ticket image and the certificate PDF.
"""

import json
import logging
import os
import time

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from eventnest.image_utils import make_qr_data_url

logger = logging.getLogger(__name__)

GREEN = colors.HexColor("#10b981")
DARK_GREEN = colors.HexColor("#059669")
INK = colors.HexColor("#1f2937")
MUTED = colors.HexColor("#4b5563")
LIGHT = colors.HexColor("#9ca3af")


class QrCodeRenderer:
    def render(self, payload: dict) -> str:
        return make_qr_data_url(json.dumps(payload, separators=(",", ":")))


def certificate_filename(certificate_id) -> str:
    return f"certificate-{certificate_id}.pdf"


def format_long_date(value):
    return f"{value:%B} {value.day}, {value.year}"


class CertificatePdfRenderer:
    """Writes ``certificate-<id>.pdf`` files into ``directory``."""

    def __init__(self, directory, frontend_url):
        self.directory = directory
        self.frontend_url = frontend_url.rstrip("/")
        os.makedirs(self.directory, exist_ok=True)

    def path_for(self, certificate_id) -> str:
        return os.path.join(self.directory, certificate_filename(certificate_id))

    def exists(self, certificate_id) -> bool:
        return os.path.isfile(self.path_for(certificate_id))

    def render(self, certificate, user, event) -> str:
        """Renders the PDF and returns its file name."""
        started = time.monotonic()
        filename = certificate_filename(certificate.id)
        filepath = os.path.join(self.directory, filename)
        logger.info("Rendering certificate %s (user=%s, event=%s)", certificate.id, user.id, event.id)

        pdf = canvas.Canvas(filepath, pagesize=landscape(A4))
        width, height = landscape(A4)
        pdf.setTitle(f"Certificate of Participation - {event.title}")

        # double frame
        pdf.setStrokeColor(GREEN)
        pdf.setLineWidth(10)
        pdf.rect(30, 30, width - 60, height - 60)
        pdf.setStrokeColor(DARK_GREEN)
        pdf.setLineWidth(3)
        pdf.rect(40, 40, width - 80, height - 80)

        center = width / 2
        y = height - 110

        pdf.setFillColor(GREEN)
        pdf.setFont("Helvetica-Bold", 36)
        pdf.drawCentredString(center, y, "EventNest")

        y -= 60
        pdf.setFillColor(INK)
        pdf.setFont("Helvetica-Bold", 40)
        pdf.drawCentredString(center, y, "Certificate of Participation")

        y -= 25
        pdf.setStrokeColor(GREEN)
        pdf.setLineWidth(2)
        pdf.line(200, y, width - 200, y)

        y -= 35
        pdf.setFillColor(MUTED)
        pdf.setFont("Helvetica", 16)
        pdf.drawCentredString(center, y, "This is to certify that")

        y -= 45
        pdf.setFillColor(INK)
        pdf.setFont("Helvetica-Bold", 32)
        pdf.drawCentredString(center, y, user.name)

        y -= 35
        pdf.setFillColor(MUTED)
        pdf.setFont("Helvetica", 16)
        pdf.drawCentredString(center, y, "has successfully participated in")

        y -= 35
        pdf.setFillColor(DARK_GREEN)
        pdf.setFont("Helvetica-Bold", 22)
        pdf.drawCentredString(center, y, _fit(pdf, event.title, "Helvetica-Bold", 22, width - 140))

        y -= 30
        pdf.setFillColor(LIGHT)
        pdf.setFont("Helvetica", 14)
        pdf.drawCentredString(center, y, f"Held on {format_long_date(event.date)}")
        if event.location:
            y -= 20
            pdf.drawCentredString(center, y, f"at {event.location}")

        y -= 30
        pdf.setFont("Helvetica", 12)
        pdf.drawCentredString(center, y, f"Issued on: {format_long_date(certificate.issued_at)}")

        pdf.setFont("Helvetica", 10)
        pdf.drawCentredString(center, 70, f"Certificate ID: {certificate.id}")
        pdf.setFont("Helvetica", 9)
        pdf.drawCentredString(center, 55, f"Verify at: {self.frontend_url}/verify/{certificate.id}")

        pdf.showPage()
        pdf.save()

        logger.info(
            "Certificate %s rendered to %s in %.0fms",
            certificate.id,
            filename,
            (time.monotonic() - started) * 1000,
        )
        return filename


def _fit(pdf, text, font, size, max_width):
    if pdf.stringWidth(text, font, size) <= max_width:
        return text
    while text and pdf.stringWidth(text + "...", font, size) > max_width:
        text = text[:-1]
    return text + "..."
