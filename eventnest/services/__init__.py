# -*- coding: utf-8 -*-
"""
Service objects built once per application and shared by the request handlers.
"""

from dataclasses import dataclass

from fastapi import Request

from eventnest.services.certificates import CertificateManager
from eventnest.services.mailer import mailer_from_settings
from eventnest.services.registrations import RegistrationManager
from eventnest.services.renderers import CertificatePdfRenderer, QrCodeRenderer


@dataclass
class Services:
    registrations: RegistrationManager
    certificates: CertificateManager


def build_services(settings, mailer=None, qr_renderer=None, pdf_renderer=None) -> Services:
    mailer = mailer or mailer_from_settings(settings)
    qr_renderer = qr_renderer or QrCodeRenderer()
    pdf_renderer = pdf_renderer or CertificatePdfRenderer(settings.certificates_dir, settings.frontend_url)
    return Services(
        registrations=RegistrationManager(qr_renderer, mailer, settings.frontend_url),
        certificates=CertificateManager(pdf_renderer, mailer, settings.frontend_url),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
