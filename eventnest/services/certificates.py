# -*- coding: utf-8 -*-
"""
Certificate issuance for checked-in attendees.
"""

from dataclasses import dataclass
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from eventnest.errors import ArtifactMissing, Forbidden, NotFound
from eventnest.models.certificate import Certificate
from eventnest.models.event import Event
from eventnest.models.registration import Registration
from eventnest.models.user import Role
from eventnest.services.notifications import certificate_message, safe_filename

logger = logging.getLogger(__name__)

NO_ATTENDEES = "No attendees found for certificate generation."
ALL_CERTIFIED = "All eligible attendees already have certificates."


@dataclass
class GenerationResult:
    generated: int = 0
    failed: int = 0
    total_eligible: int = 0
    message: str = ""

    @property
    def processed(self) -> bool:
        return self.total_eligible > 0


class CertificateDeliveryError(Exception):
    pass


class CertificateManager:
    def __init__(self, pdf_renderer, mailer, frontend_url, url_prefix="/static/certificates"):
        self.pdf_renderer = pdf_renderer
        self.mailer = mailer
        self.frontend_url = frontend_url
        self.url_prefix = url_prefix.rstrip("/")

    def generate(self, db: Session, event: Event) -> GenerationResult:
        attended = (
            db.query(Registration)
            .options(joinedload(Registration.user))
            .filter(Registration.event_id == event.id, Registration.attended.is_(True))
            .all()
        )
        if not attended:
            return GenerationResult(message=NO_ATTENDEES)

        certified = self.certified_user_ids(db, event.id)
        pending = [reg for reg in attended if reg.user_id not in certified]
        if not pending:
            return GenerationResult(message=ALL_CERTIFIED)

        result = GenerationResult(total_eligible=len(pending))
        # one at a time, so a failure only affects its own registrant
        for registration in pending:
            try:
                issued = self._issue(db, event, registration.user)
            except Exception:
                db.rollback()
                result.failed += 1
                logger.error(
                    "Certificate generation failed for user %s, event %s",
                    registration.user_id,
                    event.id,
                    exc_info=True,
                )
                continue
            if issued:
                result.generated += 1

        result.message = f"Successfully generated {result.generated} certificate(s)."
        if result.failed:
            result.message += f" {result.failed} failed."
        logger.info(
            "Certificates for event %s: %d generated, %d failed, %d eligible",
            event.id,
            result.generated,
            result.failed,
            result.total_eligible,
        )
        return result

    def _issue(self, db: Session, event: Event, user) -> bool:
        # row first: the artifact is named after the certificate id
        certificate = Certificate(user_id=user.id, event_id=event.id, certificate_url="")
        db.add(certificate)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Certificate for user %s, event %s issued concurrently; skipping", user.id, event.id)
            return False
        db.refresh(certificate)

        try:
            filename = self.pdf_renderer.render(certificate, user, event)
        except Exception:
            # drop the placeholder so the attendee stays eligible for a retry
            db.delete(certificate)
            db.commit()
            raise

        certificate.certificate_url = f"{self.url_prefix}/{filename}"
        db.commit()
        db.refresh(certificate)

        with open(self.pdf_renderer.path_for(certificate.id), "rb") as fh:
            pdf_bytes = fh.read()
        delivery = self.mailer.send(certificate_message(user, event, certificate, pdf_bytes, self.frontend_url))
        if not delivery.ok:
            raise CertificateDeliveryError(delivery.error)

        logger.info("Certificate %s generated and sent to user %s", certificate.id, user.id)
        return True

    # --- reads ---

    def certified_user_ids(self, db: Session, event_id) -> set:
        return {
            user_id
            for (user_id,) in db.query(Certificate.user_id).filter(Certificate.event_id == event_id).all()
        }

    def list_for_user(self, db: Session, user_id):
        return (
            db.query(Certificate)
            .options(joinedload(Certificate.event))
            .filter(Certificate.user_id == user_id)
            .order_by(Certificate.issued_at.desc())
            .all()
        )

    def download(self, db: Session, certificate_id, requester):
        """Returns ``(path, download_name)`` for the certificate PDF."""
        certificate = (
            db.query(Certificate)
            .options(joinedload(Certificate.event))
            .filter(Certificate.id == certificate_id)
            .first()
        )
        if certificate is None:
            raise NotFound("Certificate not found")

        is_owner = certificate.user_id == requester.id
        is_organizer = certificate.event.organizer_id == requester.id
        if not (is_owner or is_organizer or Role(requester.role) == Role.ADMIN):
            logger.warning("Certificate download denied: certificate %s, user %s", certificate_id, requester.id)
            raise Forbidden("Not authorized to download this certificate")

        if not self.pdf_renderer.exists(certificate.id):
            logger.error(
                "Certificate file missing: %s (certificate %s)",
                self.pdf_renderer.path_for(certificate.id),
                certificate.id,
            )
            raise ArtifactMissing("Certificate file not found")

        return self.pdf_renderer.path_for(certificate.id), f"Certificate-{safe_filename(certificate.event.title)}.pdf"

    def verify(self, db: Session, certificate_id) -> dict:
        """Public lookup. Never raises for an unknown id."""
        certificate = (
            db.query(Certificate)
            .options(
                joinedload(Certificate.user),
                joinedload(Certificate.event).joinedload(Event.organizer),
            )
            .filter(Certificate.id == certificate_id)
            .first()
        )
        if certificate is None:
            return {"valid": False, "message": "Certificate not found"}

        event = certificate.event
        return {
            "valid": True,
            "certificate": {
                "id": certificate.id,
                "recipient_name": certificate.user.name,
                "event_title": event.title,
                "event_date": event.date,
                "event_location": event.location,
                "organizer": event.organizer_name,
                "issued_at": certificate.issued_at,
            },
        }
