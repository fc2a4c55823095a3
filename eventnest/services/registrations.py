# -*- coding: utf-8 -*-
"""
Registration lifecycle: Unregistered -> Registered -> CheckedIn.

A registration is created by ``register``, removed by ``unregister`` while it
is still in the Registered state, and moves to CheckedIn exactly once, either
through a ticket scan (``check_in``) or by an organizer (``mark_attended``).
"""

import logging

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from eventnest.database import utcnow
from eventnest.errors import AlreadyCheckedIn, Conflict, NotFound
from eventnest.models.event import Event
from eventnest.models.registration import Registration
from eventnest.models.user import User
from eventnest.services.notifications import confirmation_message

logger = logging.getLogger(__name__)


class RegistrationManager:
    def __init__(self, qr_renderer, mailer, frontend_url):
        self.qr_renderer = qr_renderer
        self.mailer = mailer
        self.frontend_url = frontend_url

    # --- lookups ---

    def get_event(self, db: Session, event_id) -> Event:
        event = db.query(Event).filter(Event.id == event_id).first()
        if event is None:
            raise NotFound("Event not found")
        return event

    def get_registration(self, db: Session, registration_id) -> Registration:
        registration = (
            db.query(Registration)
            .options(joinedload(Registration.event), joinedload(Registration.user))
            .filter(Registration.id == registration_id)
            .first()
        )
        if registration is None:
            raise NotFound("Registration not found")
        return registration

    def find(self, db: Session, user_id, event_id):
        return (
            db.query(Registration)
            .filter(Registration.user_id == user_id, Registration.event_id == event_id)
            .first()
        )

    def _find_by_ticket(self, db: Session, event_id, ticket_code) -> Registration:
        # ticket codes are looked up within one event only
        registration = (
            db.query(Registration)
            .options(joinedload(Registration.user), joinedload(Registration.event))
            .filter(Registration.event_id == event_id, Registration.ticket_code == ticket_code)
            .first()
        )
        if registration is None:
            logger.warning("Invalid ticket code for event %s", event_id)
            raise NotFound("Invalid ticket code for this event")
        return registration

    # --- transitions ---

    def register(self, db: Session, user: User, event_id, defer=None) -> Registration:
        """
        Creates the registration, attaches its QR code and dispatches the
        confirmation email.

        ``defer`` schedules the email (e.g. ``BackgroundTasks.add_task``);
        without it the email is sent before returning.
        """
        event = self.get_event(db, event_id)

        if self.find(db, user.id, event.id) is not None:
            logger.warning("Registration refused: user %s already registered for event %s", user.id, event.id)
            raise Conflict("Already registered for this event")

        registration = Registration(user_id=user.id, event_id=event.id)
        db.add(registration)
        try:
            db.commit()
        except IntegrityError:
            # a concurrent request for the same pair got there first
            db.rollback()
            logger.warning("Registration refused: concurrent duplicate for user %s, event %s", user.id, event.id)
            raise Conflict("Already registered for this event")
        db.refresh(registration)

        # the payload embeds the registration id, so the row has to exist first
        payload = {
            "ticketCode": registration.ticket_code,
            "eventId": event.id,
            "userId": user.id,
            "registrationId": registration.id,
        }
        try:
            registration.qr_code = self.qr_renderer.render(payload)
        except Exception:
            # the ticket stays valid without its image
            logger.error("QR code generation failed for registration %s", registration.id, exc_info=True)
        else:
            db.commit()
            db.refresh(registration)

        try:
            message = confirmation_message(user, event, registration, self.frontend_url)
        except Exception:
            logger.error("Could not build confirmation email for registration %s", registration.id, exc_info=True)
        else:
            if defer is not None:
                defer(self.mailer.send, message)
            else:
                self.mailer.send(message)

        logger.info("User %s registered for event %s (registration %s)", user.id, event.id, registration.id)
        return registration

    def unregister(self, db: Session, user: User, event_id):
        registration = self.find(db, user.id, event_id)
        if registration is None:
            raise NotFound("Registration not found")
        if registration.attended:
            logger.warning("Unregistration refused: registration %s already checked in", registration.id)
            raise Conflict("Cannot unregister after checking in")

        db.delete(registration)
        db.commit()
        logger.info("User %s unregistered from event %s", user.id, event_id)

    def verify_ticket(self, db: Session, event_id, ticket_code):
        """Read-only: returns ``(registration, already_checked_in)``."""
        registration = self._find_by_ticket(db, event_id, ticket_code)
        logger.info("Ticket verified for registration %s", registration.id)
        return registration, registration.attended

    def check_in(self, db: Session, event_id, ticket_code) -> Registration:
        registration = self._find_by_ticket(db, event_id, ticket_code)
        return self._check_in(db, registration)

    def mark_attended(self, db: Session, registration: Registration) -> Registration:
        return self._check_in(db, registration)

    def _check_in(self, db: Session, registration: Registration) -> Registration:
        if registration.attended:
            raise AlreadyCheckedIn(registration.checked_in_at)

        # conditional update: only the first writer flips the flag
        result = db.execute(
            update(Registration)
            .where(Registration.id == registration.id, Registration.attended.is_(False))
            .values(attended=True, checked_in_at=utcnow())
        )
        db.commit()
        db.refresh(registration)
        if result.rowcount == 0:
            raise AlreadyCheckedIn(registration.checked_in_at)

        logger.info("Registration %s checked in for event %s", registration.id, registration.event_id)
        return registration

    # --- listings ---

    def list_for_event(self, db: Session, event_id):
        return (
            db.query(Registration)
            .options(joinedload(Registration.user))
            .filter(Registration.event_id == event_id)
            .order_by(Registration.registered_at.desc())
            .all()
        )

    def list_for_user(self, db: Session, user_id):
        return (
            db.query(Registration)
            .options(joinedload(Registration.event).joinedload(Event.organizer))
            .filter(Registration.user_id == user_id)
            .order_by(Registration.registered_at.desc())
            .all()
        )

    def attendance_stats(self, db: Session, event_id) -> dict:
        total = db.query(func.count(Registration.id)).filter(Registration.event_id == event_id).scalar() or 0
        checked_in = (
            db.query(func.count(Registration.id))
            .filter(Registration.event_id == event_id, Registration.attended.is_(True))
            .scalar()
            or 0
        )
        rate = round(checked_in / total * 100, 1) if total else 0.0
        return {
            "total_registrations": total,
            "checked_in": checked_in,
            "pending": total - checked_in,
            "attendance_rate": rate,
        }
