# eventnest/routes/attendance_fastapi.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventnest.auth import ensure_can_manage, require
from eventnest.database import get_db
from eventnest.models.user import User
from eventnest.policy import Action
from eventnest.schemas.registration import (
    AttendanceStats,
    CheckInResult,
    RegistrationRead,
    RegistrationWithUser,
    TicketCodeIn,
    TicketVerification,
)
from eventnest.services import Services, get_services

router = APIRouter(
    tags=["Attendance"],
)

organizer = require(Action.MANAGE_ATTENDANCE)


@router.get("/events/{event_id}/registrations", response_model=List[RegistrationWithUser])
def read_event_registrations(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(organizer),
    services: Services = Depends(get_services),
):
    event = services.registrations.get_event(db, event_id)
    ensure_can_manage(current_user, event)
    return services.registrations.list_for_event(db, event.id)


@router.get("/events/{event_id}/attendance-stats", response_model=AttendanceStats)
def read_attendance_stats(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(organizer),
    services: Services = Depends(get_services),
):
    event = services.registrations.get_event(db, event_id)
    ensure_can_manage(current_user, event)
    return services.registrations.attendance_stats(db, event.id)


@router.post("/registrations/{registration_id}/attend", response_model=RegistrationRead)
def mark_attended(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(organizer),
    services: Services = Depends(get_services),
):
    registration = services.registrations.get_registration(db, registration_id)
    ensure_can_manage(current_user, registration.event)
    return services.registrations.mark_attended(db, registration)


@router.post("/events/{event_id}/verify-qr", response_model=TicketVerification)
def verify_ticket(
    event_id: str,
    body: TicketCodeIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(organizer),
    services: Services = Depends(get_services),
):
    event = services.registrations.get_event(db, event_id)
    ensure_can_manage(current_user, event)

    registration, already_checked_in = services.registrations.verify_ticket(db, event.id, body.ticket_code)
    return {
        "valid": True,
        "registration": registration,
        "event": event,
        "already_checked_in": already_checked_in,
        "checked_in_at": registration.checked_in_at,
    }


@router.post("/events/{event_id}/checkin-qr", response_model=CheckInResult)
def check_in(
    event_id: str,
    body: TicketCodeIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(organizer),
    services: Services = Depends(get_services),
):
    event = services.registrations.get_event(db, event_id)
    ensure_can_manage(current_user, event)

    registration = services.registrations.check_in(db, event.id, body.ticket_code)
    return {"success": True, "message": "Successfully checked in", "registration": registration}
