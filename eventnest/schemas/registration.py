# eventnest/schemas/registration.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .event import EventRead, EventSummary
from .user import UserSummary


class RegistrationRead(BaseModel):
    id: str
    user_id: str
    event_id: str
    ticket_code: str
    qr_code: Optional[str] = None
    attended: bool
    checked_in_at: Optional[datetime] = None
    registered_at: datetime

    class Config:
        from_attributes = True


class RegistrationWithUser(RegistrationRead):
    user: UserSummary


class RegistrationWithEvent(RegistrationRead):
    event: EventRead


class TicketRead(RegistrationRead):
    user: UserSummary
    event: EventRead


class RegistrationCreated(BaseModel):
    message: str
    registration: RegistrationRead


class TicketCodeIn(BaseModel):
    # the scanner app sends camelCase
    ticket_code: str = Field(..., alias="ticketCode", min_length=1)

    class Config:
        populate_by_name = True


class TicketVerification(BaseModel):
    valid: bool
    registration: RegistrationWithUser
    event: EventSummary
    already_checked_in: bool
    checked_in_at: Optional[datetime] = None


class CheckInResult(BaseModel):
    success: bool
    message: str
    registration: RegistrationWithUser


class AttendanceStats(BaseModel):
    total_registrations: int
    checked_in: int
    pending: int
    attendance_rate: float
