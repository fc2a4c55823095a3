# eventnest/schemas/certificate.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .event import EventSummary


class CertificateRead(BaseModel):
    id: str
    user_id: str
    event_id: str
    certificate_url: str
    issued_at: datetime
    event: EventSummary

    class Config:
        from_attributes = True


class CertificateGenerationResult(BaseModel):
    message: str
    generated: int
    failed: int
    total_eligible: int


class PublicCertificate(BaseModel):
    id: str
    recipient_name: str
    event_title: str
    event_date: datetime
    event_location: Optional[str] = None
    organizer: Optional[str] = None
    issued_at: datetime


class CertificateVerification(BaseModel):
    valid: bool
    certificate: Optional[PublicCertificate] = None
    message: Optional[str] = None
