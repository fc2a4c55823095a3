# eventnest/models/registration.py
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from eventnest.database import Base, utcnow


def new_ticket_code():
    return str(uuid.uuid4())


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_registration_user_event"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    ticket_code = Column(String(64), unique=True, index=True, nullable=False, default=new_ticket_code)
    # PNG data URL, null until generated (or if generation failed)
    qr_code = Column(Text, nullable=True)
    attended = Column(Boolean, nullable=False, default=False)
    checked_in_at = Column(DateTime, nullable=True)
    registered_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")
