# eventnest/models/event.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from eventnest.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False, index=True)
    location = Column(String(200), nullable=True)
    category = Column(String(50), nullable=True, index=True)
    image_url = Column(String(500), nullable=True)
    organizer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    organizer = relationship("User", back_populates="organized_events")
    # Deleting an event removes its registrations and certificates
    registrations = relationship("Registration", back_populates="event", cascade="all, delete-orphan")
    certificates = relationship("Certificate", back_populates="event", cascade="all, delete-orphan")

    @property
    def organizer_name(self):
        return self.organizer.name if self.organizer else None

    @property
    def registration_count(self):
        return len(self.registrations)
