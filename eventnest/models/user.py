# eventnest/models/user.py
import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.orm import relationship

from eventnest.database import Base, utcnow


class Role(str, enum.Enum):
    STUDENT = "STUDENT"
    ORGANIZER = "ORGANIZER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.STUDENT)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # no cascade: users are never deleted by the lifecycle
    organized_events = relationship("Event", back_populates="organizer")
    registrations = relationship("Registration", back_populates="user")
    certificates = relationship("Certificate", back_populates="user")
