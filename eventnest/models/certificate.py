# eventnest/models/certificate.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from eventnest.database import Base, utcnow


class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_certificate_user_event"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    # empty until the PDF has been rendered
    certificate_url = Column(String(500), nullable=False, default="")
    issued_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="certificates")
    event = relationship("Event", back_populates="certificates")
