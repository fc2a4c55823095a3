from eventnest.models.user import Role, User
from eventnest.models.event import Event
from eventnest.models.registration import Registration
from eventnest.models.certificate import Certificate

__all__ = ["Role", "User", "Event", "Registration", "Certificate"]
