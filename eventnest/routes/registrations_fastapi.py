# eventnest/routes/registrations_fastapi.py
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from eventnest.auth import get_current_user, require
from eventnest.database import get_db
from eventnest.errors import Forbidden
from eventnest.models.user import User
from eventnest.policy import Action, can_manage_event
from eventnest.schemas.registration import RegistrationCreated, RegistrationWithEvent, TicketRead
from eventnest.services import Services, get_services

router = APIRouter(
    tags=["Registrations"],
)


@router.post("/events/{event_id}/register", response_model=RegistrationCreated, status_code=status.HTTP_201_CREATED)
def register_for_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.REGISTER_FOR_EVENT)),
    services: Services = Depends(get_services),
):
    registration = services.registrations.register(db, current_user, event_id, defer=background_tasks.add_task)
    return {"message": "Successfully registered!", "registration": registration}


@router.delete("/events/{event_id}/register")
def unregister_from_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.REGISTER_FOR_EVENT)),
    services: Services = Depends(get_services),
):
    services.registrations.unregister(db, current_user, event_id)
    return {"message": "Successfully unregistered from event"}


@router.get("/users/me/registrations", response_model=List[RegistrationWithEvent])
def read_my_registrations(
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.VIEW_OWN_REGISTRATIONS)),
    services: Services = Depends(get_services),
):
    return services.registrations.list_for_user(db, current_user.id)


@router.get("/registrations/{registration_id}/ticket", response_model=TicketRead)
def read_ticket(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    registration = services.registrations.get_registration(db, registration_id)
    if registration.user_id != current_user.id and not can_manage_event(current_user, registration.event):
        raise Forbidden("Not authorized to view this ticket")
    return registration
