# eventnest/routes/events_fastapi.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from eventnest.auth import ensure_can_manage, require
from eventnest.database import get_db, utcnow
from eventnest.errors import NotFound
from eventnest.models.event import Event
from eventnest.models.user import User
from eventnest.policy import Action
from eventnest.schemas.event import EventCreate, EventRead, EventUpdate, EventWithCount

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Events"],
)


def _get_event(db: Session, event_id: str) -> Event:
    db_event = db.query(Event).options(joinedload(Event.organizer)).filter(Event.id == event_id).first()
    if db_event is None:
        raise NotFound("Event not found")
    return db_event


@router.get("/events", response_model=List[EventRead])
def read_events(category: Optional[str] = None, search: Optional[str] = None, db: Session = Depends(get_db)):
    """Upcoming events, soonest first."""
    query = db.query(Event).options(joinedload(Event.organizer)).filter(Event.date >= utcnow())
    if category:
        query = query.filter(Event.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))
    return query.order_by(Event.date.asc()).all()


@router.get("/events/{event_id}", response_model=EventRead)
def read_event(event_id: str, db: Session = Depends(get_db)):
    return _get_event(db, event_id)


@router.post("/events", response_model=EventRead, status_code=status.HTTP_201_CREATED)
def create_event(
    event: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.MANAGE_EVENTS)),
):
    db_event = Event(**event.dict(), organizer_id=current_user.id)
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    logger.info("Event %s created by %s", db_event.id, current_user.id)
    return db_event


@router.put("/events/{event_id}", response_model=EventRead)
def update_event(
    event_id: str,
    event: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.MANAGE_EVENTS)),
):
    db_event = _get_event(db, event_id)
    ensure_can_manage(current_user, db_event)

    update_data = event.dict(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_event, key, value)

    db.commit()
    db.refresh(db_event)
    logger.info("Event %s updated", db_event.id)
    return db_event


@router.delete("/events/{event_id}")
def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.MANAGE_EVENTS)),
):
    db_event = _get_event(db, event_id)
    ensure_can_manage(current_user, db_event)

    # registrations and certificates go with it (cascade)
    db.delete(db_event)
    db.commit()
    logger.info("Event %s deleted by %s", event_id, current_user.id)
    return {"message": "Event deleted successfully"}


@router.get("/users/me/events", response_model=List[EventWithCount])
def read_my_events(db: Session = Depends(get_db), current_user: User = Depends(require(Action.MANAGE_EVENTS))):
    return (
        db.query(Event)
        .options(joinedload(Event.organizer), joinedload(Event.registrations))
        .filter(Event.organizer_id == current_user.id)
        .order_by(Event.date.desc())
        .all()
    )
