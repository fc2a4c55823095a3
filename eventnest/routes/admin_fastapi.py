# eventnest/routes/admin_fastapi.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from eventnest import database
from eventnest.auth import require
from eventnest.errors import NotFound
from eventnest.models.event import Event
from eventnest.models.user import User
from eventnest.policy import Action
from eventnest.schemas import event as schemas_event
from eventnest.schemas import user as schemas_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require(Action.ADMINISTER))]
)


@router.get("/users", response_model=List[schemas_user.UserAdminRead])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(database.get_db)):
    return db.query(User).order_by(User.created_at.desc()).offset(skip).limit(limit).all()


@router.put("/users/{user_id}/role", response_model=schemas_user.UserRead)
def update_user_role(user_id: str, data: schemas_user.RoleUpdate, db: Session = Depends(database.get_db)):
    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise NotFound("User not found")

    db_user.role = data.role
    db.commit()
    db.refresh(db_user)
    logger.info("Role of user %s set to %s", db_user.id, db_user.role.value)
    return db_user


@router.get("/events", response_model=List[schemas_event.EventRead])
def read_all_events(db: Session = Depends(database.get_db)):
    return db.query(Event).options(joinedload(Event.organizer)).order_by(Event.date.desc()).all()
