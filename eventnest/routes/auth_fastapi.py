# eventnest/routes/auth_fastapi.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventnest import auth, database
from eventnest.models.user import Role, User
from eventnest.schemas import user as schemas_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)


def _token_response(request: Request, user: User):
    settings = request.app.state.settings
    token = auth.create_access_token(user, settings.jwt_secret, settings.access_token_expire_days)
    return {"token": token, "user": schemas_user.UserRead.from_orm(user)}


@router.post("/register", response_model=schemas_user.Token, status_code=status.HTTP_201_CREATED)
def register_user(data: schemas_user.UserCreate, request: Request, db: Session = Depends(database.get_db)):
    logger.info("User registration attempt for %s", data.email)
    if auth.get_user(db, email=data.email):
        logger.warning("Registration failed: email already in use (%s)", data.email)
        raise HTTPException(status_code=400, detail="Email already in use")

    user = User(
        name=data.name,
        email=data.email,
        password_hash=auth.get_password_hash(data.password),
        role=Role.STUDENT,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already in use")
    db.refresh(user)

    logger.info("User %s registered with role %s", user.id, user.role.value)
    return _token_response(request, user)


@router.post("/login", response_model=schemas_user.Token)
def login(data: schemas_user.UserLogin, request: Request, db: Session = Depends(database.get_db)):
    user = auth.get_user(db, email=data.email)
    if not user or not auth.verify_password(data.password, user.password_hash):
        logger.warning("Login failed for %s", data.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info("Login successful for user %s", user.id)
    return _token_response(request, user)


@router.get("/me", response_model=schemas_user.UserRead)
def read_users_me(current_user: User = Depends(auth.get_current_user)):
    """
    Returns the logged-in user as currently stored.
    """
    return current_user
