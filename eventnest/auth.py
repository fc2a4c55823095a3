# eventnest/auth.py
import logging
from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from eventnest import database
from eventnest.errors import Forbidden, InvalidToken, NotFound, Unauthorized
from eventnest.models.user import User
from eventnest.policy import Action, can_manage_event, is_allowed

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
# auto_error=False: a missing token is reported as 401 by get_current_user
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def user_claims(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email, "role": _role_value(user.role)}


def create_access_token(user: User, secret: str, expire_days: int = 7) -> str:
    to_encode = user_claims(user)
    to_encode["sub"] = user.id
    to_encode["exp"] = database.utcnow() + timedelta(days=expire_days)
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> dict:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidToken() from e
    if not payload.get("sub"):
        raise InvalidToken()
    return payload


def get_user(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def _role_value(role):
    return role.value if hasattr(role, "value") else role


# --- authentication / authorization dependencies ---

async def get_token_claims(request: Request, token: str = Depends(oauth2_scheme)) -> dict:
    if not token:
        logger.warning("Authentication failed: no token provided (ip=%s)", request.client.host if request.client else None)
        raise Unauthorized()
    try:
        return decode_access_token(token, request.app.state.settings.jwt_secret)
    except InvalidToken:
        logger.warning("Authentication failed: invalid token")
        raise


def get_current_user(
    request: Request,
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(database.get_db),
) -> User:
    user = db.query(User).filter(User.id == claims["sub"]).first()
    if user is None:
        logger.error("Token refers to a non-existent user (id=%s)", claims["sub"])
        raise NotFound("User not found")
    request.state.user = user
    return user


def require(action: Action):
    """Dependency factory: the current user, provided their role allows ``action``."""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, action):
            logger.warning(
                "Authorization failed: role %s may not %s (user=%s)",
                _role_value(current_user.role),
                action.value,
                current_user.id,
            )
            raise Forbidden("Access forbidden: insufficient role")
        return current_user

    return checker


def ensure_can_manage(user: User, event) -> None:
    if not can_manage_event(user, event):
        logger.warning("Permission denied: user %s does not manage event %s", user.id, event.id)
        raise Forbidden("Permission denied")
