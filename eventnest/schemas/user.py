from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from eventnest.models.user import Role


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: Role

    class Config:
        from_attributes = True


class UserAdminRead(UserRead):
    created_at: Optional[datetime] = None


class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    role: Role


class Token(BaseModel):
    token: str
    user: UserRead
