# eventnest/schemas/event.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class EventBase(BaseModel):
    title: str = Field(..., max_length=200)
    description: Optional[str] = None
    date: datetime
    location: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=500)


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=500)


class EventRead(EventBase):
    id: str
    organizer_id: str
    organizer_name: Optional[str] = None

    class Config:
        from_attributes = True


class EventWithCount(EventRead):
    registration_count: int = 0


class EventSummary(BaseModel):
    id: str
    title: str
    date: datetime
    location: Optional[str] = None

    class Config:
        from_attributes = True
