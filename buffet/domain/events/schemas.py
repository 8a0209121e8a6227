"""Event domain schemas - Pydantic models for validation"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.pagination import PaginationMeta
from ...shared.validators import validate_time
from ..clients.schemas import ClientSummary

EventStatus = Literal["pending", "confirmed", "cancelled", "completed"]
EventSortField = Literal["date", "title", "createdAt", "totalValue"]


class EventCreate(BaseModel):
    """Schema for booking a new event"""

    clientId: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=100)
    date: datetime
    startTime: str
    endTime: str
    guestsCount: int = Field(ge=1)
    packageType: str = Field(min_length=1, max_length=50)
    totalValue: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    status: EventStatus = "pending"
    notes: Optional[str] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def check_time(cls, v):
        return validate_time(v)


class EventUpdate(BaseModel):
    """Schema for partially updating an event"""

    clientId: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[datetime] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    guestsCount: Optional[int] = Field(None, ge=1)
    packageType: Optional[str] = Field(None, min_length=1, max_length=50)
    totalValue: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: Optional[EventStatus] = None
    notes: Optional[str] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def check_time(cls, v):
        if v is None:
            return v
        return validate_time(v)


class EventResponse(BaseModel):
    id: str
    clientId: str
    title: str
    date: datetime
    startTime: str
    endTime: str
    guestsCount: int
    packageType: str
    totalValue: Decimal
    status: str
    notes: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime
    client: Optional[ClientSummary] = None


class EventSummary(BaseModel):
    """Denormalized event shown next to payments"""

    id: str
    title: str
    date: datetime
    totalValue: Decimal
    status: str
    guestsCount: Optional[int] = None


class EventListResponse(BaseModel):
    items: list[EventResponse]
    pagination: PaginationMeta


class CalendarEvent(BaseModel):
    id: str
    title: str
    date: datetime
    startTime: str
    endTime: str
    status: str
    guestsCount: int
    packageType: str
    totalValue: Decimal
    clientName: Optional[str] = None


class CalendarResponse(BaseModel):
    year: int
    month: int
    events: list[CalendarEvent]
