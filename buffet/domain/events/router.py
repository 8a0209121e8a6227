"""Event router - FastAPI endpoints for bookings"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Event
from ...shared.pagination import PageParams, SortOrder, page_params
from ...shared.validators import as_utc
from ..clients.schemas import ClientSummary
from .schemas import (
    CalendarEvent,
    CalendarResponse,
    EventCreate,
    EventListResponse,
    EventResponse,
    EventSortField,
    EventStatus,
    EventUpdate,
)
from .service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["Events"], dependencies=[Depends(get_current_user)])


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Dependency injection for EventService"""
    return EventService(db)


def to_event_response(event: Event) -> EventResponse:
    client = event.client
    return EventResponse(
        id=event.id,
        clientId=event.client_id,
        title=event.title,
        date=as_utc(event.date),
        startTime=event.start_time,
        endTime=event.end_time,
        guestsCount=event.guests_count,
        packageType=event.package_type,
        totalValue=event.total_value,
        status=event.status,
        notes=event.notes,
        createdAt=as_utc(event.created_at),
        updatedAt=as_utc(event.updated_at),
        client=ClientSummary(
            id=client.id,
            name=client.name,
            phone=client.phone,
            email=client.email,
            address=client.address,
        )
        if client
        else None,
    )


@router.get("", response_model=EventListResponse)
async def list_events(
    page: PageParams = Depends(page_params),
    search: Optional[str] = Query(None),
    status: Optional[EventStatus] = Query(None),
    client_id: Optional[str] = Query(None, alias="clientId"),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    sort_by: EventSortField = Query("date", alias="sortBy"),
    sort_order: SortOrder = Query("asc", alias="sortOrder"),
    service: EventService = Depends(get_event_service),
):
    """List events with pagination, filters and the client summary"""
    events, pagination = service.list_events(
        page,
        search=search,
        status=status,
        client_id=client_id,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return EventListResponse(items=[to_event_response(e) for e in events], pagination=pagination)


@router.get("/calendar/{year}/{month}", response_model=CalendarResponse)
async def get_calendar(year: int, month: int, service: EventService = Depends(get_event_service)):
    """Events of one month for the calendar view"""
    events = service.get_calendar(year, month)
    return CalendarResponse(
        year=year,
        month=month,
        events=[
            CalendarEvent(
                id=e.id,
                title=e.title,
                date=as_utc(e.date),
                startTime=e.start_time,
                endTime=e.end_time,
                status=e.status,
                guestsCount=e.guests_count,
                packageType=e.package_type,
                totalValue=e.total_value,
                clientName=e.client.name if e.client else None,
            )
            for e in events
        ],
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    return to_event_response(service.get_event(event_id))


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(data: EventCreate, service: EventService = Depends(get_event_service)):
    return to_event_response(service.create_event(data))


@router.api_route("/{event_id}", methods=["PUT", "PATCH"], response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    service: EventService = Depends(get_event_service),
):
    return to_event_response(service.update_event(event_id, data))


@router.delete("/{event_id}", status_code=204)
async def delete_event(event_id: str, service: EventService = Depends(get_event_service)):
    service.delete_event(event_id)
