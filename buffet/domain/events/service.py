"""Event service - Business logic for bookings"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Event
from ...shared.pagination import PageParams, PaginationMeta, paginate
from ...shared.validators import time_to_minutes, to_utc_naive
from .repository import EventRepository
from .schemas import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

# API field name -> column attribute
FIELD_MAP = {
    "clientId": "client_id",
    "title": "title",
    "date": "date",
    "startTime": "start_time",
    "endTime": "end_time",
    "guestsCount": "guests_count",
    "packageType": "package_type",
    "totalValue": "total_value",
    "status": "status",
    "notes": "notes",
}

REQUIRED_FIELDS = set(FIELD_MAP) - {"notes"}


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventRepository()

    def list_events(
        self,
        page: PageParams,
        search: Optional[str] = None,
        status: Optional[str] = None,
        client_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        sort_by: str = "date",
        sort_order: str = "asc",
    ) -> tuple[list[Event], PaginationMeta]:
        query = self.repo.search_query(
            self.db,
            search=search,
            status=status,
            client_id=client_id,
            date_from=to_utc_naive(date_from),
            date_to=to_utc_naive(date_to),
            sort_by=sort_by,
            sort_order=sort_order,
        )
        events, pagination = paginate(query, page)
        logger.info(
            f"Listed events: {len(events)} of {pagination.total} total "
            f"(page: {page.page}, limit: {page.limit}, filters: status={status or 'all'}, "
            f"client={client_id or 'all'})"
        )
        return events, pagination

    def get_event(self, event_id: str) -> Event:
        event = self.repo.get_event_by_id(self.db, event_id)
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def _check_schedule(
        self,
        date: datetime,
        start_time: str,
        end_time: str,
        exclude_event_id: Optional[str] = None,
    ) -> None:
        if time_to_minutes(end_time) <= time_to_minutes(start_time):
            raise HTTPException(status_code=400, detail="End time must be after start time")

        conflicts = self.repo.find_time_conflicts(
            self.db, date, start_time, end_time, exclude_event_id
        )
        if conflicts:
            other = conflicts[0]
            logger.warning(
                f"⚠️ Time conflict on {date.date()} {start_time}-{end_time} with event {other.id}"
            )
            raise HTTPException(
                status_code=409,
                detail={
                    "error": "Time conflict with existing event",
                    "conflictingEvent": {
                        "id": other.id,
                        "title": other.title,
                        "startTime": other.start_time,
                        "endTime": other.end_time,
                    },
                },
            )

    def create_event(self, data: EventCreate) -> Event:
        logger.info(f"📥 Creating event: {data.title} for client {data.clientId}")

        if not self.repo.client_exists(self.db, data.clientId):
            raise HTTPException(status_code=400, detail="Client not found")

        event_date = to_utc_naive(data.date)
        self._check_schedule(event_date, data.startTime, data.endTime)

        values = {FIELD_MAP[k]: v for k, v in data.model_dump().items()}
        values["date"] = event_date
        event = self.repo.create_event(self.db, **values)

        logger.info(
            f"✅ Created event: {event.title} (eventId: {event.id}, clientId: {event.client_id})"
        )
        return self.get_event(event.id)

    def update_event(self, event_id: str, data: EventUpdate) -> Event:
        event = self.get_event(event_id)
        changes = data.model_dump(exclude_unset=True)

        nulled = [k for k in changes if k in REQUIRED_FIELDS and changes[k] is None]
        if nulled:
            raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulled)}")

        if "clientId" in changes and not self.repo.client_exists(self.db, changes["clientId"]):
            raise HTTPException(status_code=400, detail="Client not found")

        if "date" in changes:
            changes["date"] = to_utc_naive(changes["date"])

        if {"date", "startTime", "endTime"} & changes.keys():
            self._check_schedule(
                changes.get("date", event.date),
                changes.get("startTime", event.start_time),
                changes.get("endTime", event.end_time),
                exclude_event_id=event.id,
            )

        updates = {FIELD_MAP[k]: v for k, v in changes.items()}
        self.repo.update_event(self.db, event, **updates)
        logger.info(f"✏️ Updated event: {event.title} (eventId: {event_id}, changes: {', '.join(changes)})")
        return self.get_event(event_id)

    def delete_event(self, event_id: str) -> None:
        event = self.get_event(event_id)

        if event.payments:
            raise HTTPException(
                status_code=409,
                detail=f"Event has {len(event.payments)} payment(s); delete them first",
            )

        self.repo.delete_event(self.db, event)
        logger.info(f"🗑️ Deleted event: {event.title} (eventId: {event_id})")

    def get_calendar(self, year: int, month: int) -> list[Event]:
        if month < 1 or month > 12 or year < 1 or year > 9998:
            raise HTTPException(status_code=400, detail="Invalid year or month")

        start = datetime(year, month, 1)
        end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
        events = self.repo.get_month_events(self.db, start, end)
        logger.info(f"Retrieved calendar events for {year}-{month:02d}: {len(events)} events")
        return events
