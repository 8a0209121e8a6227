"""Event repository - Database operations for events"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, asc, desc, or_
from sqlalchemy.orm import Query, Session, joinedload

from ...models import Client, Event

SORT_COLUMNS = {
    "date": Event.date,
    "title": Event.title,
    "createdAt": Event.created_at,
    "totalValue": Event.total_value,
}


class EventRepository:
    """Repository for event database operations"""

    @staticmethod
    def search_query(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        client_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        sort_by: str = "date",
        sort_order: str = "asc",
    ) -> Query:
        """Build the filtered, sorted event query used by the list endpoint"""
        query = db.query(Event).options(joinedload(Event.client))

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Event.title.ilike(search_term),
                    Event.package_type.ilike(search_term),
                    Event.notes.ilike(search_term),
                )
            )

        if status:
            query = query.filter(Event.status == status)

        if client_id:
            query = query.filter(Event.client_id == client_id)

        if date_from:
            query = query.filter(Event.date >= date_from)

        if date_to:
            query = query.filter(Event.date <= date_to)

        column = SORT_COLUMNS[sort_by]
        return query.order_by(asc(column) if sort_order == "asc" else desc(column), Event.id)

    @staticmethod
    def get_event_by_id(db: Session, event_id: str) -> Optional[Event]:
        return (
            db.query(Event)
            .options(joinedload(Event.client))
            .filter(Event.id == event_id)
            .first()
        )

    @staticmethod
    def client_exists(db: Session, client_id: str) -> bool:
        return db.query(Client.id).filter(Client.id == client_id).first() is not None

    @staticmethod
    def find_time_conflicts(
        db: Session,
        date: datetime,
        start_time: str,
        end_time: str,
        exclude_event_id: Optional[str] = None,
    ) -> list[Event]:
        """Events on the same date whose time range touches or overlaps [start, end].

        Times are zero-padded HH:MM strings, so string comparison is chronological.
        """
        query = db.query(Event).filter(
            Event.date == date,
            or_(
                and_(Event.start_time <= start_time, Event.end_time >= start_time),
                and_(Event.start_time <= end_time, Event.end_time >= end_time),
                and_(Event.start_time >= start_time, Event.end_time <= end_time),
            ),
        )
        if exclude_event_id:
            query = query.filter(Event.id != exclude_event_id)
        return query.all()

    @staticmethod
    def get_month_events(db: Session, start: datetime, end: datetime) -> list[Event]:
        """Events with start <= date < end, in calendar order"""
        return (
            db.query(Event)
            .options(joinedload(Event.client))
            .filter(Event.date >= start, Event.date < end)
            .order_by(asc(Event.date), asc(Event.start_time))
            .all()
        )

    @staticmethod
    def create_event(db: Session, **event_data) -> Event:
        event = Event(**event_data)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_event(db: Session, event: Event, **updates) -> Event:
        for key, value in updates.items():
            if hasattr(event, key):
                setattr(event, key, value)

        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(db: Session, event: Event) -> None:
        db.delete(event)
        db.commit()
