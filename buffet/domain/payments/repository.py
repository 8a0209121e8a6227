"""Payment repository - Database operations for payments"""

from datetime import datetime
from typing import Optional

from sqlalchemy import asc, desc, or_
from sqlalchemy.orm import Query, Session, contains_eager

from ...models import Client, Event, Payment

SORT_COLUMNS = {
    "dueDate": Payment.due_date,
    "paymentDate": Payment.payment_date,
    "amount": Payment.amount,
    "createdAt": Payment.created_at,
}


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def base_query(db: Session) -> Query:
        """Payments joined with their event and the event's client"""
        return (
            db.query(Payment)
            .outerjoin(Payment.event)
            .outerjoin(Event.client)
            .options(contains_eager(Payment.event).contains_eager(Event.client))
        )

    @classmethod
    def search_query(
        cls,
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        payment_method: Optional[str] = None,
        event_id: Optional[str] = None,
        due_date_from: Optional[datetime] = None,
        due_date_to: Optional[datetime] = None,
        sort_by: str = "dueDate",
        sort_order: str = "asc",
    ) -> Query:
        query = cls.base_query(db)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Event.title.ilike(search_term),
                    Client.name.ilike(search_term),
                    Payment.notes.ilike(search_term),
                )
            )

        if status:
            query = query.filter(Payment.status == status)

        if payment_method:
            query = query.filter(Payment.payment_method == payment_method)

        if event_id:
            query = query.filter(Payment.event_id == event_id)

        if due_date_from:
            query = query.filter(Payment.due_date >= due_date_from)

        if due_date_to:
            query = query.filter(Payment.due_date <= due_date_to)

        column = SORT_COLUMNS[sort_by]
        return query.order_by(asc(column) if sort_order == "asc" else desc(column), Payment.id)

    @classmethod
    def get_payment_by_id(cls, db: Session, payment_id: str) -> Optional[Payment]:
        return cls.base_query(db).filter(Payment.id == payment_id).first()

    @staticmethod
    def get_event(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def add_payment(db: Session, **payment_data) -> Payment:
        """Stage a new payment in the current transaction (flushes for the id)"""
        payment = Payment(**payment_data)
        db.add(payment)
        db.flush()
        return payment

    @staticmethod
    def get_event_payments(db: Session, event_id: str) -> list[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.event_id == event_id)
            .order_by(asc(Payment.due_date), Payment.id)
            .all()
        )

    @classmethod
    def get_payments_for_analytics(
        cls,
        db: Session,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> list[Payment]:
        query = cls.base_query(db)

        if created_from:
            query = query.filter(Payment.created_at >= created_from)
        if created_to:
            query = query.filter(Payment.created_at <= created_to)
        if client_id:
            query = query.filter(Event.client_id == client_id)
        if status:
            query = query.filter(Payment.status == status)
        if payment_method:
            query = query.filter(Payment.payment_method == payment_method)

        return query.all()

    @staticmethod
    def get_overdue_payments(db: Session, now: datetime) -> list[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.status == "overdue", Payment.due_date <= now)
            .all()
        )
