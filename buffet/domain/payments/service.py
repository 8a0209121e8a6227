"""Payment service - Business logic for event payments and their ledger entries"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Payment, utcnow
from ...shared.pagination import PageParams, PaginationMeta, paginate
from ...shared.validators import to_utc_naive
from ..cash_flow.repository import CashFlowRepository
from . import analytics
from .repository import PaymentRepository
from .schemas import PaymentCreate, PaymentUpdate

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "eventId": "event_id",
    "amount": "amount",
    "paymentMethod": "payment_method",
    "status": "status",
    "dueDate": "due_date",
    "paymentDate": "payment_date",
    "notes": "notes",
}

REQUIRED_FIELDS = {"eventId", "amount", "paymentMethod", "status"}
DATE_FIELDS = {"dueDate", "paymentDate"}


def income_description(event_title: Optional[str]) -> str:
    return f"Payment received - {event_title or 'Event'}"


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()
        self.cash_flow = CashFlowRepository()

    def list_payments(
        self,
        page: PageParams,
        search: Optional[str] = None,
        status: Optional[str] = None,
        payment_method: Optional[str] = None,
        event_id: Optional[str] = None,
        due_date_from: Optional[datetime] = None,
        due_date_to: Optional[datetime] = None,
        sort_by: str = "dueDate",
        sort_order: str = "asc",
    ) -> tuple[list[Payment], PaginationMeta]:
        query = self.repo.search_query(
            self.db,
            search=search,
            status=status,
            payment_method=payment_method,
            event_id=event_id,
            due_date_from=to_utc_naive(due_date_from),
            due_date_to=to_utc_naive(due_date_to),
            sort_by=sort_by,
            sort_order=sort_order,
        )
        payments, pagination = paginate(query, page)
        logger.info(
            f"Listed payments: {len(payments)} of {pagination.total} total "
            f"(page: {page.page}, limit: {page.limit}, filters: status={status or 'all'}, "
            f"method={payment_method or 'all'})"
        )
        return payments, pagination

    def get_payment(self, payment_id: str) -> Payment:
        payment = self.repo.get_payment_by_id(self.db, payment_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        return payment

    def create_payment(self, data: PaymentCreate) -> Payment:
        event = self.repo.get_event(self.db, data.eventId)
        if not event:
            raise HTTPException(status_code=400, detail="Event not found")

        values = {FIELD_MAP[k]: v for k, v in data.model_dump().items()}
        values["due_date"] = to_utc_naive(data.dueDate)
        values["payment_date"] = to_utc_naive(data.paymentDate)

        try:
            payment = self.repo.add_payment(self.db, **values)
            if payment.status == "paid" and payment.payment_date:
                self.cash_flow.add_payment_income(
                    self.db,
                    payment.id,
                    payment.amount,
                    income_description(event.title),
                    payment.payment_date,
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"✅ Created payment for event: {event.title} "
            f"(paymentId: {payment.id}, amount: {payment.amount}, status: {payment.status})"
        )
        return self.get_payment(payment.id)

    def update_payment(self, payment_id: str, data: PaymentUpdate) -> Payment:
        payment = self.get_payment(payment_id)
        changes = data.model_dump(exclude_unset=True)

        nulled = [k for k in changes if k in REQUIRED_FIELDS and changes[k] is None]
        if nulled:
            raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulled)}")

        if "eventId" in changes and not self.repo.get_event(self.db, changes["eventId"]):
            raise HTTPException(status_code=400, detail="Event not found")

        for field in DATE_FIELDS & changes.keys():
            changes[field] = to_utc_naive(changes[field])

        marked_paid = payment.status != "paid" and changes.get("status") == "paid"

        try:
            for key, value in changes.items():
                setattr(payment, FIELD_MAP[key], value)

            if marked_paid and changes.get("paymentDate"):
                self.db.flush()
                event = self.repo.get_event(self.db, payment.event_id)
                self.cash_flow.add_payment_income(
                    self.db,
                    payment.id,
                    payment.amount,
                    income_description(event.title if event else None),
                    changes["paymentDate"],
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"✏️ Updated payment (paymentId: {payment_id}, changes: {', '.join(changes)}, "
            f"statusChange: {'marked as paid' if marked_paid else 'no status change'})"
        )
        return self.get_payment(payment_id)

    def delete_payment(self, payment_id: str) -> None:
        payment = self.get_payment(payment_id)

        try:
            removed = self.cash_flow.delete_for_payment(self.db, payment.id)
            self.db.delete(payment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"🗑️ Deleted payment {payment_id} and {removed} cash flow entries")

    def get_event_payments(self, event_id: str) -> tuple[list[Payment], dict]:
        if not self.repo.get_event(self.db, event_id):
            raise HTTPException(status_code=404, detail="Event not found")

        payments = self.repo.get_event_payments(self.db, event_id)
        logger.info(f"Retrieved {len(payments)} payments for event {event_id}")
        return payments, analytics.event_totals(payments)

    def get_summary(self, period: int) -> dict:
        """Totals per status and per method for payments created in the last `period` days"""
        now = utcnow()
        payments = self.repo.get_payments_for_analytics(
            self.db, created_from=now - timedelta(days=period)
        )
        paid = [p for p in payments if p.status == "paid"]
        overdue = self.repo.get_overdue_payments(self.db, now)

        logger.info(f"Retrieved payment analytics for {period} days")
        return {
            "period": f"{period} days",
            "totalPayments": len(payments),
            "paymentsByStatus": analytics.distribution(payments, lambda p: p.status),
            "paymentsByMethod": analytics.distribution(paid, lambda p: p.payment_method),
            "overduePayments": {
                "count": len(overdue),
                "totalAmount": round(sum(float(p.amount) for p in overdue), 2),
            },
        }

    def get_detailed_analytics(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> dict:
        if client_id == "all":
            client_id = None

        payments = self.repo.get_payments_for_analytics(
            self.db,
            created_from=to_utc_naive(date_from),
            created_to=to_utc_naive(date_to),
            client_id=client_id,
            status=status,
            payment_method=payment_method,
        )

        logger.info(
            f"Retrieved detailed payment analytics: {len(payments)} records "
            f"(client={client_id or 'all'}, status={status or 'all'}, method={payment_method or 'all'})"
        )
        return {
            "summary": analytics.detailed_summary(payments),
            "distributions": {
                "byStatus": analytics.distribution(payments, lambda p: p.status),
                "byMethod": analytics.distribution(payments, lambda p: p.payment_method),
            },
            "topClients": analytics.top_clients(payments),
            "monthlyBreakdown": analytics.monthly_breakdown(payments),
            "filters": {
                "dateFrom": date_from.isoformat() if date_from else None,
                "dateTo": date_to.isoformat() if date_to else None,
                "clientId": client_id,
                "status": status,
                "paymentMethod": payment_method,
                "recordCount": len(payments),
            },
        }
