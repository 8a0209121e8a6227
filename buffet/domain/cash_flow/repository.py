"""Cash flow repository - ledger of income/expense transactions.

The add/delete helpers do not commit: they run inside the caller's
transaction so a payment and its ledger entry are written together.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import asc
from sqlalchemy.orm import Session

from ...models import CashFlowEntry


class CashFlowRepository:
    """Repository for cash flow database operations"""

    @staticmethod
    def add_payment_income(
        db: Session,
        payment_id: str,
        amount: Decimal,
        description: str,
        transaction_date: datetime,
    ) -> CashFlowEntry:
        entry = CashFlowEntry(
            type="income",
            amount=amount,
            description=description[:200],
            reference_id=payment_id,
            reference_type="payment",
            transaction_date=transaction_date,
        )
        db.add(entry)
        return entry

    @staticmethod
    def delete_for_payment(db: Session, payment_id: str) -> int:
        return (
            db.query(CashFlowEntry)
            .filter(
                CashFlowEntry.reference_id == payment_id,
                CashFlowEntry.reference_type == "payment",
            )
            .delete(synchronize_session=False)
        )

    @staticmethod
    def get_entries(
        db: Session,
        since: Optional[datetime] = None,
        entry_type: Optional[str] = None,
    ) -> list[CashFlowEntry]:
        query = db.query(CashFlowEntry)
        if since:
            query = query.filter(CashFlowEntry.transaction_date >= since)
        if entry_type:
            query = query.filter(CashFlowEntry.type == entry_type)
        return query.order_by(asc(CashFlowEntry.transaction_date), CashFlowEntry.id).all()
