"""Cash flow service - period summaries over the income/expense ledger"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import CashFlowEntry, utcnow
from .repository import CashFlowRepository

logger = logging.getLogger(__name__)


def summarize(entries: list[CashFlowEntry]) -> dict:
    """Totals plus one chart point per day that has transactions"""
    days: dict = {}
    total_income = 0.0
    total_expenses = 0.0

    for entry in entries:
        amount = float(entry.amount)
        day = days.setdefault(
            entry.transaction_date.strftime("%Y-%m-%d"), {"income": 0.0, "expenses": 0.0}
        )
        if entry.type == "income":
            total_income += amount
            day["income"] += amount
        else:
            total_expenses += amount
            day["expenses"] += amount

    return {
        "totalIncome": round(total_income, 2),
        "totalExpenses": round(total_expenses, 2),
        "netCashFlow": round(total_income - total_expenses, 2),
        "chartData": [
            {
                "date": date,
                "income": round(day["income"], 2),
                "expenses": round(day["expenses"], 2),
                "net": round(day["income"] - day["expenses"], 2),
            }
            for date, day in sorted(days.items())
        ],
    }


class CashFlowService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CashFlowRepository()

    def get_cash_flow(self, period: int, entry_type: Optional[str] = None) -> tuple[list[CashFlowEntry], dict]:
        since = utcnow() - timedelta(days=period)
        entries = self.repo.get_entries(self.db, since=since, entry_type=entry_type)
        logger.info(
            f"Retrieved cash flow for {period} days: {len(entries)} entries (type={entry_type or 'all'})"
        )
        return entries, summarize(entries)
