"""Cash flow schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel

CashFlowType = Literal["income", "expense"]


class CashFlowEntryResponse(BaseModel):
    id: str
    type: str
    amount: Decimal
    description: str
    referenceId: Optional[str] = None
    referenceType: Optional[str] = None
    transactionDate: datetime
    createdAt: datetime


class DailyTotals(BaseModel):
    date: str  # YYYY-MM-DD
    income: float
    expenses: float
    net: float


class CashFlowSummary(BaseModel):
    totalIncome: float
    totalExpenses: float
    netCashFlow: float
    chartData: list[DailyTotals]


class CashFlowResponse(BaseModel):
    period: str
    entries: list[CashFlowEntryResponse]
    summary: CashFlowSummary
