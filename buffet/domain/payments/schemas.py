"""Payment domain schemas - Pydantic models for validation"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ...shared.pagination import PaginationMeta
from ..clients.schemas import ClientSummary
from ..events.schemas import EventSummary

PaymentMethod = Literal["cash", "card", "pix", "transfer"]
PaymentStatus = Literal["pending", "paid", "overdue"]
PaymentSortField = Literal["dueDate", "paymentDate", "amount", "createdAt"]


class PaymentCreate(BaseModel):
    """Schema for registering a payment (installment) of an event"""

    eventId: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    paymentMethod: PaymentMethod
    status: PaymentStatus = "pending"
    dueDate: Optional[datetime] = None
    paymentDate: Optional[datetime] = None
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    eventId: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    paymentMethod: Optional[PaymentMethod] = None
    status: Optional[PaymentStatus] = None
    dueDate: Optional[datetime] = None
    paymentDate: Optional[datetime] = None
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    id: str
    eventId: str
    amount: Decimal
    paymentDate: Optional[datetime] = None
    paymentMethod: str
    status: str
    dueDate: Optional[datetime] = None
    notes: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime
    event: Optional[EventSummary] = None
    client: Optional[ClientSummary] = None


class PaymentListResponse(BaseModel):
    items: list[PaymentResponse]
    pagination: PaginationMeta


class EventPaymentTotals(BaseModel):
    totalAmount: float
    paidAmount: float
    pendingAmount: float
    totalPayments: int
    paidPayments: int
    pendingPayments: int
    overduePayments: int


class EventPaymentsResponse(BaseModel):
    payments: list[PaymentResponse]
    summary: EventPaymentTotals
