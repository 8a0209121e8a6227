"""Payment router - FastAPI endpoints for payments and payment analytics"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Payment
from ...shared.pagination import PageParams, SortOrder, page_params
from ...shared.validators import as_utc
from ..clients.schemas import ClientSummary
from ..events.schemas import EventSummary
from .schemas import (
    EventPaymentsResponse,
    EventPaymentTotals,
    PaymentCreate,
    PaymentListResponse,
    PaymentMethod,
    PaymentResponse,
    PaymentSortField,
    PaymentStatus,
    PaymentUpdate,
)
from .service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/payments", tags=["Payments"], dependencies=[Depends(get_current_user)]
)


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


def to_payment_response(payment: Payment, with_relations: bool = True) -> PaymentResponse:
    event = payment.event if with_relations else None
    client = event.client if event else None
    return PaymentResponse(
        id=payment.id,
        eventId=payment.event_id,
        amount=payment.amount,
        paymentDate=as_utc(payment.payment_date),
        paymentMethod=payment.payment_method,
        status=payment.status,
        dueDate=as_utc(payment.due_date),
        notes=payment.notes,
        createdAt=as_utc(payment.created_at),
        updatedAt=as_utc(payment.updated_at),
        event=EventSummary(
            id=event.id,
            title=event.title,
            date=as_utc(event.date),
            totalValue=event.total_value,
            status=event.status,
        )
        if event
        else None,
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


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    page: PageParams = Depends(page_params),
    search: Optional[str] = Query(None),
    status: Optional[PaymentStatus] = Query(None),
    payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod"),
    event_id: Optional[str] = Query(None, alias="eventId"),
    due_date_from: Optional[datetime] = Query(None, alias="dueDateFrom"),
    due_date_to: Optional[datetime] = Query(None, alias="dueDateTo"),
    sort_by: PaymentSortField = Query("dueDate", alias="sortBy"),
    sort_order: SortOrder = Query("asc", alias="sortOrder"),
    service: PaymentService = Depends(get_payment_service),
):
    """List payments with their event and client"""
    payments, pagination = service.list_payments(
        page,
        search=search,
        status=status,
        payment_method=payment_method,
        event_id=event_id,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return PaymentListResponse(
        items=[to_payment_response(p) for p in payments], pagination=pagination
    )


@router.get("/event/{event_id}", response_model=EventPaymentsResponse)
async def get_event_payments(event_id: str, service: PaymentService = Depends(get_payment_service)):
    """All payments of one event plus paid/pending totals"""
    payments, totals = service.get_event_payments(event_id)
    return EventPaymentsResponse(
        payments=[to_payment_response(p, with_relations=False) for p in payments],
        summary=EventPaymentTotals(**totals),
    )


@router.get("/analytics/summary")
async def get_payment_summary(
    period: int = Query(30, ge=1, le=3650),
    service: PaymentService = Depends(get_payment_service),
):
    return service.get_summary(period)


@router.get("/analytics/detailed")
async def get_detailed_analytics(
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    client_id: Optional[str] = Query(None, alias="clientId"),
    status: Optional[PaymentStatus] = Query(None),
    payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod"),
    service: PaymentService = Depends(get_payment_service),
):
    """Distributions, top clients and monthly breakdown for the analytics dashboard"""
    return service.get_detailed_analytics(
        date_from=date_from,
        date_to=date_to,
        client_id=client_id,
        status=status,
        payment_method=payment_method,
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: str, service: PaymentService = Depends(get_payment_service)):
    return to_payment_response(service.get_payment(payment_id))


@router.post("", response_model=PaymentResponse, status_code=201)
async def create_payment(data: PaymentCreate, service: PaymentService = Depends(get_payment_service)):
    return to_payment_response(service.create_payment(data))


@router.api_route("/{payment_id}", methods=["PUT", "PATCH"], response_model=PaymentResponse)
async def update_payment(
    payment_id: str,
    data: PaymentUpdate,
    service: PaymentService = Depends(get_payment_service),
):
    return to_payment_response(service.update_payment(payment_id, data))


@router.delete("/{payment_id}", status_code=204)
async def delete_payment(payment_id: str, service: PaymentService = Depends(get_payment_service)):
    service.delete_payment(payment_id)
