"""Cash flow router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...shared.validators import as_utc
from .schemas import CashFlowEntryResponse, CashFlowResponse, CashFlowSummary, CashFlowType
from .service import CashFlowService

router = APIRouter(
    prefix="/api/cash-flow", tags=["Cash Flow"], dependencies=[Depends(get_current_user)]
)


def get_cash_flow_service(db: Session = Depends(get_db)) -> CashFlowService:
    return CashFlowService(db)


@router.get("", response_model=CashFlowResponse)
async def get_cash_flow(
    period: int = Query(30, ge=1, le=3650),
    entry_type: Optional[CashFlowType] = Query(None, alias="type"),
    service: CashFlowService = Depends(get_cash_flow_service),
):
    """Ledger entries of the last `period` days with income/expense totals"""
    entries, summary = service.get_cash_flow(period, entry_type)
    return CashFlowResponse(
        period=f"{period} days",
        entries=[
            CashFlowEntryResponse(
                id=e.id,
                type=e.type,
                amount=e.amount,
                description=e.description,
                referenceId=e.reference_id,
                referenceType=e.reference_type,
                transactionDate=as_utc(e.transaction_date),
                createdAt=as_utc(e.created_at),
            )
            for e in entries
        ],
        summary=CashFlowSummary(**summary),
    )
