from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from igreja.database import get_db
from igreja.dependencies import require_module
from igreja.models.financial_transaction import TransactionType
from igreja.models.role import Module
from igreja.models.tenant_context import TenantContext
from igreja.schemas.finance_schemas import (
    FinancialSummary,
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
)
from igreja.services.finance_service import FinanceService

router = APIRouter()

finance_context = require_module(Module.FINANCIAL)


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    context: TenantContext = Depends(finance_context),
    db: Session = Depends(get_db),
):
    """
    Record income or expense.

    - **amount** must be positive; **type** gives the direction
    - **member_id** optional, must belong to the church
    """
    return FinanceService(db).create_transaction(transaction_data, context)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    type: Optional[TransactionType] = None,
    category: Optional[str] = None,
    member_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(finance_context),
    db: Session = Depends(get_db),
):
    """List transactions with optional filters, newest first"""
    transactions, total = FinanceService(db).list_transactions(
        context, type, category, member_id, start_date, end_date, limit, offset
    )
    return {"transactions": transactions, "total": total}


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    context: TenantContext = Depends(finance_context),
    db: Session = Depends(get_db),
):
    FinanceService(db).delete_transaction(transaction_id, context)


@router.get("/summary", response_model=FinancialSummary)
async def get_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    context: TenantContext = Depends(finance_context),
    db: Session = Depends(get_db),
):
    """Totals, balance, per-category and per-month amounts"""
    return FinanceService(db).get_summary(context, start_date, end_date)
