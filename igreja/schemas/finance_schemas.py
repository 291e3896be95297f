from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field
from igreja.models.financial_transaction import TransactionType


class TransactionCreate(BaseModel):
    """Schema for recording income or expense"""

    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    amount: float = Field(..., gt=0, description="Always positive; direction is given by type")
    transaction_date: date
    member_id: Optional[int] = Field(None, gt=0)


class TransactionResponse(BaseModel):
    """Schema for transaction response"""

    model_config = {"from_attributes": True}

    id: int
    church_id: int
    member_id: Optional[int]
    member_name: Optional[str]
    type: TransactionType
    category: str
    description: Optional[str]
    amount: float
    transaction_date: date
    created_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    """Schema for list of transactions"""

    transactions: list[TransactionResponse]
    total: int


class MonthlyTotals(BaseModel):
    month: str
    income: float
    expense: float


class FinancialSummary(BaseModel):
    """Totals, balance and breakdowns of a period"""

    total_income: float
    total_expense: float
    balance: float
    by_category: dict[str, float]
    monthly: list[MonthlyTotals]
