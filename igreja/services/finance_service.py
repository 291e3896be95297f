from collections import defaultdict
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from igreja.core.exceptions import NotFoundException
from igreja.models.financial_transaction import FinancialTransaction, TransactionType
from igreja.models.tenant_context import TenantContext
from igreja.repositories.member_repository import MemberRepository
from igreja.repositories.transaction_repository import TransactionRepository
from igreja.schemas.finance_schemas import TransactionCreate


class FinanceService:
    """Service layer for church income and expenses"""

    def __init__(self, db: Session):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.member_repo = MemberRepository(db)

    def create_transaction(
        self, transaction_data: TransactionCreate, context: TenantContext
    ) -> FinancialTransaction:
        """
        Record a transaction, optionally attributed to a member.

        Args:
            transaction_data: Transaction form
            context: Tenant context

        Returns:
            Created transaction

        Raises:
            NotFoundException: If member doesn't belong to the church
        """
        member_name = None
        if transaction_data.member_id is not None:
            member = self.member_repo.get_by_id_and_church(
                transaction_data.member_id, context.church.id
            )
            if not member:
                raise NotFoundException(f"Member {transaction_data.member_id} not found")
            member_name = member.full_name

        transaction = FinancialTransaction(
            church_id=context.church.id,
            member_id=transaction_data.member_id,
            member_name=member_name,
            type=transaction_data.type,
            category=transaction_data.category.strip(),
            description=transaction_data.description,
            amount=transaction_data.amount,
            transaction_date=transaction_data.transaction_date,
        )
        return self.transaction_repo.create(transaction)

    def list_transactions(
        self,
        context: TenantContext,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        member_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[FinancialTransaction], int]:
        return self.transaction_repo.get_with_filters(
            context.church.id, type, category, member_id, start_date, end_date, limit, offset
        )

    def delete_transaction(self, transaction_id: int, context: TenantContext) -> None:
        transaction = self.transaction_repo.get_by_id_and_church(transaction_id, context.church.id)
        if not transaction:
            raise NotFoundException(f"Transaction {transaction_id} not found")
        self.transaction_repo.delete(transaction)

    def get_summary(
        self,
        context: TenantContext,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        """
        Totals, balance, per-category and per-month amounts.

        Categories are signed: income adds, expense subtracts. Months are
        'YYYY-MM' in chronological order.
        """
        transactions, _ = self.transaction_repo.get_with_filters(
            context.church.id, start_date=start_date, end_date=end_date, limit=None
        )

        total_income = 0.0
        total_expense = 0.0
        by_category: dict[str, float] = defaultdict(float)
        monthly: dict[str, dict[str, float]] = defaultdict(lambda: {"income": 0.0, "expense": 0.0})

        for transaction in transactions:
            month = transaction.transaction_date.strftime("%Y-%m")
            amount = float(transaction.amount)
            if transaction.type == TransactionType.INCOME:
                total_income += amount
                by_category[transaction.category] += amount
                monthly[month]["income"] += amount
            else:
                total_expense += amount
                by_category[transaction.category] -= amount
                monthly[month]["expense"] += amount

        return {
            "total_income": round(total_income, 2),
            "total_expense": round(total_expense, 2),
            "balance": round(total_income - total_expense, 2),
            "by_category": {key: round(value, 2) for key, value in by_category.items()},
            "monthly": [
                {"month": month, "income": round(values["income"], 2), "expense": round(values["expense"], 2)}
                for month, values in sorted(monthly.items())
            ],
        }
