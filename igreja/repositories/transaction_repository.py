from datetime import date
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from igreja.models.financial_transaction import FinancialTransaction, TransactionType


class TransactionRepository:
    """Repository for FinancialTransaction data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, transaction: FinancialTransaction) -> FinancialTransaction:
        """Create a new transaction"""
        self.db.add(transaction)
        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def get_by_id_and_church(
        self, transaction_id: int, church_id: int
    ) -> Optional[FinancialTransaction]:
        """
        Get transaction by ID, ensuring it belongs to the church.

        Args:
            transaction_id: Transaction ID
            church_id: Church ID

        Returns:
            Transaction or None if not found or belongs to different church
        """
        return (
            self.db.query(FinancialTransaction)
            .filter(
                FinancialTransaction.id == transaction_id,
                FinancialTransaction.church_id == church_id,
            )
            .first()
        )

    def get_by_church(self, church_id: int) -> list[FinancialTransaction]:
        """All transactions of a church, newest first"""
        return (
            self.db.query(FinancialTransaction)
            .filter(FinancialTransaction.church_id == church_id)
            .order_by(FinancialTransaction.transaction_date.desc(), FinancialTransaction.id.desc())
            .all()
        )

    def get_with_filters(
        self,
        church_id: int,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        member_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 100,
        offset: int = 0,
    ) -> tuple[list[FinancialTransaction], int]:
        """
        Get transactions with filters, ensuring multi-tenant isolation.

        Args:
            church_id: Church ID for isolation
            type: Optional income/expense filter
            category: Optional category filter
            member_id: Optional member filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            limit: Maximum number of results (None for all)
            offset: Pagination offset

        Returns:
            Tuple of (transactions list, total count)
        """
        query = self.db.query(FinancialTransaction).filter(
            FinancialTransaction.church_id == church_id
        )

        if type is not None:
            query = query.filter(FinancialTransaction.type == type)

        if category is not None:
            query = query.filter(FinancialTransaction.category == category)

        if member_id is not None:
            query = query.filter(FinancialTransaction.member_id == member_id)

        if start_date is not None:
            query = query.filter(FinancialTransaction.transaction_date >= start_date)

        if end_date is not None:
            query = query.filter(FinancialTransaction.transaction_date <= end_date)

        # Get total count before pagination
        total = query.count()

        transactions = (
            query.order_by(FinancialTransaction.transaction_date.desc(), FinancialTransaction.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

        return transactions, total

    def sum_by_type(
        self,
        church_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[TransactionType, float]:
        """Total amount per transaction type"""
        query = self.db.query(
            FinancialTransaction.type, func.sum(FinancialTransaction.amount)
        ).filter(FinancialTransaction.church_id == church_id)
        if start_date is not None:
            query = query.filter(FinancialTransaction.transaction_date >= start_date)
        if end_date is not None:
            query = query.filter(FinancialTransaction.transaction_date <= end_date)
        totals = {kind: 0.0 for kind in TransactionType}
        for kind, total in query.group_by(FinancialTransaction.type).all():
            totals[kind] = float(total or 0)
        return totals

    def delete(self, transaction: FinancialTransaction) -> None:
        """Delete a transaction"""
        self.db.delete(transaction)
        self.db.commit()
