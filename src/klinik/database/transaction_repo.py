"""Repository functions for transaction persistence and lookup."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ..utils.time import to_storage_utc
from .filters import apply_predicates, apply_window
from .schema import Transaction


def query_transactions(
    session: Session,
    patient_id: Optional[int] = None,
    payment_status: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Transaction]:
    """
    Query transactions matching every provided filter.

    Args:
        session: SQLAlchemy session
        patient_id: Exact patient match - if None, all patients
        payment_status: Exact status match - if None, all statuses
        start_date: created_at >= start_date - if None, no lower bound
        end_date: created_at <= end_date - if None, no upper bound
        limit: Maximum number of rows (None returns all)
        offset: Number of rows to skip after ordering

    Returns:
        List of Transaction rows, newest first (created_at DESC, id DESC)
    """
    conditions = []
    if patient_id is not None:
        conditions.append(Transaction.patient_id == patient_id)
    if payment_status is not None:
        conditions.append(Transaction.payment_status == payment_status)
    if start_date is not None:
        conditions.append(Transaction.created_at >= to_storage_utc(start_date))
    if end_date is not None:
        conditions.append(Transaction.created_at <= to_storage_utc(end_date))

    q = apply_predicates(session.query(Transaction), conditions)
    q = q.order_by(Transaction.created_at.desc(), Transaction.id.desc())
    return apply_window(q, limit=limit, offset=offset).all()


def find_transaction_by_id(session: Session, transaction_id: int) -> Optional[Transaction]:
    """Find transaction by ID, or None if not found."""
    return session.query(Transaction).filter(Transaction.id == transaction_id).first()


def insert_transaction(
    session: Session,
    *,
    patient_id: int,
    total_amount: Decimal,
    payment_method: str,
    payment_status: str = "pending",
    notes: str | None = None,
) -> Transaction:
    """
    Create a new transaction row (caller commits).

    total_amount is stored as its exact decimal text.
    """
    row = Transaction(
        patient_id=patient_id,
        total_amount=str(total_amount),
        payment_method=payment_method,
        payment_status=payment_status,
        notes=notes,
    )
    session.add(row)
    return row
