"""Transactions API: query surface for payment transactions."""

from datetime import tzinfo
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy.orm import Session

from ..database.transaction_repo import (
    find_transaction_by_id,
    insert_transaction,
    query_transactions,
)
from ..records.models import CreateTransactionInput, Transaction, TransactionSearchInput
from ..utils.logging import get_logger
from ..utils.time import from_storage_utc, local_midnight

if TYPE_CHECKING:
    from ..database.schema import Transaction as TransactionRow

logger = get_logger(__name__)


def _row_to_transaction(row: "TransactionRow") -> Transaction:
    """Convert Transaction ORM row to the Transaction record."""
    return Transaction(
        id=row.id,
        patient_id=row.patient_id,
        total_amount=Decimal(row.total_amount),
        payment_method=row.payment_method,
        payment_status=row.payment_status,
        notes=row.notes,
        created_at=from_storage_utc(row.created_at),
        updated_at=from_storage_utc(row.updated_at),
    )


def list_transactions(
    session: Session,
    search: Optional[TransactionSearchInput] = None,
) -> List[Transaction]:
    """
    List transactions with optional filters.

    Args:
        session: SQLAlchemy session
        search: Optional filters (patient_id, payment_status, start_date,
            end_date) plus limit/offset - if None, every transaction

    Returns:
        List of Transaction records, newest first
    """
    search = search or TransactionSearchInput()
    try:
        rows = query_transactions(
            session,
            patient_id=search.patient_id,
            payment_status=search.payment_status,
            start_date=search.start_date,
            end_date=search.end_date,
            limit=search.limit,
            offset=search.offset,
        )
        transactions = [_row_to_transaction(row) for row in rows]
    except Exception as e:
        logger.error(f"Failed to get transactions: {e}", exc_info=True)
        raise

    logger.debug(f"Fetched {len(transactions)} transactions")
    return transactions


def get_transaction_by_id(session: Session, transaction_id: int) -> Optional[Transaction]:
    """Get a single transaction, or None if not found."""
    try:
        row = find_transaction_by_id(session, transaction_id)
        if row is None:
            return None
        return _row_to_transaction(row)
    except Exception as e:
        logger.error(f"Failed to get transaction by ID: {e}", exc_info=True)
        raise


def list_today_transactions(session: Session, tz: Optional[tzinfo] = None) -> List[Transaction]:
    """
    Transactions created since local midnight, newest first.

    Args:
        session: SQLAlchemy session
        tz: Clinic time zone defining "today"; None uses the server's zone
    """
    return list_transactions(session, TransactionSearchInput(start_date=local_midnight(tz)))


def list_pending_transactions(session: Session) -> List[Transaction]:
    """Transactions still awaiting payment, newest first."""
    return list_transactions(session, TransactionSearchInput(payment_status="pending"))


def create_transaction(session: Session, data: CreateTransactionInput) -> Transaction:
    """Persist a new transaction and return it with its stored values."""
    try:
        row = insert_transaction(
            session,
            patient_id=data.patient_id,
            total_amount=data.total_amount,
            payment_method=data.payment_method,
            payment_status=data.payment_status,
            notes=data.notes,
        )
        session.commit()
        session.refresh(row)
        transaction = _row_to_transaction(row)
    except Exception as e:
        session.rollback()
        logger.error(f"Transaction creation failed: {e}", exc_info=True)
        raise

    logger.debug(f"Created transaction {transaction.id} for patient {transaction.patient_id}")
    return transaction
