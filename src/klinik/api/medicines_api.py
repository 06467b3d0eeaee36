"""Medicines API: inventory queries for the pharmacy."""

from datetime import tzinfo
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy.orm import Session

from ..database.medicine_repo import (
    find_medicine_by_id,
    insert_medicine,
    query_expired_medicines,
    query_low_stock_medicines,
    query_medicines,
)
from ..records.models import CreateMedicineInput, Medicine, MedicineSearchInput
from ..utils.logging import get_logger
from ..utils.time import from_storage_utc, local_today, parse_date_string

if TYPE_CHECKING:
    from ..database.schema import Medicine as MedicineRow

logger = get_logger(__name__)


def _row_to_medicine(row: "MedicineRow") -> Medicine:
    """Convert Medicine ORM row, parsing price and expiry text columns."""
    return Medicine(
        id=row.id,
        name=row.name,
        description=row.description,
        unit=row.unit,
        stock_quantity=row.stock_quantity,
        minimum_stock=row.minimum_stock,
        price_per_unit=Decimal(row.price_per_unit),
        expiry_date=parse_date_string(row.expiry_date),
        created_at=from_storage_utc(row.created_at),
        updated_at=from_storage_utc(row.updated_at),
    )


def list_medicines(
    session: Session,
    search: Optional[MedicineSearchInput] = None,
    tz: Optional[tzinfo] = None,
) -> List[Medicine]:
    """
    List medicines with optional filters.

    Args:
        session: SQLAlchemy session
        search: Optional filters (query, low_stock_only, expired_only) plus
            limit/offset - if None, every medicine
        tz: Clinic time zone for the expired cut-off; None uses the server's zone

    Returns:
        List of Medicine records ordered by name
    """
    search = search or MedicineSearchInput()
    try:
        rows = query_medicines(
            session,
            name_query=search.query,
            low_stock_only=search.low_stock_only,
            expired_only=search.expired_only,
            today=local_today(tz),
            limit=search.limit,
            offset=search.offset,
        )
        return [_row_to_medicine(row) for row in rows]
    except Exception as e:
        logger.error(f"Failed to get medicines: {e}", exc_info=True)
        raise


def get_medicine_by_id(session: Session, medicine_id: int) -> Optional[Medicine]:
    """Get a single medicine, or None if not found."""
    try:
        row = find_medicine_by_id(session, medicine_id)
        if row is None:
            return None
        return _row_to_medicine(row)
    except Exception as e:
        logger.error(f"Failed to get medicine by ID: {e}", exc_info=True)
        raise


def list_low_stock_medicines(session: Session) -> List[Medicine]:
    """Medicines at or below their minimum stock."""
    try:
        medicines = [_row_to_medicine(row) for row in query_low_stock_medicines(session)]
    except Exception as e:
        logger.error(f"Failed to get low stock medicines: {e}", exc_info=True)
        raise

    if medicines:
        logger.info(f"{len(medicines)} medicines at or below minimum stock")
    return medicines


def list_expired_medicines(session: Session, tz: Optional[tzinfo] = None) -> List[Medicine]:
    """Medicines whose expiry date is today or earlier."""
    try:
        rows = query_expired_medicines(session, local_today(tz))
        return [_row_to_medicine(row) for row in rows]
    except Exception as e:
        logger.error(f"Failed to get expired medicines: {e}", exc_info=True)
        raise


def create_medicine(session: Session, data: CreateMedicineInput) -> Medicine:
    """Persist a new medicine and return it with its stored values."""
    try:
        row = insert_medicine(
            session,
            name=data.name,
            unit=data.unit,
            stock_quantity=data.stock_quantity,
            minimum_stock=data.minimum_stock,
            price_per_unit=data.price_per_unit,
            expiry_date=data.expiry_date,
            description=data.description,
        )
        session.commit()
        session.refresh(row)
        return _row_to_medicine(row)
    except Exception as e:
        session.rollback()
        logger.error(f"Medicine creation failed: {e}", exc_info=True)
        raise
