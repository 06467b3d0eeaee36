"""Repository functions for the medicine inventory."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ..utils.time import to_date_string
from .filters import apply_predicates, apply_window
from .schema import Medicine


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _low_stock_predicate():
    return Medicine.stock_quantity <= Medicine.minimum_stock


def _expired_predicate(today: date):
    # YYYY-MM-DD text sorts chronologically; NULL expiry never matches.
    return Medicine.expiry_date <= to_date_string(today)


def query_medicines(
    session: Session,
    name_query: Optional[str] = None,
    low_stock_only: bool = False,
    expired_only: bool = False,
    today: Optional[date] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Medicine]:
    """
    Query medicines matching every provided filter.

    Args:
        session: SQLAlchemy session
        name_query: Case-insensitive substring of the name - if empty, all names
        low_stock_only: Only rows with stock_quantity <= minimum_stock
        expired_only: Only rows with expiry_date <= today
        today: Reference date for expired_only (required when it is set)
        limit: Maximum number of rows (None returns all)
        offset: Number of rows to skip after ordering

    Returns:
        List of Medicine rows ordered by name ASC
    """
    conditions = []
    if name_query:
        conditions.append(Medicine.name.ilike(f"%{_escape_like(name_query)}%", escape="\\"))
    if low_stock_only:
        conditions.append(_low_stock_predicate())
    if expired_only:
        if today is None:
            raise ValueError("today is required when expired_only is set")
        conditions.append(_expired_predicate(today))

    q = apply_predicates(session.query(Medicine), conditions)
    q = q.order_by(Medicine.name.asc(), Medicine.id.asc())
    return apply_window(q, limit=limit, offset=offset).all()


def query_low_stock_medicines(session: Session) -> List[Medicine]:
    """Low-stock medicines, highest minimum_stock first, then by name."""
    return (
        session.query(Medicine)
        .filter(_low_stock_predicate())
        .order_by(Medicine.minimum_stock.desc(), Medicine.name.asc())
        .all()
    )


def query_expired_medicines(session: Session, today: date) -> List[Medicine]:
    """Medicines expiring on or before ``today``, soonest first, then by name."""
    return (
        session.query(Medicine)
        .filter(_expired_predicate(today))
        .order_by(Medicine.expiry_date.asc(), Medicine.name.asc())
        .all()
    )


def find_medicine_by_id(session: Session, medicine_id: int) -> Optional[Medicine]:
    """Find medicine by ID, or None if not found."""
    return session.query(Medicine).filter(Medicine.id == medicine_id).first()


def insert_medicine(
    session: Session,
    *,
    name: str,
    unit: str,
    stock_quantity: int,
    minimum_stock: int,
    price_per_unit: Decimal,
    expiry_date: date | None = None,
    description: str | None = None,
) -> Medicine:
    """Create a new medicine row (caller commits)."""
    row = Medicine(
        name=name,
        description=description,
        unit=unit,
        stock_quantity=stock_quantity,
        minimum_stock=minimum_stock,
        price_per_unit=str(price_per_unit),
        expiry_date=to_date_string(expiry_date) if expiry_date else None,
    )
    session.add(row)
    return row
