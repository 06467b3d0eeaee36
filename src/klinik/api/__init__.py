"""Public handlers: the query surface for klinik records.

Handlers take a SQLAlchemy session, delegate queries to the repository
functions and return pydantic records. Lookups by id return None when
nothing matches; storage errors are logged and re-raised unchanged.
"""

from .medicines_api import (
    create_medicine,
    get_medicine_by_id,
    list_expired_medicines,
    list_low_stock_medicines,
    list_medicines,
)
from .patients_api import create_patient, get_patient_by_id
from .transactions_api import (
    create_transaction,
    get_transaction_by_id,
    list_pending_transactions,
    list_today_transactions,
    list_transactions,
)

__all__ = [
    "create_medicine",
    "create_patient",
    "create_transaction",
    "get_medicine_by_id",
    "get_patient_by_id",
    "get_transaction_by_id",
    "list_expired_medicines",
    "list_low_stock_medicines",
    "list_medicines",
    "list_pending_transactions",
    "list_today_transactions",
    "list_transactions",
]
