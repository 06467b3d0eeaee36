"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from klinik.api.patients_api import create_patient
from klinik.api.transactions_api import create_transaction
from klinik.database.schema import Base
from klinik.database.schema import Transaction as TransactionRow
from klinik.database.sqlite_client import enable_foreign_keys
from klinik.records.models import CreatePatientInput, CreateTransactionInput
from klinik.utils.time import to_storage_utc


@pytest.fixture
def session():
    """Create a temporary in-memory database session for testing."""
    engine = enable_foreign_keys(create_engine("sqlite:///:memory:", echo=False))
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_patient(session):
    """Factory that registers a test patient and returns its id."""
    def _make(name: str = "Test Patient") -> int:
        patient = create_patient(
            session,
            CreatePatientInput(
                name=name,
                date_of_birth=date(1990, 1, 1),
                gender="Laki-laki",
                phone="08123456789",
                address="Test Address",
                emergency_contact="08987654321",
                medical_notes="Test notes",
            ),
        )
        return patient.id

    return _make


@pytest.fixture
def make_transaction(session):
    """Factory that stores a transaction; defaults mirror a paid cash sale."""
    def _make(patient_id: int, **overrides):
        values = {
            "patient_id": patient_id,
            "total_amount": Decimal("150000"),
            "payment_method": "tunai",
            "payment_status": "paid",
            "notes": "Test transaction",
        }
        values.update(overrides)
        return create_transaction(session, CreateTransactionInput(**values))

    return _make


@pytest.fixture
def set_created_at(session):
    """Rewrite a transaction's created_at; aware or local-naive datetimes accepted."""
    def _set(transaction_id: int, created_at):
        session.query(TransactionRow).filter(TransactionRow.id == transaction_id).update(
            {TransactionRow.created_at: to_storage_utc(created_at)}
        )
        session.commit()

    return _set
