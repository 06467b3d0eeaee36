"""Patients API: registration and lookup."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Session

from ..database.patient_repo import find_patient_by_id, insert_patient
from ..records.models import CreatePatientInput, Patient
from ..utils.logging import get_logger
from ..utils.time import from_storage_utc, parse_date_string

if TYPE_CHECKING:
    from ..database.schema import Patient as PatientRow

logger = get_logger(__name__)


def _row_to_patient(row: "PatientRow") -> Patient:
    return Patient(
        id=row.id,
        name=row.name,
        date_of_birth=parse_date_string(row.date_of_birth),
        gender=row.gender,
        phone=row.phone,
        address=row.address,
        emergency_contact=row.emergency_contact,
        medical_notes=row.medical_notes,
        created_at=from_storage_utc(row.created_at),
        updated_at=from_storage_utc(row.updated_at),
    )


def create_patient(session: Session, data: CreatePatientInput) -> Patient:
    """
    Register a new patient.

    The input is trusted as validated. Date of birth is stored as
    YYYY-MM-DD text and returned as a date.

    Args:
        session: SQLAlchemy session
        data: Validated patient fields

    Returns:
        The stored Patient record
    """
    try:
        row = insert_patient(
            session,
            name=data.name,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            phone=data.phone,
            address=data.address,
            emergency_contact=data.emergency_contact,
            medical_notes=data.medical_notes,
        )
        session.commit()
        session.refresh(row)
        patient = _row_to_patient(row)
    except Exception as e:
        session.rollback()
        logger.error(f"Patient creation failed: {e}", exc_info=True)
        raise

    logger.debug(f"Created patient {patient.id}")
    return patient


def get_patient_by_id(session: Session, patient_id: int) -> Optional[Patient]:
    """Get a single patient, or None if not found."""
    try:
        row = find_patient_by_id(session, patient_id)
        if row is None:
            return None
        return _row_to_patient(row)
    except Exception as e:
        logger.error(f"Failed to get patient by ID: {e}", exc_info=True)
        raise
