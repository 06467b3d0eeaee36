"""Repository functions for patient records."""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ..utils.time import to_date_string
from .schema import Patient


def insert_patient(
    session: Session,
    *,
    name: str,
    date_of_birth: date,
    gender: str,
    phone: str | None = None,
    address: str | None = None,
    emergency_contact: str | None = None,
    medical_notes: str | None = None,
) -> Patient:
    """
    Create a new patient row (caller commits).

    date_of_birth is stored as YYYY-MM-DD text.
    """
    row = Patient(
        name=name,
        date_of_birth=to_date_string(date_of_birth),
        gender=gender,
        phone=phone,
        address=address,
        emergency_contact=emergency_contact,
        medical_notes=medical_notes,
    )
    session.add(row)
    return row


def find_patient_by_id(session: Session, patient_id: int) -> Optional[Patient]:
    """Find patient by ID, or None if not found."""
    return session.query(Patient).filter(Patient.id == patient_id).first()
