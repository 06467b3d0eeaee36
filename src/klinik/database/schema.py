from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

from ..utils.time import utc_now_naive

Base = declarative_base()


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    date_of_birth = Column(String, nullable=False)  # YYYY-MM-DD
    gender = Column(String, nullable=False)  # Laki-laki | Perempuan
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    emergency_contact = Column(String, nullable=True)
    medical_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)  # naive UTC
    updated_at = Column(DateTime, nullable=False, default=utc_now_naive, onupdate=utc_now_naive)


class Medicine(Base):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    unit = Column(String, nullable=False)  # tablet, botol, strip...
    stock_quantity = Column(Integer, nullable=False, default=0)
    minimum_stock = Column(Integer, nullable=False, default=0)
    price_per_unit = Column(String, nullable=False)  # exact decimal as text
    expiry_date = Column(String, nullable=True, index=True)  # YYYY-MM-DD
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
    updated_at = Column(DateTime, nullable=False, default=utc_now_naive, onupdate=utc_now_naive)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    total_amount = Column(String, nullable=False)  # exact decimal as text
    payment_method = Column(String, nullable=False)
    payment_status = Column(String, nullable=False, default="pending")  # pending | paid | cancelled
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
    updated_at = Column(DateTime, nullable=False, default=utc_now_naive, onupdate=utc_now_naive)

    __table_args__ = (
        Index("idx_transactions_status_created_at", "payment_status", "created_at"),
    )
