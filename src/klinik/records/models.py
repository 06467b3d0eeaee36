"""Typed records and validated inputs for the klinik handlers.

Records mirror the storage rows with text columns converted to their
semantic types: money as ``Decimal`` and dates as ``date``. Inputs carry
the validation; handlers trust them as-is.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

PaymentStatus = Literal["pending", "paid", "cancelled"]
PaymentMethod = Literal["tunai", "transfer", "debit", "kredit", "bpjs"]
Gender = Literal["Laki-laki", "Perempuan"]


class Patient(BaseModel):
    id: int
    name: str
    date_of_birth: date
    gender: Gender
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    medical_notes: Optional[str] = None
    created_at: datetime  # aware UTC
    updated_at: datetime  # aware UTC


class Medicine(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    unit: str
    stock_quantity: int
    minimum_stock: int
    price_per_unit: Decimal
    expiry_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class Transaction(BaseModel):
    id: int
    patient_id: int
    total_amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CreatePatientInput(BaseModel):
    name: str = Field(..., min_length=1)
    date_of_birth: date
    gender: Gender
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    medical_notes: Optional[str] = None


class CreateMedicineInput(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    unit: str = Field(..., min_length=1)
    stock_quantity: int = Field(..., ge=0)
    minimum_stock: int = Field(..., ge=0)
    price_per_unit: Decimal = Field(..., ge=0)
    expiry_date: Optional[date] = None


class CreateTransactionInput(BaseModel):
    patient_id: int
    total_amount: Decimal = Field(..., ge=0)
    payment_method: PaymentMethod
    payment_status: PaymentStatus = "pending"
    notes: Optional[str] = None


class TransactionSearchInput(BaseModel):
    """Optional transaction filters; every unset field means "don't filter"."""
    patient_id: Optional[int] = None
    payment_status: Optional[PaymentStatus] = None
    start_date: Optional[datetime] = None  # created_at >= start_date
    end_date: Optional[datetime] = None  # created_at <= end_date
    limit: Optional[int] = Field(None, gt=0)  # None returns all rows
    offset: int = Field(0, ge=0)


class MedicineSearchInput(BaseModel):
    """Optional medicine filters; a false flag is the same as an absent one."""
    query: Optional[str] = None  # case-insensitive name substring
    low_stock_only: bool = False
    expired_only: bool = False
    limit: Optional[int] = Field(None, gt=0)
    offset: int = Field(0, ge=0)
