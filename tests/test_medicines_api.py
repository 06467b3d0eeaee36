"""Tests for the medicines API."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from klinik.api.medicines_api import (
    create_medicine,
    get_medicine_by_id,
    list_expired_medicines,
    list_low_stock_medicines,
    list_medicines,
)
from klinik.records.models import CreateMedicineInput, MedicineSearchInput
from klinik.utils.time import local_today


@pytest.fixture
def make_medicine(session):
    def _make(name: str, **overrides):
        values = {
            "name": name,
            "unit": "tablet",
            "stock_quantity": 100,
            "minimum_stock": 10,
            "price_per_unit": Decimal("2500.00"),
            "expiry_date": local_today() + timedelta(days=365),
        }
        values.update(overrides)
        return create_medicine(session, CreateMedicineInput(**values))

    return _make


def test_list_medicines_orders_by_name(session, make_medicine):
    make_medicine("Paracetamol")
    make_medicine("Amoxicillin")
    make_medicine("Ibuprofen")

    result = list_medicines(session)

    assert [m.name for m in result] == ["Amoxicillin", "Ibuprofen", "Paracetamol"]


def test_list_medicines_name_query_is_case_insensitive_substring(session, make_medicine):
    make_medicine("Paracetamol 500mg")
    make_medicine("Amoxicillin")
    make_medicine("PARACETAMOL Sirup")

    result = list_medicines(session, MedicineSearchInput(query="paraCET"))

    assert [m.name for m in result] == ["PARACETAMOL Sirup", "Paracetamol 500mg"]


@pytest.mark.parametrize(
    "stock_quantity,expected",
    [(5, True), (10, True), (11, False)],
)
def test_low_stock_boundary(session, make_medicine, stock_quantity, expected):
    make_medicine("Antasida", stock_quantity=stock_quantity, minimum_stock=10)

    filtered = list_medicines(session, MedicineSearchInput(low_stock_only=True))
    dedicated = list_low_stock_medicines(session)

    assert (len(filtered) == 1) is expected
    assert (len(dedicated) == 1) is expected


def test_list_low_stock_medicines_ordering(session, make_medicine):
    make_medicine("Bisolvon", stock_quantity=1, minimum_stock=5)
    make_medicine("Amlodipine", stock_quantity=3, minimum_stock=20)
    make_medicine("Antasida", stock_quantity=0, minimum_stock=5)
    make_medicine("Vitamin C", stock_quantity=50, minimum_stock=5)

    result = list_low_stock_medicines(session)

    assert [m.name for m in result] == ["Amlodipine", "Antasida", "Bisolvon"]


def test_expired_boundary_includes_today_excludes_tomorrow(session, make_medicine):
    today = local_today()
    make_medicine("Expires Today", expiry_date=today)
    make_medicine("Expires Tomorrow", expiry_date=today + timedelta(days=1))
    make_medicine("No Expiry", expiry_date=None)

    filtered = list_medicines(session, MedicineSearchInput(expired_only=True))
    dedicated = list_expired_medicines(session)

    assert [m.name for m in filtered] == ["Expires Today"]
    assert [m.name for m in dedicated] == ["Expires Today"]
    assert dedicated[0].expiry_date == today


def test_list_expired_medicines_ordering(session, make_medicine):
    today = local_today()
    make_medicine("Zinc", expiry_date=today - timedelta(days=30))
    make_medicine("Cetirizine", expiry_date=today - timedelta(days=2))
    make_medicine("Antalgin", expiry_date=today - timedelta(days=2))

    result = list_expired_medicines(session)

    assert [m.name for m in result] == ["Zinc", "Antalgin", "Cetirizine"]


def test_filters_combine_with_and(session, make_medicine):
    today = local_today()
    make_medicine("Obat Batuk A", stock_quantity=1, minimum_stock=10, expiry_date=today - timedelta(days=1))
    make_medicine("Obat Batuk B", stock_quantity=50, minimum_stock=10, expiry_date=today - timedelta(days=1))
    make_medicine("Obat Batuk C", stock_quantity=1, minimum_stock=10)
    make_medicine("Salep", stock_quantity=1, minimum_stock=10, expiry_date=today - timedelta(days=1))

    result = list_medicines(
        session,
        MedicineSearchInput(query="batuk", low_stock_only=True, expired_only=True),
    )

    assert [m.name for m in result] == ["Obat Batuk A"]


def test_false_flags_do_not_filter(session, make_medicine):
    make_medicine("A", stock_quantity=50, minimum_stock=10)
    make_medicine("B", stock_quantity=1, minimum_stock=10, expiry_date=date(2000, 1, 1))

    result = list_medicines(session, MedicineSearchInput(low_stock_only=False, expired_only=False, query=""))

    assert [m.name for m in result] == ["A", "B"]


def test_list_medicines_pagination(session, make_medicine):
    for name in ("A", "B", "C", "D"):
        make_medicine(name)

    result = list_medicines(session, MedicineSearchInput(limit=2, offset=1))

    assert [m.name for m in result] == ["B", "C"]


def test_get_medicine_by_id_converts_types(session, make_medicine):
    created = make_medicine("Omeprazole", price_per_unit=Decimal("12345.67"), expiry_date=date(2030, 6, 1))

    result = get_medicine_by_id(session, created.id)

    assert result is not None
    assert result.price_per_unit == Decimal("12345.67")
    assert isinstance(result.price_per_unit, Decimal)
    assert result.expiry_date == date(2030, 6, 1)


def test_get_medicine_by_id_returns_none_when_missing(session):
    assert get_medicine_by_id(session, 12345) is None


@pytest.mark.parametrize(
    "query,expected",
    [
        ("t_C", ["Vit_C"]),
        ("50%", ["Betadine 50%"]),
        ("\\", ["Back\\slash"]),
    ],
)
def test_name_query_matches_wildcard_characters_literally(session, make_medicine, query, expected):
    for name in ("Vit_C", "VitXC", "Betadine 50%", "Betadine 500ml", "Back\\slash"):
        make_medicine(name)

    result = list_medicines(session, MedicineSearchInput(query=query))

    assert [m.name for m in result] == expected
