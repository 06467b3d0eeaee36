"""CLI entrypoint for klinik."""

import argparse
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import BaseModel

from klinik.api.medicines_api import (
    get_medicine_by_id,
    list_expired_medicines,
    list_low_stock_medicines,
    list_medicines,
)
from klinik.api.patients_api import create_patient, get_patient_by_id
from klinik.api.transactions_api import (
    get_transaction_by_id,
    list_pending_transactions,
    list_today_transactions,
    list_transactions,
)
from klinik.config.loader import (
    get_clinic_timezone,
    get_log_level,
    get_sqlite_path,
    load_config,
)
from klinik.database.sqlite_client import get_engine, session_context
from klinik.records.models import (
    CreatePatientInput,
    MedicineSearchInput,
    TransactionSearchInput,
)
from klinik.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _load_runtime_config(args: argparse.Namespace) -> dict:
    """Load config from --config, or fall back to defaults if the default file is absent."""
    path = Path(args.config) if getattr(args, "config", None) else None
    try:
        config = load_config(path)
    except FileNotFoundError:
        if path is not None:
            raise
        logger.debug("No klinik.config.yaml found, using defaults")
        config = {}
    configure_logging(get_log_level(config))
    return config


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _print_records(records: Iterable[BaseModel]) -> None:
    _print_json([record.model_dump(mode="json") for record in records])


def _print_record(record: Optional[BaseModel], kind: str, record_id: int) -> None:
    if record is None:
        print(f"{kind} {record_id} not found.")
        return
    _print_json(record.model_dump(mode="json"))


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create the database file and all tables."""
    config = _load_runtime_config(args)
    sqlite_path = get_sqlite_path(config)
    get_engine(sqlite_path).dispose()
    print(f"Database ready: {sqlite_path}")


def cmd_transactions_list(args: argparse.Namespace) -> None:
    """List transactions with optional filters."""
    config = _load_runtime_config(args)
    search = TransactionSearchInput(
        patient_id=args.patient_id,
        payment_status=args.status,
        start_date=args.start,
        end_date=args.end,
        limit=args.limit,
        offset=args.offset,
    )
    with session_context(get_sqlite_path(config)) as session:
        _print_records(list_transactions(session, search))


def cmd_transactions_today(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_records(list_today_transactions(session, tz=get_clinic_timezone(config)))


def cmd_transactions_pending(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_records(list_pending_transactions(session))


def cmd_transactions_show(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_record(get_transaction_by_id(session, args.id), "Transaction", args.id)


def cmd_medicines_list(args: argparse.Namespace) -> None:
    """List medicines with optional filters."""
    config = _load_runtime_config(args)
    search = MedicineSearchInput(
        query=args.query,
        low_stock_only=args.low_stock,
        expired_only=args.expired,
        limit=args.limit,
        offset=args.offset,
    )
    with session_context(get_sqlite_path(config)) as session:
        _print_records(list_medicines(session, search, tz=get_clinic_timezone(config)))


def cmd_medicines_low_stock(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_records(list_low_stock_medicines(session))


def cmd_medicines_expired(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_records(list_expired_medicines(session, tz=get_clinic_timezone(config)))


def cmd_medicines_show(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_record(get_medicine_by_id(session, args.id), "Medicine", args.id)


def cmd_patients_create(args: argparse.Namespace) -> None:
    """Register a patient from command-line fields."""
    config = _load_runtime_config(args)
    data = CreatePatientInput(
        name=args.name,
        date_of_birth=args.date_of_birth,
        gender=args.gender,
        phone=args.phone,
        address=args.address,
        emergency_contact=args.emergency_contact,
        medical_notes=args.medical_notes,
    )
    with session_context(get_sqlite_path(config)) as session:
        _print_json(create_patient(session, data).model_dump(mode="json"))


def cmd_patients_show(args: argparse.Namespace) -> None:
    config = _load_runtime_config(args)
    with session_context(get_sqlite_path(config)) as session:
        _print_record(get_patient_by_id(session, args.id), "Patient", args.id)


def _add_window_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--limit", type=int, default=None, help="Maximum rows to return (default: all)")
    parser.add_argument("--offset", type=int, default=0, help="Rows to skip (default: 0)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="klinik",
        description="Clinic and pharmacy back-office records",
    )
    parser.add_argument("--config", type=str, help="Path to config file (default: klinik.config.yaml)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init-db", help="Create the database and tables")
    init_parser.set_defaults(func=cmd_init_db)

    # transactions
    tx_parser = subparsers.add_parser("transactions", help="Payment transaction queries")
    tx_subparsers = tx_parser.add_subparsers(dest="transactions_subcommand", required=True)

    tx_list = tx_subparsers.add_parser("list", help="List transactions")
    tx_list.add_argument("--patient-id", type=int, help="Filter by patient ID")
    tx_list.add_argument(
        "--status",
        type=str,
        choices=["pending", "paid", "cancelled"],
        help="Filter by payment status",
    )
    tx_list.add_argument("--start", type=datetime.fromisoformat, help="Created at or after (ISO 8601)")
    tx_list.add_argument("--end", type=datetime.fromisoformat, help="Created at or before (ISO 8601)")
    _add_window_args(tx_list)
    tx_list.set_defaults(func=cmd_transactions_list)

    tx_today = tx_subparsers.add_parser("today", help="Transactions created today")
    tx_today.set_defaults(func=cmd_transactions_today)

    tx_pending = tx_subparsers.add_parser("pending", help="Pending transactions")
    tx_pending.set_defaults(func=cmd_transactions_pending)

    tx_show = tx_subparsers.add_parser("show", help="Show one transaction")
    tx_show.add_argument("id", type=int)
    tx_show.set_defaults(func=cmd_transactions_show)

    # medicines
    med_parser = subparsers.add_parser("medicines", help="Medicine inventory queries")
    med_subparsers = med_parser.add_subparsers(dest="medicines_subcommand", required=True)

    med_list = med_subparsers.add_parser("list", help="List medicines")
    med_list.add_argument("--query", type=str, help="Case-insensitive name search")
    med_list.add_argument("--low-stock", action="store_true", help="Only stock at or below minimum")
    med_list.add_argument("--expired", action="store_true", help="Only expired medicines")
    _add_window_args(med_list)
    med_list.set_defaults(func=cmd_medicines_list)

    med_low = med_subparsers.add_parser("low-stock", help="Medicines at or below minimum stock")
    med_low.set_defaults(func=cmd_medicines_low_stock)

    med_expired = med_subparsers.add_parser("expired", help="Expired medicines")
    med_expired.set_defaults(func=cmd_medicines_expired)

    med_show = med_subparsers.add_parser("show", help="Show one medicine")
    med_show.add_argument("id", type=int)
    med_show.set_defaults(func=cmd_medicines_show)

    # patients
    pat_parser = subparsers.add_parser("patients", help="Patient registration")
    pat_subparsers = pat_parser.add_subparsers(dest="patients_subcommand", required=True)

    pat_create = pat_subparsers.add_parser("create", help="Register a patient")
    pat_create.add_argument("--name", required=True)
    pat_create.add_argument("--date-of-birth", required=True, type=date.fromisoformat, help="YYYY-MM-DD")
    pat_create.add_argument("--gender", required=True, choices=["Laki-laki", "Perempuan"])
    pat_create.add_argument("--phone")
    pat_create.add_argument("--address")
    pat_create.add_argument("--emergency-contact")
    pat_create.add_argument("--medical-notes")
    pat_create.set_defaults(func=cmd_patients_create)

    pat_show = pat_subparsers.add_parser("show", help="Show one patient")
    pat_show.add_argument("id", type=int)
    pat_show.set_defaults(func=cmd_patients_show)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
