import csv
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import AMOUNT_PRECISION, Chargeback, Deposit, Dispute, Resolve, Transaction, TransactionType, Withdrawal

MAX_CLIENT_ID = 65535
MAX_TRANSACTION_ID = 4294967295

REQUIRED_COLUMNS = ("type", "client", "tx")


class TransactionParseError(ValueError):
    """Raised when a row cannot be turned into a transaction. Fatal to the run."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Lazily parse CSV rows with header `type, client, tx, amount` into transactions.
    Whitespace around headers and values is ignored.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    try:
        if reader.fieldnames is None:
            return

        reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]
        missing = [name for name in REQUIRED_COLUMNS if name not in reader.fieldnames]
        if missing:
            raise TransactionParseError(1, f"missing columns {', '.join(missing)}")

        for row in reader:
            yield parse_row(row, reader.line_num)
    except UnicodeDecodeError as e:
        raise TransactionParseError(reader.line_num + 1, f"cannot decode input: {e.reason}")
    except csv.Error as e:
        raise TransactionParseError(reader.line_num, f"malformed CSV: {e}")


def read_transactions_file(filepath: str) -> Iterator[Transaction]:
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        yield from read_transactions(f)


def parse_row(row: Dict[str, Optional[str]], line_number: int = 0) -> Transaction:
    """Parse CSV row into Transaction."""
    normalized = {k: (v or "").strip() for k, v in row.items() if k is not None}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except ValueError:
        raise TransactionParseError(line_number, f"unknown transaction type {normalized['type']!r}")

    client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID, line_number)

    match transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(client_id, transaction_id, _parse_amount(normalized, line_number))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(client_id, transaction_id, _parse_amount(normalized, line_number))
        case TransactionType.DISPUTE:
            return Dispute(client_id, transaction_id)
        case TransactionType.RESOLVE:
            return Resolve(client_id, transaction_id)
        case TransactionType.CHARGEBACK:
            return Chargeback(client_id, transaction_id)


def _parse_id(value: str, column: str, maximum: int, line_number: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise TransactionParseError(line_number, f"invalid {column} {value!r}")
    if not 0 <= parsed <= maximum:
        raise TransactionParseError(line_number, f"{column} {parsed} out of range")
    return parsed


def _parse_amount(normalized: Dict[str, str], line_number: int) -> Decimal:
    amount_str = normalized.get("amount", "")
    if not amount_str:
        raise TransactionParseError(line_number, f"{normalized['type']} requires an amount")
    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise TransactionParseError(line_number, f"invalid amount {amount_str!r}")
    if not amount.is_finite():
        raise TransactionParseError(line_number, f"invalid amount {amount_str!r}")
    if len(amount.as_tuple().digits) > AMOUNT_PRECISION or amount.adjusted() >= AMOUNT_PRECISION:
        raise TransactionParseError(line_number, f"amount {amount_str!r} exceeds {AMOUNT_PRECISION} digits")
    return amount
