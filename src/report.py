import csv
from decimal import ROUND_HALF_EVEN, Context, Decimal
from typing import Iterable, TextIO

from models import AccountSnapshot

DECIMAL_PLACES = 4
REPORT_HEADER = ["client", "available", "held", "total", "locked"]

_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    # Room for every integer digit, the fraction and a carry from rounding.
    context = Context(prec=max(value.adjusted(), 0) + DECIMAL_PLACES + 2)
    return f"{value.quantize(_QUANTUM, rounding=ROUND_HALF_EVEN, context=context):f}"


def write_report(accounts: Iterable[AccountSnapshot], stream: TextIO) -> None:
    """Write account snapshots as CSV, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow([
            account.client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
