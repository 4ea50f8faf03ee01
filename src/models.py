from dataclasses import dataclass
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow
from enum import Enum
from typing import Union

# Balances are kept exact: arithmetic that would need rounding raises instead.
AMOUNT_PRECISION = 64
AMOUNT_CONTEXT = Context(prec=AMOUNT_PRECISION, traps=[Inexact, InvalidOperation, Overflow])


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


class DisputeStatus(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGEBACKED = "chargebacked"


@dataclass(frozen=True)
class Deposit:
    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type = TransactionType.DEPOSIT


@dataclass(frozen=True)
class Withdrawal:
    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type = TransactionType.WITHDRAWAL


@dataclass(frozen=True)
class Dispute:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.DISPUTE


@dataclass(frozen=True)
class Resolve:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.RESOLVE


@dataclass(frozen=True)
class Chargeback:
    client_id: int
    transaction_id: int

    transaction_type = TransactionType.CHARGEBACK


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass(frozen=True)
class DepositRecord:
    """History entry for an accepted deposit. A status change replaces the entry."""

    amount: Decimal
    status: DisputeStatus = DisputeStatus.NONE


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.applied = 0
        self.ignored = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1

    def __repr__(self) -> str:
        return f"ProcessingStats(applied={self.applied}, ignored={self.ignored})"
