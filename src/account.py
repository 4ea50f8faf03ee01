import logging
from dataclasses import replace
from decimal import Decimal, Inexact, InvalidOperation
from types import MappingProxyType
from typing import Dict, Mapping

from models import (
    AMOUNT_CONTEXT,
    AMOUNT_PRECISION,
    AccountSnapshot,
    Chargeback,
    Deposit,
    DepositRecord,
    Dispute,
    DisputeStatus,
    ProcessingResult,
    Resolve,
    Transaction,
    Withdrawal,
)

logger = logging.getLogger(__name__)


class Account:
    """
    One client's balances plus the history of deposits it has accepted.
    Once locked by a chargeback, the account ignores every further transaction.
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self._available = Decimal("0")
        self._held = Decimal("0")
        self._locked = False
        self._history: Dict[int, DepositRecord] = {}

    @property
    def available(self) -> Decimal:
        return self._available

    @property
    def held(self) -> Decimal:
        return self._held

    @property
    def total(self) -> Decimal:
        return AMOUNT_CONTEXT.add(self._available, self._held)

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def history(self) -> Mapping[int, DepositRecord]:
        return MappingProxyType(self._history)

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client_id=self.client_id,
            available=self._available,
            held=self._held,
            total=self.total,
            locked=self._locked,
        )

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction to this account.

        Returns:
            APPLIED: State was changed
            IGNORED: Transaction was rejected and state is unchanged
                     (frozen account, unknown reference, insufficient funds, ...)
        """
        if self._locked:
            logger.info(f"{transaction}: account {self.client_id} is locked, ignoring")
            return ProcessingResult.IGNORED

        try:
            return self._dispatch(transaction)
        except (Inexact, InvalidOperation):
            logger.warning(
                f"{transaction}: balance of account {self.client_id} cannot be kept exact "
                f"within {AMOUNT_PRECISION} digits, ignoring"
            )
            return ProcessingResult.IGNORED

    def _dispatch(self, transaction: Transaction) -> ProcessingResult:
        match transaction:
            case Deposit():
                return self._handle_deposit(transaction)
            case Withdrawal():
                return self._handle_withdrawal(transaction)
            case Dispute():
                return self._handle_dispute(transaction)
            case Resolve():
                return self._handle_resolve(transaction)
            case Chargeback():
                return self._handle_chargeback(transaction)
            case _:
                raise TypeError(f"Not a transaction: {transaction!r}")

    def _handle_deposit(self, transaction: Deposit) -> ProcessingResult:
        if transaction.amount <= 0:
            logger.warning(f"Deposit tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.IGNORED

        if transaction.transaction_id in self._history:
            logger.warning(f"Deposit tx {transaction.transaction_id}: duplicate transaction id, ignoring")
            return ProcessingResult.IGNORED

        self._set_balances(AMOUNT_CONTEXT.add(self._available, transaction.amount), self._held)
        self._history[transaction.transaction_id] = DepositRecord(amount=transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Withdrawal) -> ProcessingResult:
        if transaction.amount <= 0:
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.IGNORED

        if self._available < transaction.amount:
            logger.info(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {self._available}, requested {transaction.amount})"
            )
            return ProcessingResult.IGNORED

        self._set_balances(AMOUNT_CONTEXT.subtract(self._available, transaction.amount), self._held)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, transaction: Dispute) -> ProcessingResult:
        record = self._history.get(transaction.transaction_id)

        if record is None:
            logger.info(f"Dispute for tx {transaction.transaction_id}: no such deposit for client {self.client_id}")
            return ProcessingResult.IGNORED

        if record.status != DisputeStatus.NONE:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction is already {record.status.value}")
            return ProcessingResult.IGNORED

        # Holding more than is available would drive available below zero.
        if self._available < record.amount:
            logger.warning(
                f"Dispute for tx {transaction.transaction_id}: available {self._available} "
                f"cannot cover disputed amount {record.amount}"
            )
            return ProcessingResult.IGNORED

        self._set_balances(
            AMOUNT_CONTEXT.subtract(self._available, record.amount),
            AMOUNT_CONTEXT.add(self._held, record.amount),
        )
        self._history[transaction.transaction_id] = replace(record, status=DisputeStatus.DISPUTED)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, transaction: Resolve) -> ProcessingResult:
        record = self._disputed_record(transaction)
        if record is None:
            return ProcessingResult.IGNORED

        self._set_balances(
            AMOUNT_CONTEXT.add(self._available, record.amount),
            AMOUNT_CONTEXT.subtract(self._held, record.amount),
        )
        self._history[transaction.transaction_id] = replace(record, status=DisputeStatus.RESOLVED)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, transaction: Chargeback) -> ProcessingResult:
        record = self._disputed_record(transaction)
        if record is None:
            return ProcessingResult.IGNORED

        self._set_balances(self._available, AMOUNT_CONTEXT.subtract(self._held, record.amount))
        self._locked = True
        self._history[transaction.transaction_id] = replace(record, status=DisputeStatus.CHARGEBACKED)
        logger.info(f"Chargeback for tx {transaction.transaction_id}: account {self.client_id} locked")
        return ProcessingResult.APPLIED

    def _set_balances(self, available: Decimal, held: Decimal) -> None:
        # The total must be exact too, so check it before touching any field.
        AMOUNT_CONTEXT.add(available, held)
        self._available = available
        self._held = held

    def _disputed_record(self, transaction: Transaction):
        record = self._history.get(transaction.transaction_id)
        name = transaction.transaction_type.value.capitalize()

        if record is None:
            logger.info(f"{name} for tx {transaction.transaction_id}: no such deposit for client {self.client_id}")
            return None

        if record.status != DisputeStatus.DISPUTED:
            logger.warning(f"{name} for tx {transaction.transaction_id}: transaction is not under dispute")
            return None

        return record

    def __repr__(self) -> str:
        return (
            f"Account(client={self.client_id}, available={self._available}, "
            f"held={self._held}, total={self.total}, locked={self._locked})"
        )
