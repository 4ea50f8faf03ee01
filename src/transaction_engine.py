import logging
from typing import Dict, Iterable, List, Optional

from account import Account
from models import AccountSnapshot, Deposit, ProcessingResult, ProcessingStats, Transaction, Withdrawal

logger = logging.getLogger(__name__)


class TransactionEngine:
    """
    Routes transactions to per-client accounts, in input order.
    Input problems never raise: a rejected transaction is logged and skipped.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}
        self.stats = ProcessingStats()

    def process(self, transaction: Transaction) -> None:
        """Apply one transaction to the account that owns it."""
        account = self._accounts.get(transaction.client_id)

        if account is None:
            # Disputes, resolves and chargebacks can only reference history of an existing account.
            if not isinstance(transaction, (Deposit, Withdrawal)):
                logger.info(f"{transaction}: unknown client {transaction.client_id}, ignoring")
                self.stats.record(ProcessingResult.IGNORED)
                return
            account = Account(transaction.client_id)
            self._accounts[transaction.client_id] = account

        self.stats.record(account.apply(transaction))

    def process_all(self, transactions: Iterable[Transaction]) -> None:
        """Consume transactions one at a time until the iterable is exhausted."""
        for transaction in transactions:
            self.process(transaction)

    def get_account(self, client_id: int) -> Optional[Account]:
        return self._accounts.get(client_id)

    def accounts(self) -> List[AccountSnapshot]:
        """Return snapshots of all accounts (for final output)."""
        return [account.snapshot() for account in self._accounts.values()]
