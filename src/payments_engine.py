import logging
from typing import Iterable, Mapping

from csv_io import read_transactions
from errors import ProcessTransactionError
from models import ClientAccount, ProcessingStats, Transaction
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Applies a stream of transactions to one ledger, strictly in order.
    Rejected transactions are logged and skipped; LedgerInvariantError
    is not caught and aborts the run.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process(self, transaction: Transaction) -> bool:
        """Apply one transaction. Returns False if it was rejected."""
        try:
            self._processor.process_transaction(transaction)
        except ProcessTransactionError as e:
            self._stats.record_failure(type(e).__name__)
            logger.warning(f"Rejected {transaction}: {e}")
            return False

        self._stats.record_success()
        return True

    def process_all(self, transactions: Iterable[Transaction]) -> Mapping[int, ClientAccount]:
        """Process transactions in iteration order and return final account states."""
        for transaction in transactions:
            self.process(transaction)
        return self.accounts()

    def process_file(self, filepath: str) -> Mapping[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Starting processing of {filepath}")
        accounts = self.process_all(read_transactions(filepath))
        logger.info(f"Processing complete: {self._stats.processed} processed, {self._stats.failed} failed")
        return accounts

    def accounts(self) -> Mapping[int, ClientAccount]:
        return self._state.get_all_accounts()
