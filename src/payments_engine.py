import logging
import sys
from typing import Dict, Iterable, Optional

from models import ClientAccount, ProcessingStats, Transaction
from ledger_store import LedgerStore
from record_reader import read_transactions
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds decoded transactions to the processor strictly in input order.
    Owns the ledger for the duration of a run.
    """

    def __init__(self, store: Optional[LedgerStore] = None):
        self._store = store if store is not None else LedgerStore()
        self._processor = TransactionProcessor(self._store)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """
        Process CSV file and return final account states.
        Raises OSError if the file cannot be opened; nothing is applied then.
        """
        # Undecodable bytes survive as surrogates so the row, not the run, is rejected.
        with open(filepath, "r", encoding="utf-8-sig", errors="surrogateescape", newline="") as f:
            accounts = self.process_transactions(read_transactions(f))

        # Print final processing report to stderr
        print(self._stats.summary(), file=sys.stderr)
        return accounts

    def process_transactions(self, transactions: Iterable[Optional[Transaction]]) -> Dict[int, ClientAccount]:
        """Apply transactions one by one; None entries mark skipped rows."""
        for transaction in transactions:
            if transaction is None:
                self._stats.record_skip()
                continue

            error = self._processor.apply(transaction)
            if error is None:
                self._stats.record_success()
            else:
                self._stats.record_failure(error)
                logger.warning(f"Rejected {transaction}: {error.value}")

        return self._store.get_all_accounts()
