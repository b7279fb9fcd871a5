import logging
from typing import Dict, Iterable

from csv_io import read_transaction_records
from errors import ProcessingError
from models import ClientAccount, ProcessingStats, Transaction, TransactionRecord
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from validator import validate

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Applies a stream of transaction records in arrival order, single pass.

    Malformed records (parse or validation failures) abort the run by
    propagating their exception. Business-rule violations skip the record,
    get logged, and processing continues.
    """

    def __init__(self, strict: bool = False):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state, strict=strict)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", newline="") as f:
            return self.process_records(read_transaction_records(f))

    def process_records(self, records: Iterable[TransactionRecord]) -> Dict[int, ClientAccount]:
        """Consume records lazily and return final account states."""
        logger.info("Starting transaction processing")

        for record in records:
            row_number = self._stats.rows_seen + 1
            transaction = validate(record)

            try:
                self.process_transaction(transaction)
            except ProcessingError as e:
                logger.warning(f"[row {row_number}] Skipped {transaction}: {e}")
                self._stats.record_skip()
            else:
                self._stats.record_success()

        logger.info(
            f"Processing complete: {self._stats.processed} processed, "
            f"{self._stats.skipped} skipped, {self._state.account_count()} accounts"
        )
        return self.get_accounts()

    def process_transaction(self, transaction: Transaction) -> None:
        """Apply one validated transaction. Raises ProcessingError if it is rejected."""
        self._processor.process_transaction(transaction)

    def get_accounts(self) -> Dict[int, ClientAccount]:
        return self._state.get_all_accounts()

    def account_count(self) -> int:
        return self._state.account_count()
