import logging
from typing import Dict, Iterable, Sequence

from dispute_index import DisputeIndex
from models import Transaction, ClientAccount, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction log in two passes.

    Pass 1 collects every disputed transaction id into a DisputeIndex.
    Pass 2 replays the log in order, binding each disputed deposit or
    withdrawal to its index entry before applying the record to its account.
    """

    def __init__(self):
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            logger.info(f"Discovering disputes in {filepath}")
            dispute_index = DisputeIndex.from_transactions(read_transactions(f))

            f.seek(0)
            return self._replay(read_transactions(f), dispute_index)

    def process_transactions(self, transactions: Sequence[Transaction]) -> Dict[int, ClientAccount]:
        """Process an in-memory transaction log and return final account states."""
        dispute_index = DisputeIndex.from_transactions(transactions)
        return self._replay(transactions, dispute_index)

    def _replay(self, transactions: Iterable[Transaction], dispute_index: DisputeIndex) -> Dict[int, ClientAccount]:
        logger.info(f"Replaying log with {len(dispute_index)} disputed transaction ids")

        self.stats = ProcessingStats()
        state = StateManager(dispute_index)
        processor = TransactionProcessor(state)

        for transaction in transactions:
            self.stats.record(processor.process_transaction(transaction))

        logger.info(f"Processed: {self.stats.processed}, Applied: {self.stats.applied}, Ignored: {self.stats.ignored}")
        return state.get_all_accounts()
