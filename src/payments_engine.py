import logging
from typing import Dict

from csv_io import read_transactions
from ledger import Ledger
from models import ClientAccount, ProcessingStats

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction file against a fresh ledger.
    Single-threaded: every record is applied to completion, in file order,
    before the next one is read. The first fatal error aborts the run.
    """

    def __init__(self):
        self._ledger = Ledger()
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        for transaction in read_transactions(filepath):
            result = self._ledger.apply(transaction)
            self._stats.record(result)

        logger.info(str(self._stats))
        return self._ledger.get_all_accounts()
