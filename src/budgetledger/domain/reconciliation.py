"""Reconciliation domain service."""

from datetime import UTC, date, datetime, time

from budgetledger.database.base import Database
from budgetledger.domain.entities import EntryStatus, LedgerEntry
from budgetledger.domain.errors import NotFoundError, entry_not_found
from budgetledger.logger import get_logger

logger = get_logger(__name__)


class ReconciliationService:
    """Marks ledger entries as matched against a bank statement.

    Only the reconciliation columns change. Amounts, descriptions, dates and
    the other leg of a transfer are left alone.
    """

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def toggle(self, entry_id: int) -> LedgerEntry:
        """Flip the reconciled flag of one entry.

        Reconciling stamps the current time and sets status ``reconciled``;
        un-reconciling clears the timestamp and sets status ``cleared``.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))

        if entry.is_reconciled:
            self.db.set_reconciled([entry_id], False, EntryStatus.CLEARED.value, None)
        else:
            self.db.set_reconciled([entry_id], True, EntryStatus.RECONCILED.value, datetime.now(UTC))

        logger.info("reconciliation toggled", entry_id=entry_id, is_reconciled=not entry.is_reconciled)
        return self.db.get_entry(entry_id)

    def batch_reconcile(self, entry_ids: list[int], reconcile_date: date) -> int:
        """Reconcile several entries against a statement date.

        Args:
            entry_ids: Entries to reconcile; unknown IDs are ignored
            reconcile_date: Statement date, stored at midnight

        Returns:
            Number of entries updated
        """
        if not entry_ids:
            return 0
        reconciled_at = datetime.combine(reconcile_date, time.min)
        with self.db.unit_of_work():
            updated = self.db.set_reconciled(
                list(entry_ids), True, EntryStatus.RECONCILED.value, reconciled_at
            )
        logger.info("entries reconciled", requested=len(entry_ids), updated=updated, date=str(reconcile_date))
        return updated
