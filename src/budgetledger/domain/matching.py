"""Match candidate search between imported records and manual entries."""

from typing import Optional

from budgetledger.database.base import Database
from budgetledger.domain.entities import EntryStatus, MatchCandidate, RawRecord
from budgetledger.logger import get_logger

logger = get_logger(__name__)


class MatchCandidateFinder:
    """Finds existing ledger entries an imported record could be merged into.

    Amount is a hard filter: only entries whose absolute amount equals the
    record's absolute amount qualify. Date is only a ranking signal, because
    banks post a few days after the purchase the user recorded.
    """

    def __init__(self, db: Database, date_tolerance_days: Optional[int] = None):
        """Initialize match candidate finder.

        Args:
            db: Database instance
            date_tolerance_days: Drop candidates further than this many days from
                the record. None keeps every amount-equal candidate.
        """
        if date_tolerance_days is not None and date_tolerance_days < 0:
            raise ValueError("date_tolerance_days cannot be negative")
        self.db = db
        self.date_tolerance_days = date_tolerance_days

    def find_candidates(self, account_id: int, record: RawRecord) -> list[MatchCandidate]:
        """List eligible entries for a raw record, best first.

        Eligible entries belong to the same account, are not void, are not
        reconciled, and have exactly the same absolute amount. They are ranked
        by date distance, then by entry id.
        """
        target = abs(record.amount)
        candidates = []
        for entry in self.db.list_match_eligible_entries(account_id, record.amount):
            if entry.account_id != account_id:
                continue
            if entry.status == EntryStatus.VOID or entry.is_reconciled:
                continue
            if abs(entry.amount) != target:
                continue

            distance = abs((entry.date - record.date).days)
            if self.date_tolerance_days is not None and distance > self.date_tolerance_days:
                continue
            candidates.append(MatchCandidate(entry=entry, date_distance=distance))

        candidates.sort(key=lambda candidate: (candidate.date_distance, candidate.entry.id))
        logger.debug(
            "match candidates found",
            account_id=account_id,
            row=record.row,
            candidate_ids=[c.entry.id for c in candidates],
        )
        return candidates

    def find_best_match(self, account_id: int, record: RawRecord) -> Optional[MatchCandidate]:
        """Return the closest eligible candidate, or None."""
        candidates = self.find_candidates(account_id, record)
        if not candidates:
            return None
        return candidates[0]
