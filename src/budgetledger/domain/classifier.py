"""Three-way classification of imported records."""

from typing import Iterable

from budgetledger.domain.duplicates import DuplicateDetector
from budgetledger.domain.entities import Classification, RawRecord, Verdict
from budgetledger.domain.matching import MatchCandidateFinder


class ImportClassifier:
    """Combines duplicate detection and candidate matching into a verdict.

    Each record is classified against the persisted ledger only. Candidates are
    not reserved across a batch, so two records of one file can both be
    offered the same manual entry; the reviewer settles such conflicts.
    """

    def __init__(self, detector: DuplicateDetector, finder: MatchCandidateFinder):
        self.detector = detector
        self.finder = finder

    def classify(self, account_id: int, record: RawRecord) -> Classification:
        """Classify one record as duplicate, match or new.

        Duplicate detection runs first and wins over any plausible match.
        """
        duplicate = self.detector.find_duplicate(account_id, record.hash)
        if duplicate is not None:
            return Classification(record=record, verdict=Verdict.DUPLICATE, matched_entry=duplicate)

        best = self.finder.find_best_match(account_id, record)
        if best is not None:
            return Classification(record=record, verdict=Verdict.MATCH, matched_entry=best.entry)

        return Classification(record=record, verdict=Verdict.NEW)

    def classify_all(self, account_id: int, records: Iterable[RawRecord]) -> list[Classification]:
        """Classify records independently, in input order."""
        return [self.classify(account_id, record) for record in records]
