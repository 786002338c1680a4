"""Duplicate detection for imported bank records."""

import hashlib
from datetime import date
from decimal import Decimal
from typing import Optional

from budgetledger.database.base import Database
from budgetledger.domain.entities import LedgerEntry
from budgetledger.utils.amount_parser import CENT
from budgetledger.utils.text import normalize_description


def compute_import_hash(txn_date: date, description: Optional[str], amount: Decimal) -> str:
    """Compute the stable hash identifying one bank movement.

    The hash covers the date, the amount at cent precision and the normalized
    description, so re-importing the same file always yields the same hashes.
    """
    payload = f"{txn_date.isoformat()}|{amount.quantize(CENT)}|{normalize_description(description)}"
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


class DuplicateDetector:
    """Checks raw record hashes against hashes already imported on an account.

    Reconciled entries are searched too: reconciling an entry must never make
    its bank record importable a second time.
    """

    def __init__(self, db: Database):
        """Initialize duplicate detector.

        Args:
            db: Database instance
        """
        self.db = db

    compute_hash = staticmethod(compute_import_hash)

    def find_duplicate(self, account_id: int, raw_hash: str) -> Optional[LedgerEntry]:
        """Return the entry already carrying ``raw_hash`` on the account, if any."""
        if not raw_hash:
            return None
        return self.db.find_entry_by_import_hash(account_id, raw_hash)

    def is_duplicate(self, account_id: int, raw_hash: str) -> bool:
        """Check whether ``raw_hash`` was already imported on the account."""
        return self.find_duplicate(account_id, raw_hash) is not None
