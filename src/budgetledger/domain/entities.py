"""Domain model entities for budgetledger.

These are pure data classes representing business concepts, independent of
database schema. The persistence layer converts its rows into these through
``budgetledger.database.mappers``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class EntryType(str, Enum):
    """Kind of ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class EntryStatus(str, Enum):
    """Clearing status of a ledger entry."""

    PENDING = "pending"
    CLEARED = "cleared"
    RECONCILED = "reconciled"
    VOID = "void"


class Verdict(str, Enum):
    """Classifier outcome for one raw import record."""

    NEW = "new"
    DUPLICATE = "duplicate"
    MATCH = "match"


class ReviewAction(str, Enum):
    """Action chosen during review for one raw import record."""

    CREATE = "create"
    SKIP = "skip"
    MERGE = "merge"


class ImportStatus(str, Enum):
    """Lifecycle of an import batch."""

    ANALYZED = "analyzed"
    PROCESSING = "processing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Unlinked:
    """Transfer with an external or unknown counter-account."""


@dataclass(frozen=True)
class Linked:
    """Transfer whose other leg is stored as ``counterpart_id``."""

    counterpart_id: int


TransferLink = Union[Unlinked, Linked]


@dataclass(frozen=True)
class Owner:
    """Ledger owner (user) domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    owner_id: int
    name: str
    bank_name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    owner_id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Payee:
    """Payee domain entity."""

    id: int
    owner_id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class LedgerEntry:
    """One row in the transaction ledger."""

    id: int
    owner_id: int
    account_id: int
    amount: Decimal
    description: str
    date: date
    type: EntryType
    status: EntryStatus
    is_reconciled: bool = False
    reconciled_at: Optional[datetime] = None
    linked_entry_id: Optional[int] = None
    category_id: Optional[int] = None
    payee_id: Optional[int] = None
    notes: Optional[str] = None
    value_date: Optional[date] = None
    purchase_date: Optional[date] = None
    accounting_date: Optional[date] = None
    import_id: Optional[int] = None
    import_hash: Optional[str] = None
    check_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def link(self) -> TransferLink:
        """Transfer link state of this entry."""
        if self.linked_entry_id is None:
            return Unlinked()
        return Linked(self.linked_entry_id)

    @property
    def is_transfer(self) -> bool:
        return self.type == EntryType.TRANSFER


@dataclass(frozen=True)
class RawRecord:
    """A normalized, not-yet-committed line from an imported bank file."""

    row: int
    date: date
    amount: Decimal
    description: str
    hash: str
    value_date: Optional[date] = None
    reference: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible values for batch storage."""
        return {
            "row": self.row,
            "date": self.date.isoformat(),
            "amount": str(self.amount),
            "description": self.description,
            "hash": self.hash,
            "value_date": self.value_date.isoformat() if self.value_date else None,
            "reference": self.reference,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawRecord":
        value_date = data.get("value_date")
        return cls(
            row=int(data["row"]),
            date=date.fromisoformat(data["date"]),
            amount=Decimal(data["amount"]),
            description=data["description"],
            hash=data["hash"],
            value_date=date.fromisoformat(value_date) if value_date else None,
            reference=data.get("reference"),
        )


@dataclass(frozen=True)
class MatchCandidate:
    """Scored pairing between a raw record and an unreconciled ledger entry."""

    entry: LedgerEntry
    date_distance: int


@dataclass(frozen=True)
class Classification:
    """Classifier verdict for one raw record."""

    record: RawRecord
    verdict: Verdict
    matched_entry: Optional[LedgerEntry] = None


@dataclass(frozen=True)
class RejectedRecord:
    """Raw input that failed validation before classification."""

    row: int
    error: str


@dataclass(frozen=True)
class ReviewDecision:
    """Reviewer's decision for one classified record."""

    action: ReviewAction
    matched_entry_id: Optional[int] = None
    category_id: Optional[int] = None
    payee_id: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ImportBatch:
    """A record of one file import."""

    id: int
    owner_id: int
    account_id: int
    filename: Optional[str]
    file_type: str
    status: ImportStatus
    total_rows: int
    imported_count: int
    merged_count: int
    duplicate_count: int
    skipped_count: int
    error_count: int
    config: dict[str, Any]
    records: list[dict[str, Any]]
    processing_log: list[str]
    error_details: list[dict[str, Any]]
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class ImportAnalysis:
    """Result of analyzing one import: the persisted batch plus verdicts."""

    batch: ImportBatch
    classifications: list[Classification]
    rejected: list[RejectedRecord]

    @property
    def summary(self) -> dict[str, int]:
        counts = {verdict.value: 0 for verdict in Verdict}
        for classification in self.classifications:
            counts[classification.verdict.value] += 1
        counts["invalid"] = len(self.rejected)
        counts["total"] = len(self.classifications) + len(self.rejected)
        return counts


@dataclass
class CommitResult:
    """Counts produced by committing a reviewed import batch.

    ``merged_count`` is the subset of ``imported_count`` that was merged into
    existing entries rather than inserted.
    """

    total: int = 0
    imported_count: int = 0
    merged_count: int = 0
    duplicate_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)
