"""Import analysis and commit domain service.

An import runs in two steps. ``analyze_import`` validates and classifies the
records of one file and stores them in an ``ImportBatch``. After review,
``commit_import`` applies one decision per record inside a single
transaction, giving every record its own savepoint so one bad row never
aborts the rest.
"""

from datetime import UTC, datetime
from typing import Any, Iterable, Mapping, Optional

from budgetledger.database.base import Database
from budgetledger.domain.classifier import ImportClassifier
from budgetledger.domain.duplicates import DuplicateDetector
from budgetledger.domain.entities import (
    CommitResult,
    EntryStatus,
    EntryType,
    ImportAnalysis,
    ImportBatch,
    ImportStatus,
    RawRecord,
    RejectedRecord,
    ReviewAction,
    ReviewDecision,
    Verdict,
)
from budgetledger.domain.errors import (
    ConstraintViolation,
    DomainError,
    NotFoundError,
    ValidationError,
    account_not_found,
    entry_not_found,
    import_batch_not_found,
    owner_not_found,
)
from budgetledger.domain.matching import MatchCandidateFinder
from budgetledger.domain.raw_records import parse_raw_record
from budgetledger.logger import get_logger

logger = get_logger(__name__)

INVALID = "invalid"


class ImportService:
    """Service for analyzing and committing bank statement imports."""

    def __init__(self, db: Database, date_tolerance_days: Optional[int] = None):
        """Initialize import service.

        Args:
            db: Database instance
            date_tolerance_days: Optional bound on the date distance of match candidates
        """
        self.db = db
        self.detector = DuplicateDetector(db)
        self.finder = MatchCandidateFinder(db, date_tolerance_days=date_tolerance_days)
        self.classifier = ImportClassifier(self.detector, self.finder)

    def analyze_import(
        self,
        owner_id: int,
        account_id: int,
        records: Iterable[Mapping[str, Any]],
        filename: Optional[str] = None,
        file_type: str = "csv",
        config: Optional[dict[str, Any]] = None,
    ) -> ImportAnalysis:
        """Validate and classify raw records, and store them as an analyzed batch.

        Args:
            owner_id: Owner running the import
            account_id: Account the statement belongs to
            records: Normalized mappings with date, amount, description and optional hash
            filename: Name of the source file, for display
            file_type: Source format (csv, excel, qif, ofx)
            config: Parsing options: decimal_separator, dayfirst, invert_amounts

        Returns:
            ImportAnalysis with the stored batch, per-record verdicts and rejected rows

        Raises:
            NotFoundError: If the owner or account doesn't exist
            ValidationError: If the account belongs to another owner
        """
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.owner_id != owner_id:
            raise ValidationError(f"Account {account_id} belongs to another owner")

        config = dict(config or {})
        parsed: list[RawRecord] = []
        rejected: list[RejectedRecord] = []
        log: list[str] = []

        for row, data in enumerate(records, start=1):
            try:
                parsed.append(
                    parse_raw_record(
                        data,
                        row,
                        decimal_separator=config.get("decimal_separator", "."),
                        dayfirst=bool(config.get("dayfirst", False)),
                        invert_amounts=bool(config.get("invert_amounts", False)),
                    )
                )
            except ValidationError as e:
                rejected.append(RejectedRecord(row=row, error=str(e)))
                log.append(str(e))

        first_rows: dict[str, int] = {}
        for record in parsed:
            first_row = first_rows.setdefault(record.hash, record.row)
            if first_row != record.row:
                log.append(
                    f"Row {record.row}: same hash as row {first_row}; only one of them can be imported"
                )

        classifications = self.classifier.classify_all(account_id, parsed)

        stored: list[dict[str, Any]] = []
        for classification in classifications:
            item = classification.record.to_dict()
            item["verdict"] = classification.verdict.value
            item["matched_entry_id"] = (
                classification.matched_entry.id if classification.matched_entry else None
            )
            stored.append(item)
        for rejection in rejected:
            stored.append({"row": rejection.row, "verdict": INVALID, "error": rejection.error})
        stored.sort(key=lambda item: item["row"])

        total = len(parsed) + len(rejected)
        counts = {verdict: 0 for verdict in Verdict}
        for classification in classifications:
            counts[classification.verdict] += 1
        log.append(
            f"Analyzed {total} records: {counts[Verdict.NEW]} new, "
            f"{counts[Verdict.DUPLICATE]} duplicate, {counts[Verdict.MATCH]} match, "
            f"{len(rejected)} invalid"
        )

        batch_id = self.db.create_import_batch(
            owner_id=owner_id,
            account_id=account_id,
            filename=filename,
            file_type=file_type,
            config=config,
            records=stored,
            processing_log=log,
            total_rows=total,
        )
        logger.info(
            "import analyzed",
            batch_id=batch_id,
            account_id=account_id,
            total=total,
            new=counts[Verdict.NEW],
            duplicate=counts[Verdict.DUPLICATE],
            match=counts[Verdict.MATCH],
            invalid=len(rejected),
        )

        return ImportAnalysis(
            batch=self.db.get_import_batch(batch_id),
            classifications=classifications,
            rejected=rejected,
        )

    def get_batch(self, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID, or None if not found."""
        return self.db.get_import_batch(batch_id)

    def list_batches(
        self, account_id: Optional[int] = None, status: Optional[ImportStatus | str] = None
    ) -> list[ImportBatch]:
        """List import batches, newest first."""
        status_value = ImportStatus(status).value if status is not None else None
        return self.db.list_import_batches(account_id=account_id, status=status_value)

    def commit_import(
        self, batch_id: int, decisions: Mapping[int, ReviewDecision]
    ) -> CommitResult:
        """Apply review decisions to an analyzed batch.

        Args:
            batch_id: Import batch ID
            decisions: Review decision per record row; rows without one are skipped

        Returns:
            CommitResult with the per-outcome counts and row errors

        Raises:
            NotFoundError: If the batch doesn't exist
            ValidationError: If the batch was already committed
        """
        batch = self.db.get_import_batch(batch_id)
        if batch is None:
            raise NotFoundError(import_batch_not_found(batch_id))
        if batch.status != ImportStatus.ANALYZED:
            raise ValidationError(f"Import {batch_id} is {batch.status.value}, not analyzed")

        result = CommitResult(total=len(batch.records))
        log = list(batch.processing_log)

        with self.db.unit_of_work():
            self.db.update_import_batch(
                batch_id, status=ImportStatus.PROCESSING.value, started_at=datetime.now(UTC)
            )

            for item in batch.records:
                row = int(item["row"])
                if item["verdict"] == INVALID:
                    self._record_error(result, log, row, item["error"])
                    continue

                decision = decisions.get(row)
                if decision is None:
                    log.append(f"Row {row}: no review decision, skipped")
                    decision = ReviewDecision(action=ReviewAction.SKIP)

                try:
                    with self.db.unit_of_work():
                        self._apply(batch, item, decision, result)
                except DomainError as e:
                    self._record_error(result, log, row, str(e))

            log.append(
                f"Committed {result.total} records: {result.imported_count} imported "
                f"({result.merged_count} merged), {result.duplicate_count} duplicate, "
                f"{result.skipped_count} skipped, {result.error_count} errors"
            )
            self.db.update_import_batch(
                batch_id,
                status=ImportStatus.COMPLETED.value,
                imported_count=result.imported_count,
                merged_count=result.merged_count,
                duplicate_count=result.duplicate_count,
                skipped_count=result.skipped_count,
                error_count=result.error_count,
                processing_log=log,
                error_details=list(result.errors),
                completed_at=datetime.now(UTC),
            )

        logger.info(
            "import committed",
            batch_id=batch_id,
            total=result.total,
            imported=result.imported_count,
            merged=result.merged_count,
            duplicate=result.duplicate_count,
            skipped=result.skipped_count,
            errors=result.error_count,
        )
        return result

    def _record_error(self, result: CommitResult, log: list[str], row: int, message: str) -> None:
        message = message.removeprefix(f"Row {row}: ")
        result.error_count += 1
        result.errors.append({"row": row, "error": message})
        log.append(f"Row {row}: {message}")
        logger.warning("import record failed", row=row, error=message)

    def _apply(
        self,
        batch: ImportBatch,
        item: dict[str, Any],
        decision: ReviewDecision,
        result: CommitResult,
    ) -> None:
        try:
            action = ReviewAction(decision.action)
        except ValueError:
            raise ValidationError(f"Unknown review action '{decision.action}'") from None

        match action:
            case ReviewAction.SKIP:
                if item["verdict"] == Verdict.DUPLICATE.value:
                    result.duplicate_count += 1
                else:
                    result.skipped_count += 1
            case ReviewAction.CREATE:
                self._create_entry(batch, RawRecord.from_dict(item), decision)
                result.imported_count += 1
            case ReviewAction.MERGE:
                target_id = decision.matched_entry_id or item.get("matched_entry_id")
                self._merge_entry(batch, RawRecord.from_dict(item), target_id)
                result.imported_count += 1
                result.merged_count += 1

    def _create_entry(self, batch: ImportBatch, record: RawRecord, decision: ReviewDecision) -> int:
        if decision.category_id is not None and self.db.get_category(decision.category_id) is None:
            raise NotFoundError(f"Category {decision.category_id} not found")
        if decision.payee_id is not None and self.db.get_payee(decision.payee_id) is None:
            raise NotFoundError(f"Payee {decision.payee_id} not found")

        entry_type = EntryType.INCOME if record.amount >= 0 else EntryType.EXPENSE
        return self.db.create_entry(
            owner_id=batch.owner_id,
            account_id=batch.account_id,
            date=record.date,
            amount=record.amount,
            type=entry_type.value,
            description=decision.description or record.description,
            status=EntryStatus.PENDING.value,
            category_id=decision.category_id,
            payee_id=decision.payee_id,
            value_date=record.value_date,
            import_id=batch.id,
            import_hash=record.hash,
        )

    def _merge_entry(self, batch: ImportBatch, record: RawRecord, target_id: Optional[int]) -> None:
        if target_id is None:
            raise ValidationError(f"Row {record.row}: No transaction to merge into")

        entry = self.db.get_entry(target_id)
        if entry is None:
            raise NotFoundError(entry_not_found(target_id))
        if entry.account_id != batch.account_id:
            raise ConstraintViolation(
                f"Transaction {target_id} belongs to account {entry.account_id}, not {batch.account_id}"
            )
        if entry.is_reconciled:
            raise ConstraintViolation(f"Transaction {target_id} is reconciled")
        if entry.import_hash:
            raise ConstraintViolation(f"Transaction {target_id} was already imported")

        self.db.update_entry(target_id, import_id=batch.id, import_hash=record.hash)
