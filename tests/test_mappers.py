"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from budgetledger.database.models import (
    Account as ORMAccount,
    LedgerEntry as ORMLedgerEntry,
    ImportBatch as ORMImportBatch,
)
from budgetledger.database.mappers import (
    account_to_domain,
    ledger_entry_to_domain,
    import_batch_to_domain,
)
from budgetledger.domain.entities import (
    Account,
    EntryStatus,
    EntryType,
    ImportStatus,
    LedgerEntry,
    Linked,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        created = datetime.now(UTC)
        orm_account = ORMAccount(id=1, owner_id=2, name="Checking", bank_name="Bank", created_at=created)

        account = account_to_domain(orm_account)

        assert account == Account(id=1, owner_id=2, name="Checking", bank_name="Bank", created_at=created)


class TestLedgerEntryMapper:
    """Tests for LedgerEntry mapper."""

    def test_ledger_entry_to_domain(self):
        """Test converting ORM LedgerEntry to domain LedgerEntry."""
        orm_entry = ORMLedgerEntry(
            id=5,
            owner_id=1,
            account_id=2,
            amount=Decimal("-50"),
            description="Grocery store",
            date=date(2026, 1, 15),
            type="transfer",
            status="cleared",
            is_reconciled=False,
            linked_entry_id=6,
            import_hash="abc",
        )

        entry = ledger_entry_to_domain(orm_entry)

        assert isinstance(entry, LedgerEntry)
        assert entry.amount == Decimal("-50.00")
        assert str(entry.amount) == "-50.00"
        assert entry.type == EntryType.TRANSFER
        assert entry.status == EntryStatus.CLEARED
        assert entry.link == Linked(6)
        assert entry.is_transfer
        assert entry.import_hash == "abc"


class TestImportBatchMapper:
    """Tests for ImportBatch mapper."""

    def test_import_batch_to_domain_copies_json(self):
        """Test that JSON columns are copied, not shared."""
        records = [{"row": 1, "verdict": "new"}]
        orm_batch = ORMImportBatch(
            id=1,
            owner_id=1,
            account_id=1,
            filename=None,
            file_type="csv",
            status="analyzed",
            total_rows=1,
            imported_count=0,
            merged_count=0,
            duplicate_count=0,
            skipped_count=0,
            error_count=0,
            config=None,
            records=records,
            processing_log=None,
            error_details=None,
            created_at=datetime.now(UTC),
        )

        batch = import_batch_to_domain(orm_batch)

        assert batch.status == ImportStatus.ANALYZED
        assert batch.config == {}
        assert batch.records == records
        assert batch.records is not records
        assert batch.processing_log == []
