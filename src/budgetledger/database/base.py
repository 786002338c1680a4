"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

# Import entities directly; domain services import this module
from budgetledger.domain.entities import (
    Owner,
    Account,
    Category,
    Payee,
    LedgerEntry,
    ImportBatch,
)


class Database(ABC):
    """Abstract database interface for budgetledger.

    Every method runs in its own short transaction unless called inside
    ``unit_of_work()``, in which case writes are only flushed and the
    outermost unit of work decides whether to commit or roll back.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Run the enclosed operations atomically.

        The outermost unit of work commits on success and rolls back on any
        exception. Nested units of work are savepoints: an exception inside
        one undoes only its own writes.
        """
        pass

    # Owner operations
    @abstractmethod
    def create_owner(self, name: str) -> int:
        """Create an owner. Returns owner ID."""
        pass

    @abstractmethod
    def get_owner(self, owner_id: int) -> Optional[Owner]:
        """Get owner by ID."""
        pass

    @abstractmethod
    def get_owner_by_name(self, name: str) -> Optional[Owner]:
        """Get owner by name."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, owner_id: int, name: str, bank_name: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: Optional[int] = None) -> list[Account]:
        """List accounts, optionally filtered by owner."""
        pass

    # Category and payee operations
    @abstractmethod
    def create_category(self, owner_id: int, name: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def create_payee(self, owner_id: int, name: str) -> int:
        """Create a payee. Returns payee ID."""
        pass

    @abstractmethod
    def get_payee(self, payee_id: int) -> Optional[Payee]:
        """Get payee by ID."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entry(
        self,
        owner_id: int,
        account_id: int,
        date: date,
        amount: Decimal,
        type: str,
        description: str = "",
        status: str = "pending",
        category_id: Optional[int] = None,
        payee_id: Optional[int] = None,
        notes: Optional[str] = None,
        value_date: Optional[date] = None,
        purchase_date: Optional[date] = None,
        accounting_date: Optional[date] = None,
        linked_entry_id: Optional[int] = None,
        import_id: Optional[int] = None,
        import_hash: Optional[str] = None,
        check_number: Optional[str] = None,
    ) -> int:
        """Create a ledger entry. Returns entry ID.

        Raises:
            ConstraintViolation: If a store constraint rejects the row
        """
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def update_entry(self, entry_id: int, **changes: Any) -> None:
        """Set the given columns on a ledger entry.

        Raises:
            NotFoundError: If the entry does not exist
            ConstraintViolation: If a store constraint rejects the change
        """
        pass

    @abstractmethod
    def delete_entries(self, entry_ids: list[int]) -> None:
        """Delete ledger entries, clearing transfer links between them first."""
        pass

    @abstractmethod
    def find_entry_by_import_hash(self, account_id: int, import_hash: str) -> Optional[LedgerEntry]:
        """Find the entry of an account carrying an import hash, reconciled or not."""
        pass

    @abstractmethod
    def list_match_eligible_entries(self, account_id: int, amount: Decimal) -> list[LedgerEntry]:
        """List non-void, unreconciled entries of an account with ``abs(amount)`` equal."""
        pass

    @abstractmethod
    def list_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
        is_reconciled: Optional[bool] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries with optional filters, newest first."""
        pass

    @abstractmethod
    def set_reconciled(
        self,
        entry_ids: list[int],
        is_reconciled: bool,
        status: str,
        reconciled_at: Optional[datetime],
    ) -> int:
        """Set reconciliation columns on entries. Returns number of rows updated."""
        pass

    # Import batch operations
    @abstractmethod
    def create_import_batch(
        self,
        owner_id: int,
        account_id: int,
        filename: Optional[str],
        file_type: str,
        config: dict[str, Any],
        records: list[dict[str, Any]],
        processing_log: list[str],
        total_rows: int,
    ) -> int:
        """Create an import batch in ``analyzed`` status. Returns batch ID."""
        pass

    @abstractmethod
    def get_import_batch(self, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID."""
        pass

    @abstractmethod
    def update_import_batch(self, batch_id: int, **changes: Any) -> None:
        """Set the given columns on an import batch."""
        pass

    @abstractmethod
    def list_import_batches(
        self, account_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[ImportBatch]:
        """List import batches, newest first."""
        pass
