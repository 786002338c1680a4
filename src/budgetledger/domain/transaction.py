"""Transaction domain service."""

from typing import Any, Optional
from datetime import date
from decimal import Decimal
from budgetledger.database.base import Database
from budgetledger.domain.entities import EntryStatus, EntryType, LedgerEntry
from budgetledger.domain.errors import (
    NotFoundError,
    TransferConsistencyError,
    ValidationError,
    account_not_found,
    entry_not_found,
)
from budgetledger.domain.transfers import TransferLedgerManager

# Distinguishes "leave the destination alone" from "clear the destination"
UNSET: Any = object()

EDITABLE_STATUSES = {EntryStatus.PENDING, EntryStatus.CLEARED, EntryStatus.VOID}


def signed_amount(amount: Decimal, entry_type: EntryType) -> Decimal:
    """Apply the ledger sign convention for an entry type.

    Expenses are stored negative and income positive. Transfer amounts keep
    the sign they were given; the counter-leg carries the opposite sign.
    """
    if entry_type == EntryType.EXPENSE:
        return -abs(amount)
    if entry_type == EntryType.INCOME:
        return abs(amount)
    return amount


def _coerce_type(value: EntryType | str) -> EntryType:
    try:
        return EntryType(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction type '{value}'") from None


def _coerce_status(value: EntryStatus | str) -> EntryStatus:
    try:
        status = EntryStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction status '{value}'") from None
    if status not in EDITABLE_STATUSES:
        raise ValidationError("Use reconciliation to mark a transaction as reconciled")
    return status


class TransactionService:
    """Service for managing ledger entries entered by hand."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transfers = TransferLedgerManager(db)

    def _check_references(
        self,
        owner_id: int,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        payee_id: Optional[int] = None,
    ) -> None:
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            if account.owner_id != owner_id:
                raise ValidationError(f"Account {account_id} belongs to another owner")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")
        if payee_id is not None and self.db.get_payee(payee_id) is None:
            raise NotFoundError(f"Payee {payee_id} not found")

    def create_transaction(
        self,
        owner_id: int,
        account_id: int,
        date: date,
        amount: Decimal,
        type: EntryType | str = EntryType.EXPENSE,
        description: str = "",
        status: EntryStatus | str = EntryStatus.PENDING,
        category_id: Optional[int] = None,
        payee_id: Optional[int] = None,
        notes: Optional[str] = None,
        value_date: Optional[date] = None,
        purchase_date: Optional[date] = None,
        accounting_date: Optional[date] = None,
        check_number: Optional[str] = None,
        to_account_id: Optional[int] = None,
    ) -> int:
        """Create a transaction.

        Args:
            owner_id: Owning user
            account_id: Account ID
            date: Transaction date
            amount: Transaction amount; its sign is normalized for income/expense
            type: income, expense or transfer
            description: Description
            status: pending, cleared or void
            category_id: Optional category ID
            payee_id: Optional payee ID
            notes: Optional notes
            value_date: Optional bank value date
            purchase_date: Optional purchase date
            accounting_date: Optional accounting date
            check_number: Optional check number
            to_account_id: Destination account for a linked transfer

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the type, status or destination is invalid
            NotFoundError: If a referenced account, category or payee is missing
            TransferConsistencyError: If the transfer cannot be linked
        """
        entry_type = _coerce_type(type)
        entry_status = _coerce_status(status)
        if to_account_id is not None and entry_type != EntryType.TRANSFER:
            raise ValidationError("Only transfers can have a destination account")
        self._check_references(owner_id, account_id, category_id, payee_id)

        with self.db.unit_of_work():
            entry_id = self.db.create_entry(
                owner_id=owner_id,
                account_id=account_id,
                date=date,
                amount=signed_amount(amount, entry_type),
                type=entry_type.value,
                description=description or "",
                status=entry_status.value,
                category_id=category_id,
                payee_id=payee_id,
                notes=notes,
                value_date=value_date,
                purchase_date=purchase_date,
                accounting_date=accounting_date,
                check_number=check_number,
            )
            if to_account_id is not None:
                self.transfers.link(entry_id, to_account_id)

        return entry_id

    def get_transaction(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_entry(transaction_id)

    def update_transaction(
        self,
        transaction_id: int,
        account_id: Optional[int] = None,
        date: Optional[date] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        type: Optional[EntryType | str] = None,
        status: Optional[EntryStatus | str] = None,
        category_id: Optional[int] = None,
        payee_id: Optional[int] = None,
        notes: Optional[str] = None,
        check_number: Optional[str] = None,
        to_account_id: Any = UNSET,
    ) -> LedgerEntry:
        """Update transaction fields.

        Only provided fields change. On a linked transfer, description, date
        and amount are mirrored onto the other leg. ``to_account_id`` links,
        retargets (another account) or unlinks (None) a transfer; changing the
        type away from transfer removes the counter-leg.

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction or a referenced row is missing
            ValidationError: If the type, status or destination is invalid
            TransferConsistencyError: If the change would break the transfer pair
        """
        entry = self.db.get_entry(transaction_id)
        if entry is None:
            raise NotFoundError(entry_not_found(transaction_id))
        if status is not None and entry.is_reconciled:
            raise ValidationError(f"Un-reconcile transaction {transaction_id} before changing its status")

        new_type = _coerce_type(type) if type is not None else entry.type
        if to_account_id is not UNSET and to_account_id is not None and new_type != EntryType.TRANSFER:
            raise ValidationError("Only transfers can have a destination account")
        self._check_references(entry.owner_id, account_id, category_id, payee_id)

        changes: dict[str, Any] = {}
        if account_id is not None and account_id != entry.account_id:
            counterpart = self.transfers.counterpart(transaction_id)
            if counterpart is not None and counterpart.account_id == account_id and new_type == EntryType.TRANSFER:
                raise TransferConsistencyError(
                    f"Transfer {transaction_id} cannot have account {account_id} on both legs"
                )
            changes["account_id"] = account_id
        if date is not None:
            changes["date"] = date
        if description is not None:
            changes["description"] = description
        if status is not None:
            changes["status"] = _coerce_status(status).value
        if category_id is not None:
            changes["category_id"] = category_id
        if payee_id is not None:
            changes["payee_id"] = payee_id
        if notes is not None:
            changes["notes"] = notes
        if check_number is not None:
            changes["check_number"] = check_number
        if type is not None:
            changes["type"] = new_type.value
        if amount is not None:
            changes["amount"] = signed_amount(amount, new_type)
        elif new_type != entry.type:
            changes["amount"] = signed_amount(entry.amount, new_type)

        with self.db.unit_of_work():
            if new_type != EntryType.TRANSFER or to_account_id is None:
                self.transfers.unlink(transaction_id)
            if changes:
                self.db.update_entry(transaction_id, **changes)
            if new_type == EntryType.TRANSFER:
                if to_account_id is not UNSET and to_account_id is not None:
                    self.transfers.link(transaction_id, to_account_id)
                self.transfers.sync_counterpart(transaction_id)

        return self.db.get_entry(transaction_id)

    def delete_transaction(self, transaction_id: int) -> list[int]:
        """Delete a transaction; both legs for a linked transfer.

        Returns:
            IDs of the deleted entries

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        return self.transfers.delete(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[EntryStatus | str] = None,
        is_reconciled: Optional[bool] = None,
    ) -> list[LedgerEntry]:
        """List transactions with filters, newest first."""
        status_value = EntryStatus(status).value if status is not None else None
        return self.db.list_entries(
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            status=status_value,
            is_reconciled=is_reconciled,
        )
