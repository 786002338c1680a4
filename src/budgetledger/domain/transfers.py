"""Transfer ledger manager.

A transfer between two known accounts is stored as two ledger entries (legs)
with mutual ``linked_entry_id`` and opposite amounts. A transfer with an
external or unknown counter-account is a single unlinked entry.

Every public operation runs in one unit of work, so a failure at any step
leaves both legs exactly as they were.
"""

from typing import Optional

from budgetledger.database.base import Database
from budgetledger.domain.entities import EntryStatus, EntryType, LedgerEntry, Linked, Unlinked
from budgetledger.domain.errors import (
    NotFoundError,
    TransferConsistencyError,
    account_not_found,
    broken_transfer,
    entry_not_found,
)
from budgetledger.logger import get_logger

logger = get_logger(__name__)


class TransferLedgerManager:
    """Maintains the two-leg invariant of linked transfers."""

    def __init__(self, db: Database):
        """Initialize transfer ledger manager.

        Args:
            db: Database instance
        """
        self.db = db

    def _get(self, entry_id: int) -> LedgerEntry:
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def _verified_counterpart(
        self, entry: LedgerEntry, counterpart_id: int, check_amount: bool = True
    ) -> LedgerEntry:
        """Load the other leg and check that it links back, optionally with the opposite amount."""
        other = self.db.get_entry(counterpart_id)
        if other is None or other.linked_entry_id != entry.id:
            raise TransferConsistencyError(broken_transfer(entry.id, counterpart_id))
        if other.type != EntryType.TRANSFER or entry.type != EntryType.TRANSFER:
            raise TransferConsistencyError(f"Transfer legs {entry.id} and {other.id} must both be transfers")
        if check_amount and other.amount != -entry.amount:
            raise TransferConsistencyError(
                f"Transfer legs {entry.id} and {other.id} have amounts {entry.amount} and {other.amount}"
            )
        return other

    def counterpart(self, entry_id: int) -> Optional[LedgerEntry]:
        """Return the other leg of a linked transfer, or None when unlinked.

        Raises:
            NotFoundError: If the entry does not exist
            TransferConsistencyError: If the stored pair is broken
        """
        entry = self._get(entry_id)
        match entry.link:
            case Unlinked():
                return None
            case Linked(counterpart_id=counterpart_id):
                return self._verified_counterpart(entry, counterpart_id)

    def _create_counter_leg(self, entry: LedgerEntry, destination_account_id: int) -> int:
        status = entry.status
        if status == EntryStatus.RECONCILED:
            # the new leg has not been reconciled against its own statement
            status = EntryStatus.CLEARED
        leg_id = self.db.create_entry(
            owner_id=entry.owner_id,
            account_id=destination_account_id,
            date=entry.date,
            amount=-entry.amount,
            type=EntryType.TRANSFER.value,
            description=entry.description,
            status=status.value,
            category_id=entry.category_id,
            payee_id=entry.payee_id,
            notes=entry.notes,
            linked_entry_id=entry.id,
        )
        self.db.update_entry(entry.id, linked_entry_id=leg_id)
        return leg_id

    def link(self, entry_id: int, destination_account_id: int) -> LedgerEntry:
        """Point a transfer at a destination account.

        Unlinked transfers get a new counter-leg. Linked transfers whose
        counter-leg lives on another account are retargeted: the old leg is
        deleted and a new one is created, keeping ``entry_id``. Linking to the
        account the counter-leg already lives on changes nothing.

        Returns:
            The originating entry after the transition

        Raises:
            NotFoundError: If the entry or destination account does not exist
            TransferConsistencyError: If the entry is not a transfer, the
                destination is the entry's own account or another owner's account
        """
        with self.db.unit_of_work():
            entry = self._get(entry_id)
            if entry.type != EntryType.TRANSFER:
                raise TransferConsistencyError(f"Transaction {entry_id} is not a transfer")
            if destination_account_id == entry.account_id:
                raise TransferConsistencyError(
                    f"Transfer {entry_id} cannot have account {destination_account_id} on both legs"
                )
            destination = self.db.get_account(destination_account_id)
            if destination is None:
                raise NotFoundError(account_not_found(destination_account_id))
            if destination.owner_id != entry.owner_id:
                raise TransferConsistencyError(
                    f"Account {destination_account_id} does not belong to the owner of transfer {entry_id}"
                )

            match entry.link:
                case Unlinked():
                    leg_id = self._create_counter_leg(entry, destination_account_id)
                    logger.info("transfer linked", entry_id=entry_id, counterpart_id=leg_id)
                case Linked(counterpart_id=counterpart_id):
                    current = self._verified_counterpart(entry, counterpart_id, check_amount=False)
                    if current.account_id == destination_account_id:
                        return entry
                    self.db.update_entry(entry.id, linked_entry_id=None)
                    self.db.delete_entries([current.id])
                    leg_id = self._create_counter_leg(self._get(entry_id), destination_account_id)
                    logger.info(
                        "transfer retargeted",
                        entry_id=entry_id,
                        old_counterpart_id=current.id,
                        counterpart_id=leg_id,
                    )

        return self._get(entry_id)

    def unlink(self, entry_id: int) -> LedgerEntry:
        """Delete the counter-leg of a linked transfer, keeping ``entry_id``.

        Unlinked entries are returned unchanged.
        """
        with self.db.unit_of_work():
            entry = self._get(entry_id)
            match entry.link:
                case Unlinked():
                    return entry
                case Linked(counterpart_id=counterpart_id):
                    other = self._verified_counterpart(entry, counterpart_id, check_amount=False)
                    self.db.update_entry(entry.id, linked_entry_id=None)
                    self.db.delete_entries([other.id])
                    logger.info("transfer unlinked", entry_id=entry_id, deleted_counterpart_id=other.id)

        return self._get(entry_id)

    def sync_counterpart(self, entry_id: int) -> Optional[LedgerEntry]:
        """Copy description and date to the other leg and mirror the amount.

        Call after updating shared fields on one leg. The counter-leg's own
        link is checked, but its amount is not, since it is about to be
        overwritten.

        Returns:
            The updated counter-leg, or None for unlinked entries
        """
        with self.db.unit_of_work():
            entry = self._get(entry_id)
            match entry.link:
                case Unlinked():
                    return None
                case Linked(counterpart_id=counterpart_id):
                    other = self.db.get_entry(counterpart_id)
                    if other is None or other.linked_entry_id != entry.id:
                        raise TransferConsistencyError(broken_transfer(entry.id, counterpart_id))
                    self.db.update_entry(
                        other.id,
                        description=entry.description,
                        date=entry.date,
                        amount=-entry.amount,
                    )
                    counterpart = other.id

        return self._get(counterpart)

    def delete(self, entry_id: int) -> list[int]:
        """Delete an entry and, for linked transfers, its counter-leg.

        Returns:
            IDs of the deleted entries
        """
        with self.db.unit_of_work():
            entry = self._get(entry_id)
            match entry.link:
                case Unlinked():
                    deleted = [entry.id]
                case Linked(counterpart_id=counterpart_id):
                    other = self.db.get_entry(counterpart_id)
                    if other is None or other.linked_entry_id != entry.id:
                        raise TransferConsistencyError(broken_transfer(entry.id, counterpart_id))
                    deleted = [entry.id, other.id]
            self.db.delete_entries(deleted)

        logger.info("transactions deleted", entry_ids=deleted)
        return deleted
