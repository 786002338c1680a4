"""Owner and account domain service."""

from typing import Optional
from budgetledger.database.base import Database
from budgetledger.domain.entities import Account as AccountEntity, Owner as OwnerEntity
from budgetledger.domain.errors import ConflictError, NotFoundError, ValidationError, owner_not_found


class AccountService:
    """Service for managing owners and their accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_owner(self, name: str) -> int:
        """Create a ledger owner.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If an owner with that name exists
        """
        if not name or not name.strip():
            raise ValidationError("Owner name cannot be empty")
        if self.db.get_owner_by_name(name) is not None:
            raise ConflictError(f"Owner '{name}' already exists")
        return self.db.create_owner(name=name)

    def get_owner(self, owner_id: int) -> Optional[OwnerEntity]:
        return self.db.get_owner(owner_id)

    def get_owner_by_name(self, name: str) -> Optional[OwnerEntity]:
        return self.db.get_owner_by_name(name)

    def create_account(self, owner_id: int, name: str, bank_name: str) -> int:
        """Create a new account.

        Args:
            owner_id: Owning user
            name: Account name, unique per owner
            bank_name: Bank name

        Returns:
            Account ID

        Raises:
            NotFoundError: If the owner does not exist
            ConflictError: If the owner already has an account with that name
        """
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))

        for acc in self.db.list_accounts(owner_id=owner_id):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(owner_id=owner_id, name=name, bank_name=bank_name)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID, or None if not found."""
        return self.db.get_account(account_id)

    def list_accounts(self, owner_id: Optional[int] = None) -> list[AccountEntity]:
        """List accounts, optionally only those of one owner."""
        return self.db.list_accounts(owner_id=owner_id)
