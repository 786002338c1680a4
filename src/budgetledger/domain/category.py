"""Category and payee domain services.

Entries only reference these by ID; import review uses them to override the
category or payee of a record before it is committed.
"""

from typing import Optional
from budgetledger.database.base import Database
from budgetledger.domain.entities import Category, Payee
from budgetledger.domain.errors import NotFoundError, ValidationError, owner_not_found


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        self.db = db

    def create_category(self, owner_id: int, name: str) -> int:
        """Create a category for an owner. Returns category ID."""
        if not name or not name.strip():
            raise ValidationError("Category name cannot be empty")
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))
        return self.db.create_category(owner_id=owner_id, name=name.strip())

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.get_category(category_id)


class PayeeService:
    """Service for managing payees."""

    def __init__(self, db: Database):
        self.db = db

    def create_payee(self, owner_id: int, name: str) -> int:
        """Create a payee for an owner. Returns payee ID."""
        if not name or not name.strip():
            raise ValidationError("Payee name cannot be empty")
        if self.db.get_owner(owner_id) is None:
            raise NotFoundError(owner_not_found(owner_id))
        return self.db.create_payee(owner_id=owner_id, name=name.strip())

    def get_payee(self, payee_id: int) -> Optional[Payee]:
        return self.db.get_payee(payee_id)
