"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConstraintViolation(DomainError):
    """A write was rejected by a store-level constraint.

    Raised for duplicate import hashes, dangling references and attempts to
    overwrite immutable provenance.
    """


class TransferConsistencyError(DomainError):
    """A transfer transition would leave the two legs out of sync."""


def owner_not_found(owner_id: int) -> str:
    """Return message for missing owner."""
    return f"Owner {owner_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Transaction {entry_id} not found"


def import_batch_not_found(batch_id: int) -> str:
    """Return message for missing import batch."""
    return f"Import {batch_id} not found"


def duplicate_import_hash(import_hash: str, account_id: int) -> str:
    """Return message for an import hash already used on an account."""
    return f"Import hash '{import_hash}' already exists for account {account_id}"


def broken_transfer(entry_id: int, counterpart_id: int) -> str:
    """Return message for a transfer whose counter-leg does not link back."""
    return f"Transfer {entry_id} is linked to {counterpart_id}, which does not link back"
