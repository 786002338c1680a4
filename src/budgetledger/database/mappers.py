"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the ledger services never see
ORM rows and the schema can change without touching business rules.
"""

from decimal import Decimal

from budgetledger.domain import entities as domain
from budgetledger.utils.amount_parser import CENT
from budgetledger.database.models import (
    Owner as ORMOwner,
    Account as ORMAccount,
    Category as ORMCategory,
    Payee as ORMPayee,
    LedgerEntry as ORMLedgerEntry,
    ImportBatch as ORMImportBatch,
)


def owner_to_domain(orm_owner: ORMOwner) -> domain.Owner:
    """Convert SQLAlchemy Owner model to domain Owner entity."""
    return domain.Owner(
        id=orm_owner.id,
        name=orm_owner.name,
        created_at=orm_owner.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        owner_id=orm_category.owner_id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def payee_to_domain(orm_payee: ORMPayee) -> domain.Payee:
    """Convert SQLAlchemy Payee model to domain Payee entity."""
    return domain.Payee(
        id=orm_payee.id,
        owner_id=orm_payee.owner_id,
        name=orm_payee.name,
        created_at=orm_payee.created_at,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        owner_id=orm_entry.owner_id,
        account_id=orm_entry.account_id,
        amount=Decimal(orm_entry.amount).quantize(CENT),
        description=orm_entry.description,
        date=orm_entry.date,
        type=domain.EntryType(orm_entry.type),
        status=domain.EntryStatus(orm_entry.status),
        is_reconciled=bool(orm_entry.is_reconciled),
        reconciled_at=orm_entry.reconciled_at,
        linked_entry_id=orm_entry.linked_entry_id,
        category_id=orm_entry.category_id,
        payee_id=orm_entry.payee_id,
        notes=orm_entry.notes,
        value_date=orm_entry.value_date,
        purchase_date=orm_entry.purchase_date,
        accounting_date=orm_entry.accounting_date,
        import_id=orm_entry.import_id,
        import_hash=orm_entry.import_hash,
        check_number=orm_entry.check_number,
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        id=orm_batch.id,
        owner_id=orm_batch.owner_id,
        account_id=orm_batch.account_id,
        filename=orm_batch.filename,
        file_type=orm_batch.file_type,
        status=domain.ImportStatus(orm_batch.status),
        total_rows=orm_batch.total_rows,
        imported_count=orm_batch.imported_count,
        merged_count=orm_batch.merged_count,
        duplicate_count=orm_batch.duplicate_count,
        skipped_count=orm_batch.skipped_count,
        error_count=orm_batch.error_count,
        config=dict(orm_batch.config or {}),
        records=list(orm_batch.records or []),
        processing_log=list(orm_batch.processing_log or []),
        error_details=list(orm_batch.error_details or []),
        created_at=orm_batch.created_at,
        started_at=orm_batch.started_at,
        completed_at=orm_batch.completed_at,
    )
