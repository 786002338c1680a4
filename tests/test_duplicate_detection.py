"""Tests for import hashing and duplicate detection."""

from datetime import date, datetime
from decimal import Decimal

from budgetledger.domain.duplicates import DuplicateDetector, compute_import_hash


def _imported_entry(db, owner, account, import_hash, amount="-50.00"):
    return db.create_entry(
        owner_id=owner.id,
        account_id=account.id,
        date=date(2026, 1, 15),
        amount=Decimal(amount),
        type="expense",
        description="Grocery store",
        import_hash=import_hash,
    )


def test_hash_is_stable():
    """Test that the same movement always hashes the same."""
    first = compute_import_hash(date(2026, 1, 15), "Grocery store", Decimal("-50.00"))
    second = compute_import_hash(date(2026, 1, 15), "Grocery store", Decimal("-50.00"))

    assert first == second
    assert len(first) == 32


def test_hash_ignores_description_noise():
    """Test that case, accents, punctuation and spacing do not change the hash."""
    plain = compute_import_hash(date(2026, 1, 15), "cb cafe dupont", Decimal("-4.5"))
    noisy = compute_import_hash(date(2026, 1, 15), "CB  Café-Dupont ", Decimal("-4.50"))

    assert plain == noisy


def test_hash_depends_on_date_and_amount():
    """Test that date and amount are part of the hash."""
    base = compute_import_hash(date(2026, 1, 15), "Grocery store", Decimal("-50.00"))

    assert base != compute_import_hash(date(2026, 1, 16), "Grocery store", Decimal("-50.00"))
    assert base != compute_import_hash(date(2026, 1, 15), "Grocery store", Decimal("50.00"))


def test_find_duplicate(temp_db, sample_owner, sample_account):
    """Test finding an entry by the hash it was imported with."""
    entry_id = _imported_entry(temp_db, sample_owner, sample_account, "abc123")
    detector = DuplicateDetector(temp_db)

    duplicate = detector.find_duplicate(sample_account.id, "abc123")

    assert duplicate is not None
    assert duplicate.id == entry_id
    assert detector.is_duplicate(sample_account.id, "abc123")
    assert not detector.is_duplicate(sample_account.id, "other")


def test_find_duplicate_scoped_to_account(temp_db, sample_owner, sample_account, savings_account):
    """Test that a hash on another account is not a duplicate."""
    _imported_entry(temp_db, sample_owner, savings_account, "abc123")
    detector = DuplicateDetector(temp_db)

    assert detector.find_duplicate(sample_account.id, "abc123") is None


def test_find_duplicate_includes_reconciled(temp_db, sample_owner, sample_account):
    """Test that reconciling an entry does not make its record importable again."""
    entry_id = _imported_entry(temp_db, sample_owner, sample_account, "abc123")
    temp_db.set_reconciled([entry_id], True, "reconciled", datetime(2026, 1, 20))
    detector = DuplicateDetector(temp_db)

    assert detector.is_duplicate(sample_account.id, "abc123")


def test_empty_hash_is_never_duplicate(temp_db, sample_owner, sample_account):
    """Test that an empty hash matches nothing."""
    detector = DuplicateDetector(temp_db)

    assert detector.find_duplicate(sample_account.id, "") is None
