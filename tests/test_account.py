"""Tests for owner, account, category and payee services."""

import pytest

from budgetledger.domain.errors import ConflictError, NotFoundError, ValidationError
from budgetledger.utils.account_resolver import resolve_account


def test_create_owner(account_service):
    """Test creating and reading an owner."""
    owner_id = account_service.create_owner("alice")

    owner = account_service.get_owner(owner_id)
    assert owner.name == "alice"
    assert account_service.get_owner_by_name("alice") == owner


def test_create_owner_blank(account_service):
    """Test that an owner needs a name."""
    with pytest.raises(ValidationError):
        account_service.create_owner("  ")


def test_create_owner_duplicate(account_service, sample_owner):
    """Test that owner names are unique."""
    with pytest.raises(ConflictError):
        account_service.create_owner("alice")


def test_create_account(account_service, sample_owner):
    """Test creating an account."""
    account_id = account_service.create_account(owner_id=sample_owner.id, name="Checking", bank_name="Bank")

    account = account_service.get_account(account_id)
    assert account.name == "Checking"
    assert account.bank_name == "Bank"
    assert account.owner_id == sample_owner.id


def test_create_account_unknown_owner(account_service):
    """Test creating an account for a missing owner."""
    with pytest.raises(NotFoundError):
        account_service.create_account(owner_id=999, name="Checking", bank_name="Bank")


def test_create_account_duplicate_name(account_service, sample_account):
    """Test that account names are unique per owner."""
    with pytest.raises(ConflictError):
        account_service.create_account(owner_id=sample_account.owner_id, name="Checking", bank_name="Other")


def test_same_account_name_for_two_owners(account_service, sample_account):
    """Test that two owners may both have a 'Checking' account."""
    bob = account_service.create_owner("bob")

    account_id = account_service.create_account(owner_id=bob, name="Checking", bank_name="Bank")

    assert account_id != sample_account.id


def test_list_accounts_by_owner(account_service, sample_account, savings_account):
    """Test listing the accounts of one owner."""
    bob = account_service.create_owner("bob")
    account_service.create_account(owner_id=bob, name="Bob Checking", bank_name="Bank")

    names = {a.name for a in account_service.list_accounts(owner_id=sample_account.owner_id)}

    assert names == {"Checking", "Savings"}
    assert len(account_service.list_accounts()) == 3


def test_resolve_account_by_name_and_id(account_service, sample_account):
    """Test resolving accounts by name or ID."""
    assert resolve_account(account_service, "Checking") == sample_account.id
    assert resolve_account(account_service, str(sample_account.id)) == sample_account.id
    assert resolve_account(account_service, sample_account.id) == sample_account.id


def test_resolve_account_missing(account_service, sample_account):
    """Test resolving an unknown account."""
    with pytest.raises(NotFoundError):
        resolve_account(account_service, "Nope")
    with pytest.raises(NotFoundError):
        resolve_account(account_service, 999)


def test_resolve_account_ambiguous(account_service, sample_account):
    """Test that a name shared by two owners needs the owner or the ID."""
    bob = account_service.create_owner("bob")
    bobs = account_service.create_account(owner_id=bob, name="Checking", bank_name="Bank")

    with pytest.raises(ValidationError, match="ambiguous"):
        resolve_account(account_service, "Checking")
    assert resolve_account(account_service, "Checking", owner_id=bob) == bobs


def test_categories_and_payees(category_service, payee_service, sample_owner):
    """Test creating categories and payees."""
    category_id = category_service.create_category(sample_owner.id, " Groceries ")
    payee_id = payee_service.create_payee(sample_owner.id, "Corner Shop")

    assert category_service.get_category(category_id).name == "Groceries"
    assert payee_service.get_payee(payee_id).name == "Corner Shop"
    assert category_service.get_category(999) is None


def test_category_validation(category_service, payee_service, sample_owner):
    """Test category and payee validation."""
    with pytest.raises(ValidationError):
        category_service.create_category(sample_owner.id, "")
    with pytest.raises(NotFoundError):
        category_service.create_category(999, "Groceries")
    with pytest.raises(ValidationError):
        payee_service.create_payee(sample_owner.id, " ")
