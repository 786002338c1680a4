"""Tests for match candidate search and import classification."""

from datetime import date
from decimal import Decimal

import pytest

from budgetledger.domain.classifier import ImportClassifier
from budgetledger.domain.duplicates import DuplicateDetector, compute_import_hash
from budgetledger.domain.entities import RawRecord, Verdict
from budgetledger.domain.matching import MatchCandidateFinder


def _record(amount="-50.00", txn_date=date(2026, 1, 15), description="CARD 1234 GROCERY", row=1):
    amount = Decimal(amount)
    return RawRecord(
        row=row,
        date=txn_date,
        amount=amount,
        description=description,
        hash=compute_import_hash(txn_date, description, amount),
    )


def test_candidates_require_equal_absolute_amount(temp_db, sample_account, add_entry):
    """Test that amount is a hard filter."""
    add_entry("-50.00")
    add_entry("-50.01")
    finder = MatchCandidateFinder(temp_db)

    candidates = finder.find_candidates(sample_account.id, _record("-50.00"))

    assert len(candidates) == 1
    assert candidates[0].entry.amount == Decimal("-50.00")


def test_candidates_match_opposite_sign(temp_db, sample_account, add_entry):
    """Test that the absolute amount is compared."""
    entry_id = add_entry("50.00")
    finder = MatchCandidateFinder(temp_db)

    candidates = finder.find_candidates(sample_account.id, _record("-50.00"))

    assert [c.entry.id for c in candidates] == [entry_id]


def test_candidates_ranked_by_date_distance(temp_db, sample_account, add_entry):
    """Test that the closest date ranks first, ties broken by id."""
    far = add_entry(txn_date=date(2026, 1, 5))
    near_a = add_entry(txn_date=date(2026, 1, 14))
    near_b = add_entry(txn_date=date(2026, 1, 16))
    finder = MatchCandidateFinder(temp_db)

    candidates = finder.find_candidates(sample_account.id, _record())

    assert [c.entry.id for c in candidates] == [near_a, near_b, far]
    assert [c.date_distance for c in candidates] == [1, 1, 10]
    assert finder.find_best_match(sample_account.id, _record()).entry.id == near_a


def test_candidates_exclude_reconciled_and_void(
    temp_db, sample_account, add_entry, reconciliation_service, transaction_service
):
    """Test that reconciled and void entries are never candidates."""
    reconciled = add_entry()
    voided = add_entry()
    reconciliation_service.toggle(reconciled)
    transaction_service.update_transaction(voided, status="void")
    finder = MatchCandidateFinder(temp_db)

    assert finder.find_candidates(sample_account.id, _record()) == []
    assert finder.find_best_match(sample_account.id, _record()) is None


def test_candidates_scoped_to_account(temp_db, sample_account, savings_account, add_entry):
    """Test that entries of other accounts are not candidates."""
    add_entry(account_id=savings_account.id)
    finder = MatchCandidateFinder(temp_db)

    assert finder.find_candidates(sample_account.id, _record()) == []


def test_date_tolerance(temp_db, sample_account, add_entry):
    """Test that a date tolerance drops far candidates."""
    add_entry(txn_date=date(2026, 1, 1))
    near = add_entry(txn_date=date(2026, 1, 13))

    unbounded = MatchCandidateFinder(temp_db).find_candidates(sample_account.id, _record())
    bounded = MatchCandidateFinder(temp_db, date_tolerance_days=3).find_candidates(
        sample_account.id, _record()
    )

    assert len(unbounded) == 2
    assert [c.entry.id for c in bounded] == [near]


def test_negative_date_tolerance_rejected(temp_db):
    """Test that a negative tolerance is refused."""
    with pytest.raises(ValueError, match="negative"):
        MatchCandidateFinder(temp_db, date_tolerance_days=-1)


@pytest.fixture
def classifier(temp_db):
    return ImportClassifier(DuplicateDetector(temp_db), MatchCandidateFinder(temp_db))


def test_classify_new(classifier, sample_account):
    """Test that a record with no hash hit and no candidate is new."""
    result = classifier.classify(sample_account.id, _record())

    assert result.verdict == Verdict.NEW
    assert result.matched_entry is None


def test_classify_match(classifier, sample_account, add_entry):
    """Test that a bank record one day after a manual entry is a match."""
    entry_id = add_entry("-50.00", txn_date=date(2026, 1, 14))

    result = classifier.classify(sample_account.id, _record("-50.00", date(2026, 1, 15)))

    assert result.verdict == Verdict.MATCH
    assert result.matched_entry.id == entry_id


def test_classify_reconciled_entry_gives_new(
    classifier, sample_account, add_entry, reconciliation_service
):
    """Test that a reconciled manual entry is not offered as a match."""
    entry_id = add_entry("-50.00", txn_date=date(2026, 1, 14))
    reconciliation_service.toggle(entry_id)

    result = classifier.classify(sample_account.id, _record("-50.00", date(2026, 1, 15)))

    assert result.verdict == Verdict.NEW


def test_classify_duplicate_wins_over_match(
    temp_db, classifier, sample_owner, sample_account, add_entry
):
    """Test that a hash hit is a duplicate even when a match exists."""
    record = _record()
    add_entry("-50.00", txn_date=date(2026, 1, 14))
    imported = temp_db.create_entry(
        owner_id=sample_owner.id,
        account_id=sample_account.id,
        date=record.date,
        amount=record.amount,
        type="expense",
        description=record.description,
        import_hash=record.hash,
    )

    result = classifier.classify(sample_account.id, record)

    assert result.verdict == Verdict.DUPLICATE
    assert result.matched_entry.id == imported


def test_classify_all_does_not_reserve_candidates(classifier, sample_account, add_entry):
    """Test that two records can both be offered the same manual entry."""
    entry_id = add_entry("-50.00")
    records = [
        _record("-50.00", date(2026, 1, 15), "first", row=1),
        _record("-50.00", date(2026, 1, 16), "second", row=2),
    ]

    results = classifier.classify_all(sample_account.id, records)

    assert [r.verdict for r in results] == [Verdict.MATCH, Verdict.MATCH]
    assert {r.matched_entry.id for r in results} == {entry_id}
