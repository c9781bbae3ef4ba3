"""Tests for transaction validation."""

from decimal import Decimal

import pytest

from backend.statement_etl.dq import validate_transactions
from backend.statement_etl.models import ParsedTransaction


def make_tx(**overrides):
    fields = dict(
        book_date="2024-03-01",
        reference="ABC12345",
        description="Shop payment",
        debit=Decimal("0"),
        credit=Decimal("150.00"),
    )
    fields.update(overrides)
    return ParsedTransaction(**fields)


def test_valid_transaction_passes():
    report = validate_transactions([make_tx()])
    assert report.valid
    assert report.errors == ()


def test_zero_debit_and_credit_is_flagged():
    report = validate_transactions([make_tx(credit=Decimal("0"))])
    assert not report.valid
    assert report.errors == ("Transaction 1: Both debit and credit are zero",)


@pytest.mark.parametrize("transactions", [[], None])
def test_empty_input_is_single_error(transactions):
    report = validate_transactions(transactions)
    assert not report.valid
    assert report.errors == ("No transactions found in the file",)


def test_messages_are_one_indexed_per_rule():
    report = validate_transactions([
        make_tx(),
        make_tx(book_date="", reference="  ", description=""),
        make_tx(book_date="01/03/2024", debit=Decimal("-5.00"), credit=Decimal("-1.00")),
    ])
    assert not report.valid
    assert report.errors == (
        "Transaction 2: Missing book date",
        "Transaction 2: Missing reference",
        "Transaction 2: Missing description",
        "Transaction 3: Invalid book date format (01/03/2024)",
        "Transaction 3: Debit amount is negative (-5.00)",
        "Transaction 3: Credit amount is negative (-1.00)",
    )


def test_report_to_dict():
    report = validate_transactions([make_tx(reference="")])
    assert report.to_dict() == {"valid": False, "errors": ["Transaction 1: Missing reference"]}


def test_from_dict_round_trip_is_validated():
    tx = ParsedTransaction.from_dict({
        "bookDate": "2024-03-01",
        "reference": "R1",
        "description": "Fee",
        "debit": 2.5,
        "credit": 0,
        "closingBalance": None,
    })
    assert tx.debit == Decimal("2.5")
    assert tx.closing_balance is None
    assert validate_transactions([tx]).valid


def test_from_dict_rejects_bad_amount():
    with pytest.raises(ValueError):
        ParsedTransaction.from_dict({"bookDate": "2024-03-01", "debit": "ten"})


@pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity", "sNaN"])
def test_from_dict_rejects_non_finite_amount(raw):
    with pytest.raises(ValueError):
        ParsedTransaction.from_dict({"bookDate": "2024-03-01", "debit": raw})


def test_non_finite_amounts_are_reported_not_raised():
    report = validate_transactions([
        make_tx(debit=Decimal("NaN")),
        make_tx(debit=Decimal("sNaN"), credit=Decimal("Infinity")),
    ])
    assert not report.valid
    assert report.errors == (
        "Transaction 1: Invalid debit amount (NaN)",
        "Transaction 2: Invalid debit amount (sNaN)",
        "Transaction 2: Invalid credit amount (Infinity)",
    )
