"""
Data Quality - structural checks on assembled transactions.

Rule-based and non-fatal: validate_transactions always returns a
ValidationReport and never raises. Whether a failed report blocks
persistence is the caller's decision.
"""
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from .models import ParsedTransaction, ValidationReport

ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}')


def validate_transactions(transactions: Optional[Iterable[ParsedTransaction]]) -> ValidationReport:
    """
    Check every transaction and collect one message per violated rule.

    Messages are prefixed with the 1-indexed record position. An empty
    input yields a single top-level error instead of per-row errors.
    """
    transactions = list(transactions or [])
    if not transactions:
        return ValidationReport(valid=False, errors=("No transactions found in the file",))

    errors: List[str] = []
    for idx, tx in enumerate(transactions, start=1):
        errors.extend(f"Transaction {idx}: {msg}" for msg in _check(tx))

    if errors:
        logging.info(f"Validation found {len(errors)} issue(s) in {len(transactions)} transaction(s)")
    return ValidationReport(valid=not errors, errors=tuple(errors))


def _check(tx: ParsedTransaction) -> List[str]:
    problems = []

    if not tx.book_date or not tx.book_date.strip():
        problems.append("Missing book date")
    elif not ISO_DATE.match(tx.book_date):
        problems.append(f"Invalid book date format ({tx.book_date})")

    if not tx.reference or not tx.reference.strip():
        problems.append("Missing reference")

    if not tx.description or not tx.description.strip():
        problems.append("Missing description")

    debit = _as_amount(tx.debit)
    credit = _as_amount(tx.credit)
    if debit is None:
        problems.append(f"Invalid debit amount ({tx.debit})")
    if credit is None:
        problems.append(f"Invalid credit amount ({tx.credit})")
    if debit is None or credit is None:
        return problems

    if debit == 0 and credit == 0:
        problems.append("Both debit and credit are zero")
    if debit < 0:
        problems.append(f"Debit amount is negative ({debit})")
    if credit < 0:
        problems.append(f"Credit amount is negative ({credit})")

    return problems


def _as_amount(value) -> Optional[Decimal]:
    """Finite Decimal for an amount field, None when it is NaN, infinite or unparsable."""
    if value is None:
        return Decimal(0)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None
