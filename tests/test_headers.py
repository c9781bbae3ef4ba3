"""Tests for header scoring and column role resolution."""

from backend.statement_etl.headers import find_header_row, resolve_columns, score_header_row
from backend.statement_etl.models import UNRESOLVED

from .conftest import STATEMENT_HEADERS


def test_score_counts_keyword_substrings():
    assert score_header_row(STATEMENT_HEADERS) == 6
    assert score_header_row(["BOOK DATE", "VALUE DATE"]) == 2
    assert score_header_row(["Account", "Jane"]) == 0


def test_find_header_row_picks_best_within_scan_limit():
    rows = [
        ["Statement", ""],
        ["Debit total", "100"],
        STATEMENT_HEADERS,
        ["01/01/2024", "REF1"],
    ]
    assert find_header_row(rows) == (2, 6)


def test_find_header_row_ignores_rows_past_limit():
    rows = [["filler"]] * 10 + [STATEMENT_HEADERS]
    assert find_header_row(rows) == (-1, 0)


def test_find_header_row_tie_keeps_first():
    rows = [["Debit"], ["Credit"]]
    assert find_header_row(rows) == (0, 1)


def test_resolve_columns_standard_headers():
    roles = resolve_columns(STATEMENT_HEADERS)
    assert roles.book_date == 0
    assert roles.reference == 1
    assert roles.description == 2
    assert roles.debit == 3
    assert roles.credit == 4
    assert roles.balance == 5
    assert roles.value_date == UNRESOLVED


def test_candidate_order_beats_column_order():
    roles = resolve_columns(["Value Date", "Book Date", "Narration", "Withdrawal", "Deposit"])
    assert roles.book_date == 1
    assert roles.value_date == 0
    assert roles.description == 2
    assert roles.debit == 3
    assert roles.credit == 4


def test_headers_are_normalized_before_matching():
    roles = resolve_columns(["  DATE ", " Ref No", "Details"])
    assert roles.book_date == 0
    assert roles.reference == 1
    assert roles.description == 2


def test_missing_columns_are_unresolved():
    roles = resolve_columns(["Date", "Details"])
    assert not roles.is_resolved("debit")
    assert not roles.is_resolved("credit")
    assert not roles.is_resolved("balance")
    assert roles.to_dict()["balance"] == UNRESOLVED


def test_short_candidates_match_inside_other_words():
    roles = resolve_columns(["Date", "Description", "Amount"])
    assert roles.description == 1
    assert roles.credit == 1
    assert not roles.is_resolved("debit")

    roles = resolve_columns(["Date", "Address", "Details"])
    assert roles.debit == 1
    assert roles.description == 2
