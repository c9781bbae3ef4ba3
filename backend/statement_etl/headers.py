"""
Header Resolver - header row detection and column role mapping.

Header rows are found by keyword counting; roles are resolved from the
chosen header text through the ordered candidate table in Config.
"""
from typing import List, Sequence, Tuple

from .config import Config
from .models import ColumnRoles, UNRESOLVED


def score_header_row(row: Sequence[str]) -> int:
    """Number of header keywords found as substrings of the joined row text."""
    row_text = ' '.join(str(c) for c in row if c).lower()
    return sum(1 for kw in Config.HEADER_KEYWORDS if kw in row_text)


def find_header_row(rows: Sequence[Sequence[str]]) -> Tuple[int, int]:
    """
    Scan the first HEADER_SCAN_LIMIT rows for the best scoring header.

    Returns (row_index, score). Ties keep the earliest row. A table with no
    row scoring above 0 returns (-1, 0).
    """
    best_index, best_score = -1, 0
    for i, row in enumerate(rows[:Config.HEADER_SCAN_LIMIT]):
        score = score_header_row(row)
        if score > best_score:
            best_index, best_score = i, score
    return best_index, best_score


def normalize_headers(headers: Sequence[str]) -> List[str]:
    return [str(h or '').lower().strip() for h in headers]


def find_column_index(normalized_headers: Sequence[str], candidates: Sequence[str]) -> int:
    # Candidate order takes priority over column order
    for name in candidates:
        for i, header in enumerate(normalized_headers):
            if name in header:
                return i
    return UNRESOLVED


def resolve_columns(headers: Sequence[str]) -> ColumnRoles:
    """Build the ColumnRoles for a document from its raw header strings."""
    normalized = normalize_headers(headers)
    return ColumnRoles(**{
        role: find_column_index(normalized, candidates)
        for role, candidates in Config.COLUMN_ROLES
    })
