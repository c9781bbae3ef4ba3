"""
Continuation Merger - physical rows to logical transaction rows.

Statement exports wrap long descriptions onto extra lines whose date and
amount cells are blank. A row whose first cell holds a date starts a new
block; every following row without a date is folded into that block.
"""
import logging
import re
from typing import List, Sequence

from .config import Config
from .models import ColumnRoles, RawGrid

DATE_PATTERN = re.compile(
    r'\b(\d{1,2}[-/]\d{1,2}[-/]\d{2,4}'
    r'|\d{1,2}\s+[A-Za-z]{3,9}\.?\s+\d{2,4}'
    r'|\d{4}[-/]\d{1,2}[-/]\d{1,2})\b'
)
AMOUNT_PATTERN = re.compile(r'\b\d{1,3}(,\d{3})*(\.\d{2})?\b')
BOILERPLATE_PATTERN = re.compile('|'.join(Config.BOILERPLATE_PATTERNS), re.I)

AMOUNT_ROLES = ("debit", "credit", "balance")


def is_block_start(row: Sequence[str]) -> bool:
    return bool(row) and bool(DATE_PATTERN.search(row[0] or ''))


def is_boilerplate(row: Sequence[str]) -> bool:
    return bool(BOILERPLATE_PATTERN.search(' '.join(row)))


def pad_rows(grid: RawGrid) -> List[List[str]]:
    """Right-pad every row to the grid width with trimmed cell text."""
    width = grid.width
    return [
        [(row[i] or '').strip() if i < len(row) else '' for i in range(width)]
        for row in grid.rows
    ]


class ContinuationMerger:
    """
    Groups physical rows into logical rows.

    Rows are read from an owned padded copy and blocks are appended to a
    separate output buffer, so a block never aliases a source row.
    """

    def __init__(self, roles: ColumnRoles):
        self.roles = roles
        self.description_index = (
            roles.description if roles.is_resolved("description") else Config.DEFAULT_DESCRIPTION_INDEX
        )

    def merge(self, grid: RawGrid) -> List[List[str]]:
        rows = pad_rows(grid)
        grouped: List[List[str]] = []

        i = 0
        while i < len(rows):
            row = rows[i]
            if is_block_start(row):
                block = list(row)
                while i + 1 < len(rows) and not is_block_start(rows[i + 1]):
                    self._absorb(block, rows[i + 1])
                    i += 1
                grouped.append(block)
            elif grouped:
                self._append_description(grouped[-1], row)
            else:
                logging.debug(f"Dropping leading row without a date: {row}")
            i += 1

        result = [r for r in grouped if not is_boilerplate(r) and any(c.strip() for c in r)]
        logging.info(
            f"Merged {len(rows)} physical row(s) into {len(grouped)} block(s), "
            f"{len(grouped) - len(result)} boilerplate/blank dropped"
        )
        return result

    def _absorb(self, block: List[str], continuation: Sequence[str]) -> None:
        self._append_description(block, continuation)
        for role in AMOUNT_ROLES:
            if not self.roles.is_resolved(role):
                continue
            idx = getattr(self.roles, role)
            # First match wins; a block never overwrites a value it already has
            if not block[idx] and AMOUNT_PATTERN.search(continuation[idx]):
                block[idx] = continuation[idx]

    def _append_description(self, block: List[str], continuation: Sequence[str]) -> None:
        parts = [c for c in continuation if c and c.strip()]
        if not parts:
            return
        idx = self.description_index
        if idx >= len(block):
            block.extend([''] * (idx + 1 - len(block)))
        block[idx] = f"{block[idx]} {' '.join(parts)}".strip()
