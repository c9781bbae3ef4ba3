"""
Transform Layer - logical rows to typed ParsedTransaction records.

This module implements:
1. Column role lookup with unresolved columns read as empty cells
2. Field normalization (dates, amounts, references)
3. A secondary rescan pass for rows whose debit and credit both came out 0
"""
import logging
import re
from typing import List, Sequence

from .models import ColumnRoles, ParsedTransaction, UNRESOLVED
from .normalize import ZERO, normalize_amount, normalize_date, normalize_reference


class TransactionAssembler:
    """
    Deterministic row assembler.

    The rescan pass re-reads the whole row text for a 'debit' or 'credit'
    word when column extraction produced no amount at all. It exists for
    misaligned extractions and can be switched off with rescan_zero_amounts.
    """

    def __init__(self, roles: ColumnRoles, rescan_zero_amounts: bool = True):
        self.roles = roles
        self.rescan_zero_amounts = rescan_zero_amounts

    def assemble(self, rows: Sequence[Sequence[str]]) -> List[ParsedTransaction]:
        transactions = [self._build(row) for row in rows]
        logging.info(f"Assembled {len(transactions)} transaction(s)")
        return transactions

    # ─────────────────────────────────────────────────────────────
    # Row Mapping
    # ─────────────────────────────────────────────────────────────

    def _build(self, row: Sequence[str]) -> ParsedTransaction:
        roles = self.roles
        value_date_raw = self._safe_get(row, roles.value_date)

        debit = normalize_amount(self._safe_get(row, roles.debit))
        credit = normalize_amount(self._safe_get(row, roles.credit))
        if self.rescan_zero_amounts and debit == ZERO and credit == ZERO:
            debit, credit = self._rescan_amounts(row)

        return ParsedTransaction(
            book_date=normalize_date(self._safe_get(row, roles.book_date)),
            value_date=normalize_date(value_date_raw) if value_date_raw else None,
            reference=normalize_reference(self._safe_get(row, roles.reference)),
            description=self._safe_get(row, roles.description),
            debit=debit,
            credit=credit,
            closing_balance=(
                normalize_amount(self._safe_get(row, roles.balance))
                if roles.is_resolved("balance") else None
            ),
        )

    def _rescan_amounts(self, row: Sequence[str]):
        joined = ' '.join(row)
        debit = normalize_amount(joined) if re.search(r'debit', joined, re.I) else ZERO
        credit = normalize_amount(joined) if re.search(r'credit', joined, re.I) else ZERO
        if debit != ZERO or credit != ZERO:
            logging.debug(f"Rescan recovered amounts debit={debit} credit={credit} from: {joined!r}")
        return debit, credit

    # ─────────────────────────────────────────────────────────────
    # Utility Methods
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _safe_get(row: Sequence[str], idx: int) -> str:
        if idx == UNRESOLVED or idx >= len(row):
            return ""
        return str(row[idx] or "").strip()
