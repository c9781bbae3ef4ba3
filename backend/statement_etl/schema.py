"""
Serialized record shapes handed to callers.

These are the dict forms produced by the model ``to_dict`` methods. The
persistence collaborator consumes ``ParsedTransactionDict`` as-is and owns
the mapping to storage identifiers.
"""
from typing import TypedDict, List, Optional


class ParsedTransactionDict(TypedDict):
    """One normalized statement line"""
    bookDate: str                    # YYYY-MM-DD when recognized, raw text otherwise
    valueDate: Optional[str]         # Same rules as bookDate, None when absent
    reference: str                   # Whitespace stripped, separator runs collapsed
    description: str                 # Continuation lines already merged in
    debit: float                     # Rounded to 2 places
    credit: float                    # Rounded to 2 places
    closingBalance: Optional[float]  # None when the statement has no balance column


class ParsedTableDict(TypedDict):
    headers: List[str]
    rows: List[List[str]]            # Logical rows after continuation merging
    transactions: List[ParsedTransactionDict]


class ValidationReportDict(TypedDict):
    valid: bool
    errors: List[str]
