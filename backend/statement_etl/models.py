from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Dict, Any

from .schema import ParsedTransactionDict, ParsedTableDict, ValidationReportDict

UNRESOLVED = -1


@dataclass(frozen=True)
class RawGrid:
    """Unstructured extractor output. Rows need not be rectangular."""
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]

    @property
    def width(self) -> int:
        return max([len(self.headers)] + [len(r) for r in self.rows])


@dataclass(frozen=True)
class ColumnRoles:
    """Column index per semantic role, UNRESOLVED (-1) when no header matched."""
    book_date: int = UNRESOLVED
    value_date: int = UNRESOLVED
    reference: int = UNRESOLVED
    description: int = UNRESOLVED
    debit: int = UNRESOLVED
    credit: int = UNRESOLVED
    balance: int = UNRESOLVED

    def is_resolved(self, role: str) -> bool:
        return getattr(self, role) != UNRESOLVED

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ParsedTransaction:
    book_date: str
    reference: str
    description: str
    debit: Decimal = Decimal("0.00")
    credit: Decimal = Decimal("0.00")
    value_date: Optional[str] = None
    closing_balance: Optional[Decimal] = None

    def to_dict(self) -> ParsedTransactionDict:
        return {
            "bookDate": self.book_date,
            "valueDate": self.value_date,
            "reference": self.reference,
            "description": self.description,
            "debit": float(self.debit),
            "credit": float(self.credit),
            "closingBalance": float(self.closing_balance) if self.closing_balance is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedTransaction":
        """Rebuild from the camelCase shape produced by to_dict."""
        balance = data.get("closingBalance")
        return cls(
            book_date=str(data.get("bookDate") or ""),
            value_date=data.get("valueDate") or None,
            reference=str(data.get("reference") or ""),
            description=str(data.get("description") or ""),
            debit=_to_decimal(data.get("debit")),
            credit=_to_decimal(data.get("credit")),
            closing_balance=_to_decimal(balance) if balance is not None else None,
        )


@dataclass(frozen=True)
class ParsedTable:
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    transactions: Tuple[ParsedTransaction, ...]

    def to_dict(self) -> ParsedTableDict:
        return {
            "headers": list(self.headers),
            "rows": [list(r) for r in self.rows],
            "transactions": [tx.to_dict() for tx in self.transactions],
        }


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> ValidationReportDict:
        return {"valid": self.valid, "errors": list(self.errors)}


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount
