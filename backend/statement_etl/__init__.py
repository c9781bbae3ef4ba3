"""
Statement ETL Package - Financial statement table extraction and normalization

Modules:
- extract: DOCX/XLSX/PDF parsing into raw grids, format dispatch
- headers: Header row scoring and column role resolution
- merge: Continuation row merging
- normalize: Date, amount and reference normalizers
- transform: Typed transaction assembly
- dq: Transaction validation
- pipeline: Main orchestrator
- models / schema: Value objects and their serialized shapes
"""
from .dq import validate_transactions
from .errors import (
    ParsingError,
    UnsupportedFormat,
    CorruptDocument,
    NoTablesFound,
    NoTransactionsFound,
    EmptySheet,
    MissingHeaderRow,
)
from .models import ColumnRoles, ParsedTable, ParsedTransaction, RawGrid, ValidationReport
from .pipeline import StatementPipeline, parse_file

__all__ = [
    'StatementPipeline', 'parse_file', 'validate_transactions',
    'ColumnRoles', 'ParsedTable', 'ParsedTransaction', 'RawGrid', 'ValidationReport',
    'ParsingError', 'UnsupportedFormat', 'CorruptDocument', 'NoTablesFound',
    'NoTransactionsFound', 'EmptySheet', 'MissingHeaderRow',
]
