"""
Debug script to show each extraction stage for a statement file.

Usage: python debug_extract.py <path> [mime-type]
"""
import mimetypes
import sys

from backend.statement_etl import StatementPipeline, validate_transactions
from backend.statement_etl.extract import ParserFactory
from backend.statement_etl.headers import resolve_columns
from backend.statement_etl.merge import ContinuationMerger

path = sys.argv[1]
mime_type = sys.argv[2] if len(sys.argv) > 2 else (mimetypes.guess_type(path)[0] or "")

with open(path, "rb") as f:
    content = f.read()

parser = ParserFactory.get_parser(mime_type, path)
print(f"Parser: {type(parser).__name__}  (mime={mime_type or 'unknown'})")

grid = parser.parse(content)
print(f"\n--- Raw grid ({len(grid.rows)} rows) ---")
print(f"Headers: {list(grid.headers)}")
for row_idx, row in enumerate(grid.rows[:15]):
    print(f"Row {row_idx}: {list(row)}")

roles = resolve_columns(grid.headers)
print(f"\n--- Column roles ---\n{roles.to_dict()}")

merged = ContinuationMerger(roles).merge(grid)
print(f"\n--- Logical rows ({len(merged)}) ---")
for row_idx, row in enumerate(merged[:15]):
    print(f"[{row_idx}] {row}")

table = StatementPipeline().parse(content, mime_type, path)
print(f"\n--- Transactions ({len(table.transactions)}) ---")
for tx in table.transactions[:15]:
    print(tx.to_dict())

report = validate_transactions(table.transactions)
print(f"\nValid: {report.valid}")
for err in report.errors[:30]:
    print(f"  {err}")
