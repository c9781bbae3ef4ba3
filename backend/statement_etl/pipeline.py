"""
Statement Pipeline Orchestrator - Coordinates Extract, Resolve, Merge and Assemble.

Flow: Dispatch → Extract → Resolve headers → Merge continuations → Assemble

Validation is not part of the parse; callers run validate_transactions on
the result before persisting it.
"""
import logging
import time
from datetime import datetime
from typing import Iterator, Optional, Tuple, Dict, Any

from .dq import validate_transactions
from .extract import BaseParser, ParserFactory
from .headers import resolve_columns
from .merge import ContinuationMerger
from .models import ParsedTable
from .transform import TransactionAssembler


class StatementPipeline:
    """
    Stateless statement parser. Every call works on its own grid and
    transaction list, so one instance can serve concurrent requests.
    """

    def __init__(self, rescan_zero_amounts: bool = True):
        self.rescan_zero_amounts = rescan_zero_amounts

    def parse(self, content: bytes, mime_type: str, filename: str) -> ParsedTable:
        """Parse a statement file. Structural failures raise ParsingError subclasses."""
        parser = ParserFactory.get_parser(mime_type, filename)
        logging.info(f"Parsing {filename!r} ({mime_type or 'no MIME type'}) with {type(parser).__name__}")
        grid = parser.parse(content)

        roles = resolve_columns(grid.headers)
        logging.debug(f"Column roles: {roles.to_dict()}")

        rows = ContinuationMerger(roles).merge(grid)
        transactions = TransactionAssembler(roles, self.rescan_zero_amounts).assemble(rows)

        return ParsedTable(
            headers=tuple(grid.headers),
            rows=tuple(tuple(r) for r in rows),
            transactions=tuple(transactions),
        )

    def process(self, content: bytes, mime_type: str, filename: str) -> Iterator[Tuple[int, str, Optional[Dict[str, Any]]]]:
        """
        Parse and validate, yielding (percentage, message, result_dict).

        Only the final frame carries a result. Failures are reported in that
        frame instead of being raised.
        """
        start_time = time.time()

        try:
            yield 10, "Reading Document...", None
            table = self.parse(content, mime_type, filename)
            yield 70, f"Found {len(table.transactions)} transactions.", None

            yield 80, "Validating data...", None
            report = validate_transactions(table.transactions)

            stats = {
                "document_hash": BaseParser.get_file_hash(content),
                "source_file": filename,
                "processing_time_ms": (time.time() - start_time) * 1000,
                "total_rows": len(table.transactions),
                "timestamp": datetime.now().isoformat(),
            }
            yield 100, "Done", {
                "success": True,
                "table": table.to_dict(),
                "validation": report.to_dict(),
                "stats": stats,
            }

        except Exception as e:
            logging.exception("PIPELINE_ERROR")
            yield 0, f"Error: {str(e)}", {
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
                "stats": {},
            }


def parse_file(content: bytes, mime_type: str, filename: str) -> ParsedTable:
    return StatementPipeline().parse(content, mime_type, filename)
