"""
Extract Layer - raw statement bytes to an unstructured (headers, rows) grid.

Parsers:
- DocxParser: every table of a .docx, header row found by keyword scoring
- ExcelParser: first worksheet, row 0 is the header
- PDFParser: degraded text fallback, lines split on whitespace runs

ParserFactory picks exactly one parser from the declared MIME type or the
filename extension.
"""
import hashlib
import logging
import re
import warnings
import zipfile
from abc import ABC, abstractmethod
from datetime import date, datetime
from io import BytesIO
from typing import List, Sequence

import docx
import pandas as pd
import pdfplumber
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn

from .config import Config
from .errors import (
    CorruptDocument,
    EmptySheet,
    MissingHeaderRow,
    NoTablesFound,
    NoTransactionsFound,
    UnsupportedFormat,
)
from .headers import find_header_row
from .models import RawGrid

_COLUMN_SPLIT = re.compile(r'\s{2,}|\t')
_W_TEXT = qn('w:t')
_W_BREAKS = (qn('w:tab'), qn('w:br'), qn('w:cr'))


class BaseParser(ABC):
    mime_types: frozenset = frozenset()
    extensions: frozenset = frozenset()

    @abstractmethod
    def parse(self, content: bytes) -> RawGrid:
        pass

    @staticmethod
    def get_file_hash(content: bytes) -> str:
        return hashlib.sha256(content).hexdigest()


class PDFParser(BaseParser):
    mime_types = frozenset(Config.PDF_MIME_TYPES)
    extensions = frozenset(Config.PDF_EXTENSIONS)

    def parse(self, content: bytes) -> RawGrid:
        logging.info("Extracting PDF text (line-split fallback)")
        try:
            with pdfplumber.open(BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            raise CorruptDocument(f"Could not read PDF: {e}") from e
        return extract_table_from_text("\n".join(pages))


def extract_table_from_text(text: str) -> RawGrid:
    """
    Plain-text columnar extraction.

    The first non-empty line is the header; every line is split on runs of
    two or more whitespace characters or a tab. No geometry is recovered.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        raise NoTablesFound("No text lines found in document")

    def split(line: str) -> tuple:
        return tuple(cell.strip() for cell in _COLUMN_SPLIT.split(line))

    return RawGrid(
        headers=split(lines[0]),
        rows=tuple(split(line) for line in lines[1:]),
    )


class DocxParser(BaseParser):
    mime_types = frozenset(Config.DOCX_MIME_TYPES)
    extensions = frozenset(Config.DOCX_EXTENSIONS)

    def parse(self, content: bytes) -> RawGrid:
        try:
            document = docx.Document(BytesIO(content))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
            raise CorruptDocument(f"Could not open Word document: {e}") from e

        tables = list(document.element.iter(qn('w:tbl')))
        if not tables:
            raise NoTablesFound("No tables found in Word document.")
        logging.info(f"Word document has {len(tables)} table(s)")

        chosen_headers: List[str] = []
        global_best = 0
        merged_rows: List[tuple] = []

        for t_idx, tbl in enumerate(tables):
            rows = [
                tuple(self._cell_text(tc) for tc in tr.iter(qn('w:tc')))
                for tr in tbl.iter(qn('w:tr'))
            ]
            if not rows:
                continue

            header_index, score = find_header_row(rows)
            if header_index == -1:
                logging.debug(f"Table {t_idx + 1}: no header row, skipped")
                continue

            if not chosen_headers or score > global_best:
                chosen_headers = [c.strip() for c in rows[header_index]]
                global_best = score

            data_rows = [r for r in rows[header_index + 1:] if any(c.strip() for c in r)]
            logging.debug(
                f"Table {t_idx + 1}: header at row {header_index} (score {score}), "
                f"{len(data_rows)} data row(s)"
            )
            merged_rows.extend(data_rows)

        if not merged_rows:
            raise NoTransactionsFound("No transactions found across tables")

        headers = ensure_headers(chosen_headers, merged_rows)
        headers = [' '.join(h.split()) for h in headers]
        logging.info(f"Chosen header score {global_best}, {len(merged_rows)} row(s) across tables")
        return RawGrid(headers=tuple(headers), rows=tuple(merged_rows))

    @staticmethod
    def _cell_text(tc) -> str:
        # Runs are concatenated within a paragraph; tabs, breaks and paragraph ends become spaces
        paragraphs = [
            ''.join(
                (el.text or '') if el.tag == _W_TEXT else ' '
                for el in p.iter(_W_TEXT, *_W_BREAKS)
            )
            for p in tc.iter(qn('w:p'))
        ]
        return ' '.join(' '.join(paragraphs).split())


class ExcelParser(BaseParser):
    mime_types = frozenset(Config.SPREADSHEET_MIME_TYPES)
    extensions = frozenset(Config.SPREADSHEET_EXTENSIONS)

    def parse(self, content: bytes) -> RawGrid:
        try:
            df = pd.read_excel(BytesIO(content), sheet_name=0, header=None, dtype=object)
        except (ValueError, zipfile.BadZipFile, KeyError, OSError) as e:
            raise CorruptDocument(f"Could not read workbook: {e}") from e

        if df.shape[0] == 0:
            raise EmptySheet("No data found in Excel file")

        grid = [tuple(self._cell_text(v) for v in row) for row in df.itertuples(index=False)]
        headers = ensure_headers(list(grid[0]), grid[1:])
        logging.info(f"Worksheet read: {len(grid) - 1} data row(s), {len(headers)} column(s)")
        return RawGrid(headers=tuple(headers), rows=tuple(grid[1:]))

    @staticmethod
    def _cell_text(value) -> str:
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        if isinstance(value, (datetime, date)):
            return value.strftime("%Y-%m-%d")
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()


def ensure_headers(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[str]:
    """Synthesize 'Column 1..N' labels when no usable header row exists."""
    if any(str(h).strip() for h in headers):
        return list(headers)
    width = max([len(headers)] + [len(r) for r in rows])
    warnings.warn("No header row detected, using generic column labels", MissingHeaderRow)
    logging.warning(f"Missing header row, synthesized {width} generic column label(s)")
    return [f"Column {i + 1}" for i in range(width)]


class ParserFactory:
    PARSERS = (PDFParser, DocxParser, ExcelParser)

    @staticmethod
    def get_parser(mime_type: str, filename: str) -> BaseParser:
        mime = (mime_type or '').split(';')[0].strip().lower()
        name = (filename or '').lower()
        ext = name.rsplit('.', 1)[-1] if '.' in name else ''

        for parser_cls in ParserFactory.PARSERS:
            if mime in parser_cls.mime_types:
                return parser_cls()
        for parser_cls in ParserFactory.PARSERS:
            if ext in parser_cls.extensions:
                return parser_cls()
        raise UnsupportedFormat(
            f"Unsupported file type ({mime_type or 'unknown'}, {filename or 'unnamed'}). "
            "Please upload PDF, Word (.docx), or Excel files."
        )
