"""Test fixtures and utilities."""

import os
import tempfile
from io import BytesIO

import docx
import openpyxl
import pytest

os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "statement_etl_test.log"))

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

STATEMENT_HEADERS = ["Book Date", "Reference", "Description", "Debit", "Credit", "Balance"]


def make_docx(*tables, paragraphs=()):
    """Build a .docx in memory; each table is a list of rows of cell strings."""
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    for rows in tables:
        width = max(len(r) for r in rows)
        table = document.add_table(rows=len(rows), cols=width)
        for r_idx, row in enumerate(rows):
            for c_idx, value in enumerate(row):
                table.cell(r_idx, c_idx).text = value
    buf = BytesIO()
    document.save(buf)
    return buf.getvalue()


def make_xlsx(rows):
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buf = BytesIO()
    workbook.save(buf)
    return buf.getvalue()


class FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class FakePDF:
    def __init__(self, page_texts):
        self.pages = [FakePage(t) for t in page_texts]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_pdf(monkeypatch):
    """Patch pdfplumber.open so PDF bytes are replaced by the given page texts."""
    def install(*page_texts):
        monkeypatch.setattr(
            "backend.statement_etl.extract.pdfplumber.open",
            lambda stream: FakePDF(page_texts),
        )
    return install


@pytest.fixture
def statement_docx() -> bytes:
    """Cover table followed by the transaction table, one wrapped description."""
    cover = [
        ["Account holder", "Jane Customer"],
        ["Account number", "1000123456"],
    ]
    transactions = [
        ["Statement of account", "", "", "", "", ""],
        STATEMENT_HEADERS,
        ["", "", "Opening balance", "", "", "1,000.00"],
        ["01/03/2024", "ABC12345", "Shop payment", "100.00", "", "900.00"],
        ["02/03/2024", "FT24 062 / / 9981", "Transfer from", "", "2,500.00", "3,400.00"],
        ["", "", "J. Smith savings", "", "", ""],
        ["05 Mar 2024", "CHG-0001", "Service charge", "15.50", "", "3,384.50"],
    ]
    return make_docx(cover, transactions, paragraphs=["Monthly statement"])
