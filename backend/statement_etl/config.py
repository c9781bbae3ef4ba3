# Statement extraction configuration
class Config:
    PDF_MIME_TYPES = {"application/pdf"}
    DOCX_MIME_TYPES = {
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
    SPREADSHEET_MIME_TYPES = {
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }

    PDF_EXTENSIONS = {"pdf"}
    DOCX_EXTENSIONS = {"docx"}
    SPREADSHEET_EXTENSIONS = {"xls", "xlsx"}

    # Header detection
    HEADER_SCAN_LIMIT = 10
    HEADER_KEYWORDS = [
        "book date",
        "reference",
        "description",
        "value date",
        "debit",
        "credit",
        "balance",
    ]

    # Ordered (role, candidate substrings); first header containing a candidate wins
    COLUMN_ROLES = [
        ("book_date", ["book date", "date"]),
        ("value_date", ["value date"]),
        ("reference", ["reference", "ref"]),
        ("description", ["description", "details", "narration"]),
        ("debit", ["debit", "dr", "withdrawal"]),
        ("credit", ["credit", "cr", "deposit"]),
        ("balance", ["balance"]),
    ]

    # Continuation merging
    DEFAULT_DESCRIPTION_INDEX = 2
    BOILERPLATE_PATTERNS = [
        r"opening balance",
        r"closing balance",
        r"period start",
        r"period end",
        r"page \d+",
    ]

    CURRENCY_TOKENS = ["etb", "birr", "usd", "$"]
