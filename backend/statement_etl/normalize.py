"""
Field Normalizers - free-text statement cells to clean typed values.

All three functions are total: malformed input degrades (raw text for
dates, 0 for amounts) instead of raising. Detection of bad values is left
to the validator.
"""
import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .config import Config

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")

MONTHS = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

_YMD = re.compile(r'^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$')
_DMY = re.compile(r'^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$')
_D_MONTH_Y = re.compile(r'^(\d{1,2})\s+([A-Za-z]{3,})\.?\s+(\d{4}|\d{2})$')

_CURRENCY = re.compile('|'.join(re.escape(t) for t in Config.CURRENCY_TOKENS), re.I)
_NON_NUMERIC = re.compile(r'[^\d.,-]')
# Leading numeric prefix, the way a lenient float parser reads "12.5.3" as 12.5
_NUMBER_PREFIX = re.compile(r'-?(\d+\.?\d*|\.\d+)')

_REF_SEPARATOR_RUN = re.compile(r'[-\\/]{2,}')


def normalize_date(value: Any) -> str:
    """
    Convert a statement date to YYYY-MM-DD.

    Recognized forms, tried in order:
        YYYY-M-D / YYYY/M/D
        D-M-YYYY / D/M/YYYY
        D MonthName YYYY / D MonthName YY  (two-digit years are 20xx)

    Anything else, including out-of-range month or day values, comes back
    as the trimmed input.
    """
    if value is None:
        return ""
    raw = ' '.join(str(value).split())
    if not raw:
        return ""

    match = _YMD.match(raw)
    if match:
        year, month, day = match.groups()
        return _format_date(raw, year, int(month), int(day))

    match = _DMY.match(raw)
    if match:
        day, month, year = match.groups()
        return _format_date(raw, year, int(month), int(day))

    match = _D_MONTH_Y.match(raw)
    if match:
        day, month_name, year = match.groups()
        month = month_number(month_name)
        if month is None:
            return raw
        if len(year) == 2:
            year = f"20{year}"
        return _format_date(raw, year, month, int(day))

    return raw


def month_number(name: str):
    """
    1-12 for a month word, matched on its first three letters.

    'Sep', 'Sept', 'September' and 'Janv' all resolve; shorter tokens do not.
    """
    low = name.lower()
    if len(low) < 3:
        return None
    for i, full in enumerate(MONTHS):
        if low[:3] == full[:3]:
            return i + 1
    return None


def _format_date(raw: str, year: str, month: int, day: int) -> str:
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return raw
    return f"{year}-{month:02d}-{day:02d}"


def normalize_amount(value: Any) -> Decimal:
    """
    Parse a money cell into a Decimal rounded to 2 places.

    Currency tokens and every character outside [0-9.,-] are dropped.
    Separator handling:
        both ',' and '.'  -> the right-most one is the decimal point
        only ','          -> decimal comma when exactly 2 digits follow the
                             last comma, thousands separator otherwise
    Empty or unparsable input yields 0, and so does a digit run too long to
    hold at cent precision.
    """
    if value is None:
        return ZERO
    text = _CURRENCY.sub('', str(value))
    text = _NON_NUMERIC.sub('', text)
    if not text:
        return ZERO

    if ',' in text and '.' in text:
        if text.rfind(',') > text.rfind('.'):
            text = text.replace('.', '').replace(',', '.')
        else:
            text = text.replace(',', '')
    elif ',' in text:
        head, _, tail = text.rpartition(',')
        if len(tail) == 2:
            text = head.replace(',', '') + '.' + tail
        else:
            text = text.replace(',', '')

    match = _NUMBER_PREFIX.match(text)
    if not match:
        return ZERO
    try:
        return Decimal(match.group(0)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logging.debug(f"Amount out of range, read as 0: {match.group(0)}")
        return ZERO


def normalize_reference(value: Any) -> str:
    """Strip all whitespace and collapse runs of '-', '/' or '\\' into one '-'."""
    if not value:
        return ""
    compact = re.sub(r'\s+', '', str(value))
    return _REF_SEPARATOR_RUN.sub('-', compact)
