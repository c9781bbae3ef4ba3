"""
Extraction errors.

Structural problems (nothing table-like to extract) are raised and propagate
to the caller. Field-level noise never raises; it degrades to 0 or to the raw
text and is reported later by the validator.
"""


class ParsingError(ValueError):
    """Base class for every structural extraction failure."""


class UnsupportedFormat(ParsingError):
    """Neither the MIME type nor the filename extension matched a parser."""


class CorruptDocument(ParsingError):
    """The file claims a supported format but its package could not be read."""


class NoTablesFound(ParsingError):
    """The document holds no table-like content at all."""


class NoTransactionsFound(ParsingError):
    """Tables were found but none of them yielded a data row."""


class EmptySheet(ParsingError):
    """The first worksheet of the workbook has no rows."""


class MissingHeaderRow(UserWarning):
    """No header row scored; generic column labels were synthesized."""
