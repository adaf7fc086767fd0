"""
CSV grammar: rows of cell strings ↔ CSV text.

RFC-4180-like rules, driven by a CsvDialect:
    - Cells holding the delimiter, the enclosure or a line break are enclosed
    - Enclosures inside an enclosed cell are doubled
    - Every row ends with the dialect's line terminator

The reader and writer know nothing about headers or records; a header row
is just the first row.
"""

import csv
import logging
from io import StringIO
from typing import Iterator, List, Optional, Sequence, TextIO, Union

from charset_normalizer import from_bytes

from .dialect import DEFAULT_DIALECT, CsvDialect
from .errors import EncodingError

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


class CsvWriter:
    """Serializes a header row and data rows into CSV text."""

    def __init__(self, dialect: CsvDialect = DEFAULT_DIALECT):
        self.dialect = dialect

    def write(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        buffer: Optional[TextIO] = None,
    ) -> str:
        """
        Write headers and rows, each row at its own width.

        Args:
            headers: Cells of the first line
            rows: Data rows (never padded to the header width)
            buffer: In-memory text buffer to write into; a fresh one per call by default

        Returns:
            The complete CSV text, including the final line terminator

        Raises:
            EncodingError: If the underlying csv writer or buffer fails
        """
        output = buffer if buffer is not None else StringIO(newline="")
        row_index = 0

        try:
            writer = csv.writer(output, **self.dialect.writer_options())
            writer.writerow(headers)
            for row_index, row in enumerate(rows, start=1):
                writer.writerow(row)
            return output.getvalue()
        except (csv.Error, OSError, TypeError, ValueError) as e:
            raise EncodingError(str(e), row_index=row_index) from e


def decode_bytes(raw: bytes) -> str:
    """
    Decode a raw CSV blob to text.

    UTF-8 (with or without a byte-order mark) is tried first. Anything else
    goes through charset detection, falling back to UTF-8 with replacement
    characters when no candidate decodes cleanly.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else None
    if detected is not None:
        try:
            text = raw.decode(detected)
            logger.debug("Decoded CSV bytes as %s", detected)
            return text
        except (UnicodeDecodeError, LookupError):
            pass

    logger.debug("No usable encoding detected; decoding CSV bytes as UTF-8 with replacement")
    return raw.decode("utf-8", errors="replace")


class CsvReader:
    """Parses CSV text into rows of raw cell strings."""

    def __init__(self, dialect: CsvDialect = DEFAULT_DIALECT):
        self.dialect = dialect

    def iter_rows(self, text: Union[str, bytes]) -> Iterator[List[str]]:
        """
        Yield rows lazily. Blank lines are skipped.

        Bytes are decoded with decode_bytes() and a leading byte-order mark
        is dropped.

        Raises:
            csv.Error: On malformed quoting (propagated unchanged)
        """
        if isinstance(text, (bytes, bytearray)):
            text = decode_bytes(bytes(text))
        if text.startswith(_BOM):
            text = text[len(_BOM):]

        reader = csv.reader(StringIO(text, newline=""), **self.dialect.reader_options())
        for row in reader:
            if row:
                yield row

    def read(self, text: Union[str, bytes]) -> List[List[str]]:
        rows = list(self.iter_rows(text))
        logger.debug("Parsed %d CSV rows", len(rows))
        return rows


__all__ = ["CsvWriter", "CsvReader", "decode_bytes"]
