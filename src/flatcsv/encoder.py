"""
CSV Encoder/Decoder facade.

Encode:
    data → records (normalized) → headers (first record)
         → flattened rows (formatted cells) → CSV text

Decode:
    CSV text → raw rows → row 0 as headers
             → one dict per data row, pipe-joined cells split into lists

Encoding is lossy: sub-keys of list items are dropped and a list field can
span several cells. Decoding does no type inference; every value comes back
as a string or a list of strings.
"""

import dataclasses
import logging
import os
import warnings
from collections.abc import Iterable, Mapping
from typing import Any, Collection, Dict, List, Optional, Sequence, Union

from .dialect import CsvDialect
from .errors import InvalidDataTypeError, UnsupportedFormatError
from .flattener import COMPONENT_SEPARATOR, extract_headers, flatten_records
from .formatter import DEFAULT_FORMATTER, ValueFormatter
from .grammar import CsvReader, CsvWriter
from .model import to_record

logger = logging.getLogger(__name__)

DecodedValue = Union[str, List[str]]


def normalize_input(data: Any) -> List[Any]:
    """
    Coerce encode() input into a list of raw records.

    A mapping or dataclass instance is one record; a string, bytes or any
    other non-iterable is wrapped as a single element; other iterables are
    materialized as-is.
    """
    if isinstance(data, Mapping):
        return [data]
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return [dataclasses.asdict(data)]
    if isinstance(data, (str, bytes, bytearray)) or not isinstance(data, Iterable):
        return [data]
    return list(data)


def _decode_cell(cell: str) -> DecodedValue:
    if COMPONENT_SEPARATOR in cell:
        return cell.split(COMPONENT_SEPARATOR)
    return cell


def _absorbing_column(headers: Sequence[str], cells: Sequence[str], list_fields: Collection[str]) -> int:
    """
    Pick the column that owns the surplus cells of a too-wide row.

    Preference: first header listed in list_fields, then the leftmost cell
    holding the pipe separator, then the last column. The last-column
    guess warns, since it can turn a plain column into a list.
    """
    for index, name in enumerate(headers):
        if name in list_fields:
            return index
    for index, cell in enumerate(cells[:len(headers)]):
        if COMPONENT_SEPARATOR in cell:
            return index
    warnings.warn(
        f"Row has {len(cells)} cells for {len(headers)} headers and no column to expand; "
        f"surplus cells were assigned to '{headers[-1]}'. Pass context['list_fields'] "
        "to name the list columns.",
        UserWarning,
    )
    return len(headers) - 1


def rebuild_record(
    headers: Sequence[str],
    cells: Sequence[str],
    list_fields: Collection[str] = (),
) -> Dict[str, DecodedValue]:
    """
    Match one row's cells to the headers.

    Args:
        headers: Header row
        cells: Raw data row, possibly wider or narrower than headers
        list_fields: Columns known to expand into several cells

    Returns:
        Header name → string, or list of strings for pipe-joined/expanded cells
    """
    width = len(headers)
    surplus = len(cells) - width

    if surplus > 0:
        start = _absorbing_column(headers, cells, list_fields)
        end = start + surplus + 1
        groups: List[Any] = list(cells[:start]) + [list(cells[start:end])] + list(cells[end:])
    else:
        if surplus < 0:
            warnings.warn(
                f"Row has {len(cells)} cells for {width} headers; missing cells decode as ''",
                UserWarning,
            )
        groups = list(cells) + [""] * (width - len(cells))

    record: Dict[str, DecodedValue] = {}
    for name, group in zip(headers, groups):
        if isinstance(group, list):
            values: List[str] = []
            for cell in group:
                values.extend(cell.split(COMPONENT_SEPARATOR))
            record[name] = values
        else:
            record[name] = _decode_cell(group)
    return record


class CsvEncoder:
    """
    Encodes record collections to CSV and decodes CSV back to rows.

    The dialect and formatter are fixed at construction; encode() and
    decode() keep no state between calls.

    Example:
        encoder = CsvEncoder()
        text = encoder.encode([{"title": "T", "images": ["a.jpg"]}], "csv")
        rows = encoder.decode(text, "csv")
    """

    FORMAT = "csv"

    def __init__(
        self,
        delimiter: str = ",",
        enclosure: str = '"',
        escape_char: Optional[str] = "\\",
        line_terminator: str = os.linesep,
        formatter: Optional[ValueFormatter] = None,
    ):
        self.dialect = CsvDialect(
            delimiter=delimiter,
            enclosure=enclosure,
            escape_char=escape_char,
            line_terminator=line_terminator,
        )
        self.formatter = formatter if formatter is not None else DEFAULT_FORMATTER

    @classmethod
    def from_dialect(cls, dialect: CsvDialect, formatter: Optional[ValueFormatter] = None) -> "CsvEncoder":
        return cls(
            delimiter=dialect.delimiter,
            enclosure=dialect.enclosure,
            escape_char=dialect.escape_char,
            line_terminator=dialect.line_terminator,
            formatter=formatter,
        )

    def supports_encoding(self, fmt: str) -> bool:
        return fmt == self.FORMAT

    def supports_decoding(self, fmt: str) -> bool:
        return fmt == self.FORMAT

    @classmethod
    def get_file_extension(cls) -> str:
        return cls.FORMAT

    def encode(self, data: Any, fmt: str = FORMAT, context: Optional[Mapping] = None) -> str:
        """
        Encode records as CSV text.

        Args:
            data: Sequence of records, a single record, or a scalar
            fmt: Format tag; must be "csv"
            context: Unused; accepted for symmetry with decode()

        Returns:
            CSV text: header line plus one line per record

        Raises:
            UnsupportedFormatError: If fmt is not "csv"
            EmptyInputError: If there are no records
            InvalidDataTypeError: For any other failure, wrapping the cause
        """
        if not self.supports_encoding(fmt):
            raise UnsupportedFormatError(fmt, self.FORMAT)

        try:
            raw_records = normalize_input(data)
            headers = extract_headers(raw_records)
            records = [to_record(raw) for raw in raw_records]
            rows = flatten_records(records, self.formatter)
            logger.debug("Encoding %d records with %d headers", len(rows), len(headers))
            return CsvWriter(self.dialect).write(headers, rows)
        except InvalidDataTypeError:
            raise
        except Exception as e:
            raise InvalidDataTypeError(str(e)) from e

    def decode(
        self,
        text: Union[str, bytes],
        fmt: str = FORMAT,
        context: Optional[Mapping] = None,
    ) -> List[Dict[str, DecodedValue]]:
        """
        Decode CSV text into one dict per data row.

        Args:
            text: CSV text whose first row holds the headers
            fmt: Format tag; must be "csv"
            context: Optional; "list_fields" names columns that may span several cells

        Returns:
            Rows keyed by header; values are strings or lists of strings

        Raises:
            UnsupportedFormatError: If fmt is not "csv"
            csv.Error: If the text is not valid CSV for this dialect
        """
        if not self.supports_decoding(fmt):
            raise UnsupportedFormatError(fmt, self.FORMAT)

        list_fields = tuple((context or {}).get("list_fields", ()))
        rows = CsvReader(self.dialect).read(text)
        if not rows:
            return []

        headers, data_rows = rows[0], rows[1:]
        logger.debug("Decoding %d rows with %d headers", len(data_rows), len(headers))
        return [rebuild_record(headers, cells, list_fields) for cells in data_rows]


__all__ = ["CsvEncoder", "normalize_input", "rebuild_record"]
