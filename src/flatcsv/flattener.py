"""
Header extraction and row flattening (records → rows of cell strings).

Flattening reduces every field of a record to one or more cells:

    ""                                  → [""]
    "B, C"                              → ["B, C"]
    ["a.jpg"]                           → ["a.jpg"]
    ["a.jpg", "b.jpg"]                  → ["a.jpg", "b.jpg"]
    [{"src": "a", "alt": "A"}, {...}]   → ["a|A", ...]

A list field expands into one cell per element, so a row can be wider
than the header list. Rows are never padded or truncated.
"""

import logging
from collections.abc import Mapping
from typing import Callable, List, Sequence, Union

from .errors import EmptyInputError, InvalidDataTypeError
from .formatter import DEFAULT_FORMATTER
from .model import FieldValue, Item, ListValue, Record, Scalar

logger = logging.getLogger(__name__)

COMPONENT_SEPARATOR = "|"

Formatter = Callable[[str], str]


def extract_headers(records: Sequence[Mapping]) -> List[str]:
    """
    Return the field names of the first record, in order.

    Every other record is assumed to share the same fields in the same
    order. This is not checked: a mismatch shifts the columns of that row.

    Raises:
        EmptyInputError: If records is empty
        InvalidDataTypeError: If the first record is not a mapping
    """
    if not records:
        raise EmptyInputError()

    first = records[0]
    if not isinstance(first, Mapping):
        raise InvalidDataTypeError(
            f"Cannot extract headers from {type(first).__name__}; expected a mapping"
        )
    return [str(name) for name in first.keys()]


def _element_text(element: Union[Scalar, Item]) -> str:
    if isinstance(element, Scalar):
        return element.as_text()

    components = [value.as_text() for value in element.values]
    if len(components) > 1:
        return COMPONENT_SEPARATOR.join(components)
    if components:
        return components[0]
    return ""


def flatten_field(value: FieldValue, formatter: Formatter = DEFAULT_FORMATTER) -> List[str]:
    """
    Reduce one field value to its cells.

    Returns:
        One cell for empty values and scalars, one cell per element for lists
    """
    if value.is_empty():
        return [""]
    if isinstance(value, ListValue):
        return [formatter(_element_text(element)) for element in value.elements]
    return [formatter(value.as_text())]


def flatten_record(record: Record, formatter: Formatter = DEFAULT_FORMATTER) -> List[str]:
    """
    Flatten a record by iterating its own fields in order.

    Args:
        record: Converted record (see model.to_record)
        formatter: Cell sanitizer applied to every emitted string

    Returns:
        Ordered cells; may be longer than the record's field count
    """
    cells: List[str] = []
    for value in record.values():
        cells.extend(flatten_field(value, formatter))
    return cells


def flatten_records(records: Sequence[Record], formatter: Formatter = DEFAULT_FORMATTER) -> List[List[str]]:
    """Flatten every record, logging rows whose width differs from the first record's field count."""
    if not records:
        return []

    width = len(records[0])
    rows = []
    for index, record in enumerate(records):
        row = flatten_record(record, formatter)
        if len(row) != width:
            logger.debug("Row %d flattened to %d cells for %d headers", index, len(row), width)
        rows.append(row)
    return rows


__all__ = [
    "COMPONENT_SEPARATOR",
    "extract_headers",
    "flatten_field",
    "flatten_record",
    "flatten_records",
]
