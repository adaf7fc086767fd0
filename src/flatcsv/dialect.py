"""
CSV dialect configuration.

A dialect is fixed when a codec is constructed and is never mutated
afterwards. Line-ending handling on read needs no switch at all: the
reader accepts \\n, \\r\\n and \\r in every dialect.
"""

import csv
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import DialectError


DEFAULT_DELIMITER = ","
DEFAULT_ENCLOSURE = '"'
DEFAULT_ESCAPE_CHAR = "\\"


@dataclass(frozen=True)
class CsvDialect:
    """
    Delimiter, enclosure and escape characters shared by reader and writer.

    Properties:
        delimiter: Field separator (one character)
        enclosure: Quote character wrapped around cells that need it
        escape_char: Escape character, or None to rely on doubled enclosures only
        line_terminator: Written after every row (defaults to os.linesep)
    """

    delimiter: str = DEFAULT_DELIMITER
    enclosure: str = DEFAULT_ENCLOSURE
    escape_char: Optional[str] = DEFAULT_ESCAPE_CHAR
    line_terminator: str = os.linesep

    def __post_init__(self):
        for name in ("delimiter", "enclosure"):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1:
                raise DialectError(f"{name} must be a single character, got {value!r}")

        if self.escape_char == "":
            object.__setattr__(self, "escape_char", None)
        if self.escape_char is not None and (
            not isinstance(self.escape_char, str) or len(self.escape_char) != 1
        ):
            raise DialectError(f"escape_char must be a single character or None, got {self.escape_char!r}")

        if self.delimiter == self.enclosure:
            raise DialectError("delimiter and enclosure must differ")
        if self.escape_char in (self.delimiter, self.enclosure):
            raise DialectError("escape_char must differ from delimiter and enclosure")
        if self.delimiter in "\r\n" or self.enclosure in "\r\n":
            raise DialectError("delimiter and enclosure cannot be line break characters")

        if not isinstance(self.line_terminator, str) or not self.line_terminator:
            raise DialectError("line_terminator must be a non-empty string")

    def writer_options(self) -> Dict[str, Any]:
        """Keyword arguments for csv.writer."""
        return {
            "delimiter": self.delimiter,
            "quotechar": self.enclosure,
            "escapechar": self.escape_char,
            "doublequote": True,
            "quoting": csv.QUOTE_MINIMAL,
            "lineterminator": self.line_terminator,
        }

    def reader_options(self) -> Dict[str, Any]:
        """Keyword arguments for csv.reader (strict, so malformed quoting raises)."""
        return {
            "delimiter": self.delimiter,
            "quotechar": self.enclosure,
            "escapechar": self.escape_char,
            "doublequote": True,
            "strict": True,
        }


DEFAULT_DIALECT = CsvDialect()


__all__ = [
    "CsvDialect",
    "DEFAULT_DIALECT",
    "DEFAULT_DELIMITER",
    "DEFAULT_ENCLOSURE",
    "DEFAULT_ESCAPE_CHAR",
]
