"""
Value Formatter: sanitizes a single scalar string for a CSV cell.

Filters, applied in order:
    1. Decode HTML/XML character entities (&amp; → &, &#39; → ')
    2. Strip markup tags (naive: every <...> run is removed)
    3. Trim surrounding whitespace
    4. Optionally narrow to Latin-1 (off by default)

Step 4 reproduces a legacy single-byte narrowing where characters outside
Latin-1 are replaced with "?". It is only useful for byte-for-byte
compatibility with old exports; by default text stays UTF-8.
"""

import html
import re
from dataclasses import dataclass


_TAG_PATTERN = re.compile(r'<[^>]*>')


def decode_entities(value: str) -> str:
    return html.unescape(value)


def strip_tags(value: str) -> str:
    """Remove everything between '<' and the next '>'."""
    return _TAG_PATTERN.sub('', value)


def narrow_to_latin1(value: str) -> str:
    return value.encode('latin-1', errors='replace').decode('latin-1')


@dataclass(frozen=True)
class ValueFormatter:
    """
    Configurable cell sanitizer.

    Properties:
        decode_entities: Apply HTML entity decoding
        strip_tags: Remove markup tags
        trim: Strip leading/trailing whitespace
        narrow_charset: Replace characters outside Latin-1 with "?"

    Instances are immutable and callable, so one formatter can be shared
    across threads and passed wherever a str → str function is expected.
    """

    decode_entities: bool = True
    strip_tags: bool = True
    trim: bool = True
    narrow_charset: bool = False

    def format(self, value: str) -> str:
        if value is None:
            return ''
        if not isinstance(value, str):
            value = str(value)

        if self.decode_entities:
            value = decode_entities(value)
        if self.strip_tags:
            value = strip_tags(value)
        if self.trim:
            value = value.strip()
        if self.narrow_charset:
            value = narrow_to_latin1(value)

        return value

    def __call__(self, value: str) -> str:
        return self.format(value)


DEFAULT_FORMATTER = ValueFormatter()


def format_value(value: str) -> str:
    """Format a value with the default filters."""
    return DEFAULT_FORMATTER.format(value)


__all__ = [
    "ValueFormatter",
    "DEFAULT_FORMATTER",
    "format_value",
    "decode_entities",
    "strip_tags",
    "narrow_to_latin1",
]
