"""
flatcsv: a lossy, bidirectional CSV codec for shallowly nested records.

Records map field names to values that may be scalars, lists of scalars,
or lists of key/value items. Encoding flattens every field to one or more
sanitized CSV cells; decoding reads the cells back into rows keyed by
header, splitting pipe-joined cells into lists.

ENCODING IS NOT INJECTIVE:
--------------------------
    - Item sub-key names are discarded
    - A list field may occupy several cells of a row
    - Everything decodes as a string or a list of strings

decode(encode(x)) is therefore not x. It is, however, stable under a
second encode/decode cycle.
"""

from .dialect import CsvDialect
from .encoder import CsvEncoder
from .errors import (
    CodecError,
    DialectError,
    EmptyInputError,
    EncodingError,
    InvalidDataTypeError,
    NestingDepthError,
    UnsupportedFormatError,
)

__version__ = "0.1.0"

__all__ = [
    "CsvDialect",
    "CsvEncoder",
    "CodecError",
    "DialectError",
    "EmptyInputError",
    "EncodingError",
    "InvalidDataTypeError",
    "NestingDepthError",
    "UnsupportedFormatError",
]
