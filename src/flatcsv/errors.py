"""
Exception taxonomy for the CSV codec.

InvalidDataTypeError is what callers of CsvEncoder.encode() see for any
failure; its subclasses are raised as-is, anything else is wrapped with
the original exception kept as __cause__.
"""

from typing import Optional


class CodecError(Exception):
    """Base class for every error raised by flatcsv."""
    pass


class InvalidDataTypeError(CodecError):
    """Raised when encoding fails for any reason."""
    pass


class EmptyInputError(InvalidDataTypeError):
    """Raised when headers are requested from an empty record sequence."""

    def __init__(self, message: str = "Cannot extract headers from an empty record sequence"):
        super().__init__(message)


class NestingDepthError(InvalidDataTypeError):
    """Raised when a field value nests deeper than an item of scalars."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        context = f" (field: {field_name})" if field_name else ""
        super().__init__(f"{message}{context}")


class EncodingError(CodecError):
    """Raised when the CSV writer fails to serialize a row."""

    def __init__(self, message: str, row_index: Optional[int] = None):
        self.row_index = row_index
        context = f" at row {row_index}" if row_index is not None else ""
        super().__init__(f"CSV writing failed{context}: {message}")


class UnsupportedFormatError(CodecError, ValueError):
    """Raised when a format tag other than the codec's own is requested."""

    def __init__(self, requested: str, supported: str):
        self.requested = requested
        self.supported = supported
        super().__init__(f"Unsupported format '{requested}' (expected '{supported}')")


class DialectError(CodecError, ValueError):
    """Raised when a CSV dialect is configured with unusable characters."""
    pass


__all__ = [
    "CodecError",
    "InvalidDataTypeError",
    "EmptyInputError",
    "NestingDepthError",
    "EncodingError",
    "UnsupportedFormatError",
    "DialectError",
]
