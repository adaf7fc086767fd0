"""
Field Value Model

Defines the explicit shapes a record field may hold before it is flattened:

    - Scalar (one plain value)
    - Item (ordered sub-key → Scalar pairs, one element of a list)
    - ListValue (ordered Scalars and/or Items)

Nesting is bounded:
    Record (depth 0) → field value (depth 1) → list element (depth 2)
    → item value (depth 3)

ARCHITECTURAL RULE:
    Plain Python values are converted to these shapes exactly once, at the
    encoder boundary (to_field_value / to_record). Everything downstream
    dispatches on the variant, never on raw Python types.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from .errors import InvalidDataTypeError, NestingDepthError


ScalarType = Union[str, int, float, bool, None]

_SCALAR_TYPES = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class Scalar:
    """
    A single plain value.

    Properties:
        value: str, int, float, bool or None
    """

    value: ScalarType = None

    def is_empty(self) -> bool:
        return self.value is None or self.value == ""

    def as_text(self) -> str:
        """
        Render the value as cell text.

        None becomes "", booleans become "1"/"0", whole-number floats drop
        the decimal part (1.0 → "1"), other numbers use str().
        """
        if self.value is None:
            return ""
        if isinstance(self.value, bool):
            return "1" if self.value else "0"
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)


@dataclass(frozen=True)
class Item:
    """
    One element of a list field holding several named properties.

    Example:
        {"src": "img1.jpg", "alt": "Image 1"}

        Item(entries=(("src", Scalar("img1.jpg")), ("alt", Scalar("Image 1"))))

    The sub-keys are kept here for inspection, but flattening only ever
    looks at the values, in entry order.
    """

    entries: Tuple[Tuple[str, Scalar], ...] = field(default_factory=tuple)

    @property
    def values(self) -> Tuple[Scalar, ...]:
        return tuple(value for _, value in self.entries)

    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class ListValue:
    """
    An ordered sequence of Scalars and/or Items.

    Each element becomes its own CSV cell during flattening.
    """

    elements: Tuple[Union[Scalar, Item], ...] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return not self.elements


FieldValue = Union[Scalar, ListValue]
Record = Dict[str, FieldValue]


def _is_container(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, bytearray))


def _to_scalar(value: Any) -> Scalar:
    if isinstance(value, _SCALAR_TYPES):
        return Scalar(value)
    if isinstance(value, (bytes, bytearray)):
        return Scalar(bytes(value).decode("utf-8", errors="replace"))
    return Scalar(str(value))


def _to_item(value: Any, field_name: str) -> Item:
    if isinstance(value, Mapping):
        pairs = [(str(key), sub) for key, sub in value.items()]
    else:
        pairs = [(str(index), sub) for index, sub in enumerate(value)]

    entries = []
    for key, sub in pairs:
        if isinstance(sub, Mapping) or _is_container(sub):
            raise NestingDepthError(
                f"Value under sub-key '{key}' nests deeper than three levels",
                field_name=field_name,
            )
        entries.append((key, _to_scalar(sub)))
    return Item(entries=tuple(entries))


def to_field_value(value: Any, field_name: str = "") -> FieldValue:
    """
    Convert a plain Python value to its FieldValue variant.

    Rules:
        - None, str, int, float, bool → Scalar
        - Mapping → ListValue of its values (keys dropped)
        - list/tuple/other non-string iterable → ListValue
        - element that is a Mapping or iterable → Item
        - anything else → Scalar(str(value))

    Args:
        value: Raw field value
        field_name: Owning field, used in error messages

    Returns:
        Scalar or ListValue

    Raises:
        NestingDepthError: If a value sits below an Item (depth 4 or more)
    """
    if isinstance(value, (Scalar, ListValue)):
        return value

    if isinstance(value, Mapping):
        members = list(value.values())
    elif _is_container(value):
        members = list(value)
    else:
        return _to_scalar(value)

    elements = []
    for member in members:
        if isinstance(member, (Scalar, Item)):
            elements.append(member)
        elif isinstance(member, Mapping) or _is_container(member):
            elements.append(_to_item(member, field_name))
        else:
            elements.append(_to_scalar(member))
    return ListValue(elements=tuple(elements))


def to_record(raw: Any) -> Record:
    """
    Convert one raw mapping into a Record, preserving field order.

    Raises:
        InvalidDataTypeError: If raw is not a mapping
        NestingDepthError: If any field nests too deeply
    """
    if not isinstance(raw, Mapping):
        raise InvalidDataTypeError(
            f"Expected a mapping of field names to values, got {type(raw).__name__}"
        )
    return {str(name): to_field_value(value, str(name)) for name, value in raw.items()}


__all__ = [
    "Scalar",
    "Item",
    "ListValue",
    "FieldValue",
    "Record",
    "to_field_value",
    "to_record",
]
