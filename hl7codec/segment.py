"""
HL7 segment model.

A segment is an ordered, mutable list of field strings. Index 0 holds
the segment name. Fields can be reached three ways:

- by alias declared on the segment's Layout (``seg.read("set_id")``,
  ``seg.set_id``, ``seg["set_id"]``)
- by the positional accessor ``e<N>`` (``seg.e3``), available on every
  segment whatever its layout
- by plain integer index (``seg.read(3)``, ``seg[3]``)

Sub-field structure (the item delimiter) is not interpreted; a field is
opaque text.
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .exceptions import (
    InvalidAppendError,
    InvalidDataError,
    ParseError,
    RangeError,
    UnknownFieldError,
)
from .layout import FieldAlias, Layout
from .registry import GENERIC_LAYOUT
from .tokenizer import Delimiters, split_fields

POSITIONAL_ACCESSOR = re.compile(r"^e(\d+)$")

FieldKey = Union[int, str]


# Child Segment List
class ChildSegmentList(list):
    """
    List of child segments owned by a parent segment.

    Only Segment values are accepted. Children share the parent's
    delimiter set.
    """

    def __init__(self, owner: "Segment", values: Iterable = ()):
        super().__init__()
        self._owner = owner
        self.extend(values)

    def _adopt(self, value) -> "Segment":
        if not isinstance(value, Segment):
            raise InvalidAppendError(value, target="segment child list")
        value.delimiters = self._owner.delimiters
        return value

    def append(self, value) -> None:
        super().append(self._adopt(value))

    def insert(self, index: int, value) -> None:
        super().insert(index, self._adopt(value))

    def extend(self, values: Iterable) -> None:
        super().extend([self._adopt(value) for value in values])

    def __iadd__(self, values: Iterable):
        self.extend(values)
        return self

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            value = [self._adopt(item) for item in value]
        else:
            value = self._adopt(value)
        super().__setitem__(index, value)


# Segment Class
class Segment:
    """
    Represents one HL7 segment.

    Args:
        raw: Delimited segment text or a literal sequence of fields.
            An empty string creates ``[layout name, ""]``.
        layout: Layout describing the segment type; defaults to the
            generic layout
        delimiters: Delimiter set, usually shared with the owning message
    """

    def __init__(
        self,
        raw: Union[str, Sequence] = "",
        layout: Layout = None,
        delimiters: Delimiters = None,
    ):
        self._layout = layout or GENERIC_LAYOUT
        self._delimiters = delimiters or Delimiters()
        self._children = ChildSegmentList(self) if self._layout.has_children else None

        if isinstance(raw, str):
            if raw == "":
                # the generic layout has no type name of its own
                if self._layout is GENERIC_LAYOUT:
                    self._fields = []
                else:
                    self._fields = [self._layout.name, ""]
            else:
                self._fields = split_fields(raw, self._delimiters)
        elif isinstance(raw, (list, tuple)):
            self._fields = list(raw)
        else:
            raise ParseError(
                f"segment data must be a string or a sequence of fields, "
                f"got {type(raw).__name__}",
                segment=self._layout.name,
            )

    @property
    def layout(self) -> Layout:
        return self._layout

    @property
    def fields(self) -> List:
        return self._fields

    @property
    def name(self) -> str:
        """Segment type name."""
        if self._layout is GENERIC_LAYOUT:
            return self._fields[0] if self._fields else ""
        return self._layout.name

    @property
    def delimiters(self) -> Delimiters:
        return self._delimiters

    @delimiters.setter
    def delimiters(self, delimiters: Delimiters) -> None:
        self._delimiters = delimiters
        if self._children is not None:
            for child in self._children:
                child.delimiters = delimiters

    @property
    def has_children(self) -> bool:
        return self._children is not None

    @property
    def children(self) -> Optional[ChildSegmentList]:
        """Child segments, or None when the layout does not own children."""
        return self._children

    @property
    def weight(self) -> int:
        return self._layout.weight

    # Field Access
    def _resolve(self, key: FieldKey) -> Tuple[int, Optional[FieldAlias]]:
        if isinstance(key, int):
            index, alias = key, None
        else:
            alias = self._layout.alias(key)
            if alias is not None:
                index = alias.index
            else:
                match = POSITIONAL_ACCESSOR.match(str(key))
                if match is None:
                    raise UnknownFieldError(str(key), segment=self.name)
                index = int(match.group(1))

        if index < 0:
            raise RangeError(index, segment=self.name)
        return index, alias

    def is_field_name(self, name: str) -> bool:
        """Return True if ``name`` is an alias or a positional accessor."""
        return name in self._layout or POSITIONAL_ACCESSOR.match(name) is not None

    def read(self, key: FieldKey):
        """
        Read a field by alias, ``e<N>`` accessor or index.

        Reading past the end of the segment returns None, since the field
        is simply not present yet.

        Raises:
            RangeError: If the index is negative
            UnknownFieldError: If the alias is not declared by the layout
        """
        index, _ = self._resolve(key)
        if index >= len(self._fields):
            return None

        value = self._fields[index]
        if isinstance(value, (list, tuple)) and len(value) == 1:
            value = value[0]
        return value

    def write(self, key: FieldKey, value) -> None:
        """
        Write a field by alias, ``e<N>`` accessor or index.

        The segment grows with empty fields when ``key`` lies past its
        end. Values are stored as strings; None becomes an empty field.

        Raises:
            RangeError: If the index is negative
            UnknownFieldError: If the alias is not declared by the layout
            InvalidDataError: If the alias validator rejects the value
        """
        index, alias = self._resolve(key)
        text = "" if value is None else str(value)

        if alias is not None and alias.validator is not None:
            if not alias.validator(text):
                raise InvalidDataError(
                    alias.name, text, segment=self.name, field_index=index
                )

        if index >= len(self._fields):
            self._fields.extend([""] * (index - len(self._fields) + 1))

        self._fields[index] = text

    def __getattr__(self, name: str):
        # only reached when normal attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.read(name)
        except UnknownFieldError:
            raise AttributeError(
                f"'{self.name}' segment has no field alias '{name}'"
            ) from None

    def __setattr__(self, name: str, value) -> None:
        if name.startswith("_") or not self.is_field_name(name):
            object.__setattr__(self, name, value)
        else:
            self.write(name, value)

    def __getitem__(self, key: FieldKey):
        return self.read(key)

    def __setitem__(self, key: FieldKey, value) -> None:
        self.write(key, value)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    # Ordering
    def compare(self, other) -> Optional[int]:
        """
        Compare sort weights.

        Returns -1 when this segment is heavier than ``other``, 1 when it
        is lighter, 0 when equal and None when ``other`` is not a Segment.
        """
        if not isinstance(other, Segment):
            return None

        diff = self.weight - other.weight
        if diff > 0:
            return -1
        if diff < 0:
            return 1
        return 0

    def __lt__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return self.weight < other.weight

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return (
            self.name == other.name
            and self._fields == other._fields
            and (self._children or []) == (other._children or [])
        )

    __hash__ = None

    # Serialization
    def _field_text(self, value) -> str:
        if isinstance(value, (list, tuple)):
            return self._delimiters.item.join(str(item) for item in value)
        return str(value)

    def to_hl7(self) -> str:
        """Wire form of the segment, followed by its children if any."""
        out = self._delimiters.field.join(self._field_text(v) for v in self._fields)
        if self._children:
            for child in self._children:
                out += self._delimiters.segment + child.to_hl7()
        return out

    def __str__(self) -> str:
        return self.to_hl7()

    def to_info(self) -> str:
        return f"{self.name} ({self._layout.name} layout): {self._fields!r}"

    def __repr__(self) -> str:
        return f"<Segment {self.name} fields={len(self._fields)}>"
