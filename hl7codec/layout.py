"""
Segment layouts.

A layout describes one segment type: its three-character name, the
field aliases it declares, its sort weight and whether its segments own
a list of child segments. Layouts are built once, frozen when they are
registered, and shared by every segment of that type.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .exceptions import LayoutFrozenError

DEFAULT_WEIGHT = 999

Validator = Callable[[str], bool]


@dataclass(frozen=True)
class FieldAlias:
    """A named field position with an optional validator."""

    name: str
    index: int
    validator: Optional[Validator] = None


class Layout:
    """
    Declarative description of a segment type.

    Usage:
        PID = (
            Layout("PID", weight=1)
            .add_field("set_id")
            .add_field("patient_id")
        )

    Aliases without an explicit index take the next position after the
    previously declared one, starting at 1 (index 0 holds the segment
    name).
    """

    def __init__(self, name: str, weight: int = None, has_children: bool = False):
        self.name = name
        self.weight = DEFAULT_WEIGHT if weight is None else weight
        self.has_children = has_children
        self._fields: Dict[str, FieldAlias] = {}
        self._next_index = 1
        self._frozen = False

    def add_field(
        self, name: str, index: int = None, validator: Validator = None
    ) -> "Layout":
        """
        Declare a field alias.

        Args:
            name: Alias used to read and write the field
            index: Field position; defaults to the next unused position
            validator: Callable run on every write through this alias;
                a falsy result rejects the value

        Returns:
            The layout itself, so declarations can be chained
        """
        if self._frozen:
            raise LayoutFrozenError(self.name)

        if index is None:
            index = self._next_index
        index = int(index)
        if index < 0:
            raise ValueError(f"field index must be non-negative, got {index}")

        # a later declaration of the same alias replaces the earlier one
        self._fields[name] = FieldAlias(name, index, validator)
        self._next_index = index + 1
        return self

    def freeze(self) -> "Layout":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def field_ids(self) -> Dict[str, int]:
        """Mapping of alias name to field index."""
        return {alias.name: alias.index for alias in self._fields.values()}

    def alias(self, name: str) -> Optional[FieldAlias]:
        return self._fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __repr__(self) -> str:
        return (
            f"Layout(name={self.name!r}, weight={self.weight}, "
            f"fields={len(self._fields)}, has_children={self.has_children})"
        )
