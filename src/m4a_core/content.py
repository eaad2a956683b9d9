"""Atom body model.

An atom's body is either a list of child atoms, a data payload (raw, or
behind a typed header), or nothing. Builders never mutate their receiver:
each returns a new `Content`, so trees can be assembled by chaining.
"""
from __future__ import annotations

import enum
from typing import TYPE_CHECKING, BinaryIO, Iterable

from .data import Data
from .protocol import TYPED_HEADER_LEN

if TYPE_CHECKING:
    from .atom import Atom


class ContentKind(enum.Enum):
    ATOMS = "atoms"
    RAW_DATA = "raw_data"
    TYPED_DATA = "typed_data"
    EMPTY = "empty"


class Content:
    __slots__ = ("kind", "value")

    def __init__(self, kind: ContentKind, value: list[Atom] | Data | None = None):
        self.kind = kind
        self.value = value

    # --- constructors ---

    @classmethod
    def atoms(cls, atoms: Iterable[Atom] = ()) -> Content:
        """Container content, empty unless `atoms` is given."""
        return cls(ContentKind.ATOMS, list(atoms))

    @classmethod
    def atom(cls, atom: Atom) -> Content:
        return cls(ContentKind.ATOMS, [atom])

    @classmethod
    def atom_with(cls, head: bytes, offset: int, content: Content) -> Content:
        from .atom import Atom

        return cls.atom(Atom.with_content(head, offset, content))

    @classmethod
    def data_atom(cls) -> Content:
        """Container holding one `data` atom whose payload is still to be parsed."""
        from .atom import Atom

        return cls.atom(Atom.data_atom())

    @classmethod
    def data_atom_with(cls, data: Data) -> Content:
        from .atom import Atom

        return cls.atom(Atom.data_atom_with(data))

    @classmethod
    def raw_data(cls, data: Data) -> Content:
        return cls(ContentKind.RAW_DATA, data)

    @classmethod
    def typed_data(cls, data: Data) -> Content:
        return cls(ContentKind.TYPED_DATA, data)

    @classmethod
    def empty(cls) -> Content:
        return cls(ContentKind.EMPTY)

    # --- accretive builders ---

    def add_atom(self, atom: Atom) -> Content:
        if self.kind is not ContentKind.ATOMS:
            return self
        return Content(ContentKind.ATOMS, self.value + [atom])

    def add_data_atom(self) -> Content:
        from .atom import Atom

        return self.add_atom(Atom.data_atom())

    def add_atom_with(self, head: bytes, offset: int, content: Content) -> Content:
        from .atom import Atom

        return self.add_atom(Atom.with_content(head, offset, content))

    # --- codec ---

    def __len__(self) -> int:
        if self.kind is ContentKind.ATOMS:
            return sum(len(a) for a in self.value)
        if self.kind is ContentKind.TYPED_DATA:
            return TYPED_HEADER_LEN + len(self.value)
        if self.kind is ContentKind.RAW_DATA:
            return len(self.value)
        return 0

    def parse(self, source: BinaryIO, length: int) -> None:
        """Fill this content from `length` bytes of `source`.

        ATOMS content is a template: its atoms say which child records to
        keep and how to parse them. After parsing it holds the matching
        records in document order. EMPTY consumes nothing.
        """
        from .atom import parse_atoms

        if self.kind is ContentKind.ATOMS:
            self.value = parse_atoms(self.value, source, length)
        elif self.kind in (ContentKind.RAW_DATA, ContentKind.TYPED_DATA):
            self.value.decode(source, length)

    def write(self, sink: BinaryIO) -> None:
        if self.kind is ContentKind.ATOMS:
            for a in self.value:
                a.write(sink)
        elif self.kind is ContentKind.RAW_DATA:
            self.value.write_raw(sink)
        elif self.kind is ContentKind.TYPED_DATA:
            self.value.write_typed(sink)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Content):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    __hash__ = None

    def __repr__(self) -> str:
        if self.kind is ContentKind.EMPTY:
            return "Content.empty()"
        return f"Content.{self.kind.value}({self.value!r})"
