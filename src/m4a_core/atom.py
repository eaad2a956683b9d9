"""Atom records: [Size | Tag | (64 bit size) | skip-offset | content]."""
from __future__ import annotations

import copy
import io
import struct
from typing import BinaryIO, Iterable

from .content import Content, ContentKind
from .data import Data, read_exact, skip, write_all
from .errors import AtomIOError, ParsingError
from .protocol import (
    ATOM_EXT_HEADER_LEN,
    ATOM_EXT_SIZE_FMT,
    ATOM_HEADER_FMT,
    ATOM_HEADER_LEN,
    DATA,
    DEFAULT_MAX_DATA_SIZE,
    MAX_ATOM32_SIZE,
    TYPED,
)


_DATA_KINDS = (ContentKind.RAW_DATA, ContentKind.TYPED_DATA)


def head_str(head: bytes) -> str:
    # Tags like b"\xa9nam" are MacRoman/latin-1 by convention.
    return head.decode("latin-1")


class Atom:
    """A tagged record owning exactly one `Content`."""

    __slots__ = ("head", "offset", "content")

    def __init__(self, head: bytes, offset: int = 0, content: Content | None = None):
        if len(head) != 4:
            raise ValueError(f"atom head must be 4 bytes, got {head!r}")
        if offset < 0:
            raise ValueError(f"negative skip-offset {offset}")
        self.head = bytes(head)
        self.offset = offset
        self.content = content if content is not None else Content.empty()

    @classmethod
    def with_content(cls, head: bytes, offset: int, content: Content) -> Atom:
        return cls(head, offset, content)

    @classmethod
    def data_atom(cls) -> Atom:
        """A `data` atom whose typed payload is resolved when parsed."""
        return cls(DATA, 0, Content.typed_data(Data.unparsed(TYPED)))

    @classmethod
    def data_atom_with(cls, data: Data) -> Atom:
        return cls(DATA, 0, Content.typed_data(data))

    @property
    def children(self) -> list[Atom]:
        if self.content.kind is ContentKind.ATOMS:
            return self.content.value
        return []

    @property
    def data(self) -> Data | None:
        if self.content.kind in (ContentKind.RAW_DATA, ContentKind.TYPED_DATA):
            return self.content.value
        return None

    def child(self, head: bytes) -> Atom | None:
        for a in self.children:
            if a.head == head:
                return a
        return None

    def find(self, *path: bytes) -> Atom | None:
        """Follow `path` down through first matching children."""
        atom = self
        for head in path:
            atom = atom.child(head)
            if atom is None:
                return None
        return atom

    def __len__(self) -> int:
        body = self.offset + len(self.content)
        if ATOM_HEADER_LEN + body > MAX_ATOM32_SIZE:
            return ATOM_EXT_HEADER_LEN + body
        return ATOM_HEADER_LEN + body

    def write(self, sink: BinaryIO) -> None:
        size = len(self)
        if size > MAX_ATOM32_SIZE:
            header = struct.pack(ATOM_HEADER_FMT, 1, self.head) + struct.pack(ATOM_EXT_SIZE_FMT, size)
        else:
            header = struct.pack(ATOM_HEADER_FMT, size, self.head)
        write_all(sink, header)
        if self.offset:
            write_all(sink, bytes(self.offset))
        self.content.write(sink)

    def to_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.write(buf)
        return buf.getvalue()

    def to_json(self) -> dict:
        out = {"head": head_str(self.head), "length": len(self)}
        if self.offset:
            out["offset"] = self.offset
        if self.content.kind is ContentKind.ATOMS:
            out["children"] = [a.to_json() for a in self.children]
        elif self.data is not None:
            out["data"] = self.data.to_json()
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Atom):
            return NotImplemented
        return self.head == other.head and self.offset == other.offset and self.content == other.content

    __hash__ = None

    def __repr__(self) -> str:
        return f"Atom({self.head!r}, {self.offset}, {self.content!r})"


def _tell(source: BinaryIO) -> int:
    try:
        return source.tell()
    except OSError as e:
        raise AtomIOError(str(e)) from e


def parse_head(source: BinaryIO, budget: int) -> tuple[int, bytes, int]:
    """Read one record header.

    Returns (size, head, header_len). A stored size of 0 stretches the record
    to the end of `budget`.
    """
    if budget < ATOM_HEADER_LEN:
        raise ParsingError(f"{budget} trailing bytes can't hold an atom header")

    size, head = struct.unpack(ATOM_HEADER_FMT, read_exact(source, ATOM_HEADER_LEN))
    header_len = ATOM_HEADER_LEN

    if size == 1:
        if budget < ATOM_EXT_HEADER_LEN:
            raise ParsingError(f"atom {head!r} extended header exceeds parent")
        size, = struct.unpack(ATOM_EXT_SIZE_FMT, read_exact(source, 8))
        header_len = ATOM_EXT_HEADER_LEN
        if size < ATOM_EXT_HEADER_LEN:
            raise ParsingError(f"64 bit atom size can only be 16 and higher, got {size} for {head!r}")
    elif size == 0:
        size = budget
    elif size < ATOM_HEADER_LEN:
        raise ParsingError(f"atom size can only be 0, 1 or 8 and higher, got {size} for {head!r}")

    if size > budget:
        raise ParsingError(f"atom {head!r} of size {size} exceeds remaining {budget} bytes")
    return size, head, header_len


def parse_atoms(templates: Iterable[Atom], source: BinaryIO, length: int) -> list[Atom]:
    """Read sibling records until exactly `length` bytes are consumed.

    Records whose head matches a template are parsed into a copy of that
    template; all others are skipped. Parsed atoms keep document order.
    """
    by_head: dict[bytes, Atom] = {}
    for t in templates:
        by_head.setdefault(t.head, t)

    parsed: list[Atom] = []
    pos = 0
    while pos < length:
        start = _tell(source)
        size, head, header_len = parse_head(source, length - pos)
        body = size - header_len
        template = by_head.get(head)

        if template is None:
            skip(source, body)
        else:
            if template.offset > body:
                raise ParsingError(f"atom {head!r} at offset {start} is shorter than its skip-offset")
            content_len = body - template.offset
            if template.content.kind in _DATA_KINDS and content_len > DEFAULT_MAX_DATA_SIZE:
                raise ParsingError(
                    f"atom {head!r} payload size {content_len} exceeds limit {DEFAULT_MAX_DATA_SIZE}"
                )

            atom = copy.deepcopy(template)
            skip(source, atom.offset)
            atom.content.parse(source, content_len)
            if atom.content.kind is ContentKind.EMPTY:
                skip(source, content_len)
            parsed.append(atom)

        pos += size
    return parsed
