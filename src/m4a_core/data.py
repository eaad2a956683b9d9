"""Typed payload codec for leaf atoms.

A `Data` value is one of a closed set of kinds. Values read from a file start
out `UNPARSED`, holding only the pending type code, and are resolved exactly
once by `Data.decode`. Resolved values can be written back either raw or
behind an 8 byte typed header (type code + locale).
"""
from __future__ import annotations

import enum
import hashlib
import io
import struct
from typing import BinaryIO

from .errors import (
    AtomIOError,
    EncodingError,
    ParsingError,
    UnknownDataTypeError,
    UnwritableDataTypeError,
)
from .protocol import (
    DATA_TYPE_NAMES,
    JPEG,
    PNG,
    RESERVED,
    TYPED,
    TYPED_HEADER_FMT,
    TYPED_HEADER_LEN,
    UTF8,
    UTF16,
)


def read_exact(source: BinaryIO, length: int) -> bytes:
    """Read exactly `length` bytes or raise AtomIOError."""
    try:
        b = source.read(length)
    except OSError as e:
        raise AtomIOError(str(e)) from e
    if len(b) != length:
        raise AtomIOError(f"short read: expected {length} bytes, got {len(b)}")
    return b


def skip(source: BinaryIO, length: int) -> None:
    try:
        source.seek(length, io.SEEK_CUR)
    except OSError as e:
        raise AtomIOError(str(e)) from e


def write_all(sink: BinaryIO, b: bytes) -> None:
    try:
        sink.write(b)
    except OSError as e:
        raise AtomIOError(str(e)) from e


class DataKind(enum.Enum):
    RESERVED = RESERVED
    UTF8 = UTF8
    UTF16 = UTF16
    JPEG = JPEG
    PNG = PNG
    UNPARSED = "unparsed"


_BINARY_KINDS = (DataKind.RESERVED, DataKind.JPEG, DataKind.PNG)


def _read_bytes(source: BinaryIO, length: int) -> bytes:
    return read_exact(source, length)


def _read_utf8(source: BinaryIO, length: int) -> str:
    b = read_exact(source, length)
    try:
        return b.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(str(e)) from e


def _read_utf16(source: BinaryIO, length: int) -> str:
    b = read_exact(source, length // 2 * 2)
    # An odd trailing byte is padding, never part of the text.
    if length % 2 == 1:
        skip(source, 1)
    try:
        return b.decode("utf-16-be")
    except UnicodeDecodeError as e:
        raise EncodingError(str(e)) from e


_READERS = {
    RESERVED: (DataKind.RESERVED, _read_bytes),
    UTF8: (DataKind.UTF8, _read_utf8),
    UTF16: (DataKind.UTF16, _read_utf16),
    JPEG: (DataKind.JPEG, _read_bytes),
    PNG: (DataKind.PNG, _read_bytes),
}


class Data:
    """A leaf payload: reserved/jpeg/png bytes, utf-8/utf-16 text, or unparsed."""

    __slots__ = ("kind", "value")

    def __init__(self, kind: DataKind, value: bytes | str | int):
        self.kind = kind
        self.value = value

    @classmethod
    def reserved(cls, value: bytes) -> Data:
        return cls(DataKind.RESERVED, bytes(value))

    @classmethod
    def utf8(cls, value: str) -> Data:
        return cls(DataKind.UTF8, value)

    @classmethod
    def utf16(cls, value: str) -> Data:
        return cls(DataKind.UTF16, value)

    @classmethod
    def jpeg(cls, value: bytes) -> Data:
        return cls(DataKind.JPEG, bytes(value))

    @classmethod
    def png(cls, value: bytes) -> Data:
        return cls(DataKind.PNG, bytes(value))

    @classmethod
    def unparsed(cls, datatype: int = TYPED) -> Data:
        return cls(DataKind.UNPARSED, int(datatype))

    @property
    def is_parsed(self) -> bool:
        return self.kind is not DataKind.UNPARSED

    @property
    def type_code(self) -> int:
        """The well-known type code written ahead of the payload by write_typed."""
        if self.kind is DataKind.UNPARSED:
            raise UnwritableDataTypeError("Data of kind UNPARSED can't be written")
        return self.kind.value

    def __len__(self) -> int:
        # UTF16 length counts code points, not code units.
        if self.kind in _BINARY_KINDS:
            return len(self.value)
        if self.kind is DataKind.UTF8:
            # Lone surrogates still get a length here; write_raw rejects them.
            return len(self.value.encode("utf-8", "surrogatepass"))
        if self.kind is DataKind.UTF16:
            return len(self.value) * 2
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Data):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    __hash__ = None

    def __repr__(self) -> str:
        if self.kind in (DataKind.JPEG, DataKind.PNG):
            return f"Data.{self.kind.name.lower()}(<{len(self.value)} bytes>)"
        return f"Data.{self.kind.name.lower()}({self.value!r})"

    def decode(self, source: BinaryIO, length: int) -> None:
        """Resolve an UNPARSED value from `length` bytes of `source`.

        For the TYPED sentinel the first 8 bytes hold the effective type code
        and a locale field, which is discarded. On failure the value stays
        UNPARSED.
        """
        if self.kind is not DataKind.UNPARSED:
            raise ParsingError("data already parsed")
        if length < 0:
            raise ParsingError(f"negative data length {length}")

        datatype = self.value
        remaining = length

        if datatype == TYPED:
            if length <= TYPED_HEADER_LEN:
                raise ParsingError("typed data header too short")
            datatype, _locale = struct.unpack(TYPED_HEADER_FMT, read_exact(source, TYPED_HEADER_LEN))
            remaining -= TYPED_HEADER_LEN

        try:
            kind, reader = _READERS[datatype]
        except KeyError:
            raise UnknownDataTypeError(datatype) from None

        value = reader(source, remaining)
        self.kind = kind
        self.value = value

    def raw_bytes(self) -> bytes:
        if self.kind in _BINARY_KINDS:
            return self.value
        try:
            if self.kind is DataKind.UTF8:
                return self.value.encode("utf-8")
            if self.kind is DataKind.UTF16:
                return self.value.encode("utf-16-be")
        except UnicodeEncodeError as e:
            raise EncodingError(str(e)) from e
        raise UnwritableDataTypeError("Data of kind UNPARSED can't be written")

    def write_raw(self, sink: BinaryIO) -> None:
        write_all(sink, self.raw_bytes())

    def write_typed(self, sink: BinaryIO) -> None:
        header = struct.pack(TYPED_HEADER_FMT, self.type_code, 0)
        payload = self.raw_bytes()
        write_all(sink, header)
        write_all(sink, payload)

    def to_json(self) -> dict:
        if self.kind is DataKind.UNPARSED:
            return {"type": "unparsed", "datatype": DATA_TYPE_NAMES.get(self.value, self.value)}
        out = {"type": DATA_TYPE_NAMES[self.kind.value]}
        if self.kind in _BINARY_KINDS:
            out["length"] = len(self.value)
            out["sha256"] = hashlib.sha256(self.value).hexdigest()
        else:
            out["value"] = self.value
        return out
