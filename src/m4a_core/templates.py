"""Parse templates for iTunes-style metadata.

A template is an atom tree whose leaves are unparsed. `parse_atoms` keeps
only the records that a template names, so these trees decide what is read
out of a file.
"""
from __future__ import annotations

import io
from typing import BinaryIO

from .atom import Atom, parse_atoms
from .content import Content
from .data import Data
from .errors import AtomIOError
from .protocol import (
    ALBUM,
    ALBUM_ARTIST,
    ARTIST,
    ARTWORK,
    COMMENT,
    COMPOSER,
    COPYRIGHT,
    CUSTOM_GENRE,
    DESCRIPTION,
    DISK_NUMBER,
    ENCODER,
    FILETYPE,
    GROUPING,
    ITEM_LIST,
    LONG_DESCRIPTION,
    LYRICS,
    METADATA,
    METADATA_OFFSET,
    MOVIE,
    RESERVED,
    STANDARD_GENRE,
    TITLE,
    TRACK_NUMBER,
    USER_DATA,
    YEAR,
)

# Items whose payloads decode as text, images or opaque bytes. Integer-typed
# items (tmpo, cpil, ...) are left out so they are skipped.
ITEM_IDENTS = (
    ALBUM,
    ARTIST,
    ALBUM_ARTIST,
    COMMENT,
    YEAR,
    TITLE,
    CUSTOM_GENRE,
    COMPOSER,
    ENCODER,
    GROUPING,
    LYRICS,
    COPYRIGHT,
    DESCRIPTION,
    LONG_DESCRIPTION,
    ARTWORK,
    STANDARD_GENRE,
    TRACK_NUMBER,
    DISK_NUMBER,
)

METADATA_PATH = (MOVIE, USER_DATA, METADATA, ITEM_LIST)


def item_template(ident: bytes) -> Atom:
    return Atom(ident, 0, Content.data_atom())


def item_list_template() -> Atom:
    return Atom(ITEM_LIST, 0, Content.atoms(item_template(i) for i in ITEM_IDENTS))


def metadata_template() -> list[Atom]:
    """Top-level templates: ftyp plus moov/udta/meta/ilst down to item data."""
    moov = Atom(
        MOVIE,
        0,
        Content.atom_with(USER_DATA, 0, Content.atom_with(METADATA, METADATA_OFFSET, Content.atom(item_list_template()))),
    )
    ftyp = Atom(FILETYPE, 0, Content.raw_data(Data.unparsed(RESERVED)))
    return [ftyp, moov]


def _remaining(source: BinaryIO) -> int:
    try:
        here = source.tell()
        end = source.seek(0, io.SEEK_END)
        source.seek(here, io.SEEK_SET)
    except OSError as e:
        raise AtomIOError(str(e)) from e
    return end - here


def read_metadata(source: BinaryIO, length: int | None = None) -> Atom:
    """Parse the metadata atoms of a file into a synthetic root container.

    `length` defaults to everything from the current position to the end.
    """
    if length is None:
        length = _remaining(source)
    root = Atom(b"root", 0, Content.atoms(metadata_template()))
    root.content.parse(source, length)
    return root


def item_list(root: Atom) -> Atom | None:
    return root.find(*METADATA_PATH)
