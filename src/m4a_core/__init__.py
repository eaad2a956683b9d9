"""m4a core - atom payload codec and content tree."""
from .atom import Atom, parse_atoms, parse_head
from .content import Content, ContentKind
from .data import Data, DataKind
from .errors import (
    AtomError,
    AtomIOError,
    EncodingError,
    ParsingError,
    UnknownDataTypeError,
    UnwritableDataTypeError,
)
from .templates import item_list, metadata_template, read_metadata

__all__ = [
    "Atom",
    "parse_atoms",
    "parse_head",
    "Content",
    "ContentKind",
    "Data",
    "DataKind",
    "AtomError",
    "AtomIOError",
    "EncodingError",
    "ParsingError",
    "UnknownDataTypeError",
    "UnwritableDataTypeError",
    "item_list",
    "metadata_template",
    "read_metadata",
]
