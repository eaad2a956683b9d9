"""Byte layouts and codes of MP4/QuickTime metadata atoms.

Atom records are a big-endian size and a four byte tag, with an optional
64 bit size. Typed `data` payloads start with a signed type code and a
locale word. Type codes follow the QuickTime "well-known data types" table;
only a handful of them are decodable by `m4a_core.data`.
"""

# Record header: [Size(4) | Tag(4)] = 8 bytes, optionally followed by a
# 64 bit size when Size == 1.
ATOM_HEADER_FMT = ">I4s"
ATOM_HEADER_LEN = 8
ATOM_EXT_SIZE_FMT = ">Q"
ATOM_EXT_HEADER_LEN = 16
MAX_ATOM32_SIZE = 0xFFFFFFFF

# Typed data header: [TypeCode(4, signed) | Locale(4)] = 8 bytes
TYPED_HEADER_FMT = ">iI"
TYPED_HEADER_LEN = 8

# Default safety bounds
DEFAULT_MAX_DATA_SIZE = 64 * 1024 * 1024  # 64 MiB per data-bearing record

# Well-known tags
FILETYPE = b"ftyp"
MOVIE = b"moov"
USER_DATA = b"udta"
METADATA = b"meta"
ITEM_LIST = b"ilst"
DATA = b"data"
MEDIA_DATA = b"mdat"
FREE = b"free"

# meta carries version(1) + flags(3) ahead of its children
METADATA_OFFSET = 4

ALBUM = b"\xa9alb"
ARTIST = b"\xa9ART"
ALBUM_ARTIST = b"aART"
COMMENT = b"\xa9cmt"
YEAR = b"\xa9day"
TITLE = b"\xa9nam"
CUSTOM_GENRE = b"\xa9gen"
STANDARD_GENRE = b"gnre"
TRACK_NUMBER = b"trkn"
DISK_NUMBER = b"disk"
COMPOSER = b"\xa9wrt"
ENCODER = b"\xa9too"
GROUPING = b"\xa9grp"
LYRICS = b"\xa9lyr"
COPYRIGHT = b"cprt"
DESCRIPTION = b"desc"
LONG_DESCRIPTION = b"ldes"
ARTWORK = b"covr"

# Table 3-5 Well-known data types (QuickTime File Format, Metadata).
# TYPED is an in-memory sentinel: the real code follows in a typed header.
TYPED = -1
RESERVED = 0
UTF8 = 1
UTF16 = 2
UTF8SORT = 4
UTF16SORT = 5
JPEG = 13
PNG = 14
BESIGNED = 21
BEUNSIGNED = 22
BEFLOAT32 = 23
BEFLOAT64 = 24
QTMETA = 28
EIGHTBITSIGNED = 65
BE16BITSIGNED = 66
BE32BITSIGNED = 67
BEPOINTF32 = 70
BEDIMSF32 = 71
BERECTF32 = 72
BE64SIGNED = 74
EIGHTBITUNSIGNED = 75
BE16BITUNSIGNED = 76
BE32BITUNSIGNED = 77
BE64BITUNSIGNED = 78
AFFINETRANSFORMF64 = 79

DATA_TYPE_NAMES = {
    TYPED: "typed",
    RESERVED: "reserved",
    UTF8: "utf8",
    UTF16: "utf16",
    UTF8SORT: "utf8-sort",
    UTF16SORT: "utf16-sort",
    JPEG: "jpeg",
    PNG: "png",
    BESIGNED: "be-signed",
    BEUNSIGNED: "be-unsigned",
    BEFLOAT32: "be-float32",
    BEFLOAT64: "be-float64",
    QTMETA: "qt-meta",
    EIGHTBITSIGNED: "int8",
    BE16BITSIGNED: "be-int16",
    BE32BITSIGNED: "be-int32",
    BEPOINTF32: "be-point-f32",
    BEDIMSF32: "be-dims-f32",
    BERECTF32: "be-rect-f32",
    BE64SIGNED: "be-int64",
    EIGHTBITUNSIGNED: "uint8",
    BE16BITUNSIGNED: "be-uint16",
    BE32BITUNSIGNED: "be-uint32",
    BE64BITUNSIGNED: "be-uint64",
    AFFINETRANSFORMF64: "affine-transform-f64",
}
