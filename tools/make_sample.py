"""Generate a small tagged .m4a-shaped file for demos and tests.

The file has no playable audio: mdat holds filler bytes.
"""
import struct
import sys
from pathlib import Path

from m4a_core.atom import Atom
from m4a_core.content import Content
from m4a_core.data import Data
from m4a_core.protocol import (
    ARTIST,
    ARTWORK,
    BESIGNED,
    COMMENT,
    DATA,
    FILETYPE,
    FREE,
    ITEM_LIST,
    MEDIA_DATA,
    METADATA,
    METADATA_OFFSET,
    MOVIE,
    TITLE,
    TRACK_NUMBER,
    USER_DATA,
)

# Minimal JFIF-looking bytes; never decoded as an image.
FAKE_JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + bytes(range(32)) + b"\xff\xd9"


def build_sample(title: str = "Sample Title", artist: str = "Sample Artist") -> list[Atom]:
    ftyp = Atom(FILETYPE, 0, Content.raw_data(Data.reserved(b"M4A \x00\x00\x02\x00M4A mp42isom")))

    # tmpo is stored as a big-endian integer, which the item templates skip.
    tempo = Content.atom_with(DATA, 0, Content.raw_data(Data.reserved(struct.pack(">iIH", BESIGNED, 0, 120))))

    ilst = (
        Content.atoms()
        .add_atom_with(TITLE, 0, Content.data_atom_with(Data.utf8(title)))
        .add_atom_with(ARTIST, 0, Content.data_atom_with(Data.utf8(artist)))
        .add_atom_with(b"tmpo", 0, tempo)
        .add_atom_with(COMMENT, 0, Content.data_atom_with(Data.utf16("made by make_sample")))
        .add_atom_with(TRACK_NUMBER, 0, Content.data_atom_with(Data.reserved(struct.pack(">HHHH", 0, 3, 12, 0))))
        .add_atom_with(ARTWORK, 0, Content.data_atom_with(Data.jpeg(FAKE_JPEG)))
    )
    meta = (
        Content.atoms()
        .add_atom_with(b"hdlr", 4, Content.raw_data(Data.reserved(bytes(4) + b"mdirappl" + bytes(9))))
        .add_atom_with(ITEM_LIST, 0, ilst)
    )
    moov = Content.atoms().add_atom_with(
        USER_DATA, 0, Content.atom_with(METADATA, METADATA_OFFSET, meta)
    )

    return [
        ftyp,
        Atom(MOVIE, 0, moov),
        Atom(FREE, 0, Content.raw_data(Data.reserved(bytes(16)))),
        Atom(MEDIA_DATA, 0, Content.raw_data(Data.reserved(b"\x00\x11" * 64))),
    ]


def write_sample(out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "wb") as f:
        for atom in build_sample():
            atom.write(f)
    print(f"GENERATED: {out_path}")
    return out_path


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: make_sample.py <out.m4a>")
        raise SystemExit(2)
    write_sample(Path(sys.argv[1]))
