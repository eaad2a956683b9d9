import io
import struct

from m4a_core.atom import Atom
from m4a_core.content import Content, ContentKind
from m4a_core.data import Data
from m4a_core.protocol import DATA, RESERVED, TYPED, UTF8


def test_lengths():
    a = Atom(b"\xa9nam", 0, Content.data_atom_with(Data.utf8("Title")))
    b = Atom(b"free", 0, Content.raw_data(Data.reserved(bytes(12))))
    d = Data.utf16("abc")

    assert len(Content.atoms()) == 0
    assert len(Content.atoms([a, b])) == len(a) + len(b)
    assert len(Content.empty()) == 0
    assert len(Content.typed_data(d)) == 8 + len(d)
    assert len(Content.raw_data(d)) == len(d)


def test_equality_is_variant_aware():
    d = Data.utf8("x")
    assert Content.atoms() != Content.empty()
    assert Content.raw_data(d) != Content.typed_data(d)
    assert Content.typed_data(Data.utf8("x")) == Content.typed_data(Data.utf8("x"))
    assert Content.empty() == Content.empty()


def test_builders():
    d = Data.utf8("x")
    child = Atom(b"name", 0, Content.empty())

    assert Content.atom(child) == Content.atoms([child])
    assert Content.data_atom_with(d) == Content.atom(Atom(DATA, 0, Content.typed_data(d)))
    assert Content.data_atom() == Content.atom(Atom(DATA, 0, Content.typed_data(Data.unparsed(TYPED))))
    assert Content.atom_with(b"name", 4, Content.empty()) == Content.atom(Atom(b"name", 4))


def test_add_atom_returns_new_container():
    base = Content.atoms()
    one = base.add_atom(Atom(b"aaaa"))
    two = one.add_atom_with(b"bbbb", 0, Content.empty()).add_data_atom()

    assert base.value == []
    assert [a.head for a in one.value] == [b"aaaa"]
    assert [a.head for a in two.value] == [b"aaaa", b"bbbb", DATA]


def test_add_atom_on_leaf_is_noop():
    leaf = Content.raw_data(Data.utf8("x"))
    assert leaf.add_atom(Atom(b"aaaa")) is leaf
    assert Content.empty().add_data_atom() == Content.empty()


def test_write_variants():
    buf = io.BytesIO()
    Content.raw_data(Data.utf8("AB")).write(buf)
    Content.typed_data(Data.utf8("CD")).write(buf)
    Content.empty().write(buf)
    assert buf.getvalue() == b"AB" + struct.pack(">iI", UTF8, 0) + b"CD"


def test_write_container_in_order():
    content = Content.atoms().add_atom_with(b"aaaa", 0, Content.empty()).add_atom_with(b"bbbb", 2, Content.empty())
    buf = io.BytesIO()
    content.write(buf)
    assert buf.getvalue() == struct.pack(">I4s", 8, b"aaaa") + struct.pack(">I4s", 10, b"bbbb") + b"\x00\x00"
    assert len(content) == 18


def test_empty_parse_consumes_nothing():
    src = io.BytesIO(b"ignored")
    content = Content.empty()
    content.parse(src, 7)
    assert src.tell() == 0
    assert content == Content.empty()


def test_raw_data_parse():
    content = Content.raw_data(Data.unparsed(UTF8))
    content.parse(io.BytesIO(b"ABC"), 3)
    assert content == Content.raw_data(Data.utf8("ABC"))


def test_container_round_trip_keeps_document_order():
    original = (
        Content.atoms()
        .add_atom_with(b"covr", 0, Content.data_atom_with(Data.png(b"\x89PNG" + bytes(8))))
        .add_atom_with(b"\xa9nam", 0, Content.data_atom_with(Data.utf8("Title")))
        .add_atom_with(b"\xa9cmt", 0, Content.data_atom_with(Data.utf16("note")))
        .add_atom_with(b"free", 0, Content.raw_data(Data.reserved(b"xxxx")))
    )
    buf = io.BytesIO()
    original.write(buf)
    assert len(buf.getvalue()) == len(original)

    template = (
        Content.atoms()
        .add_atom_with(b"\xa9nam", 0, Content.data_atom())
        .add_atom_with(b"\xa9cmt", 0, Content.data_atom())
        .add_atom_with(b"covr", 0, Content.data_atom())
        .add_atom_with(b"free", 0, Content.raw_data(Data.unparsed(RESERVED)))
    )
    template.parse(io.BytesIO(buf.getvalue()), len(buf.getvalue()))

    assert template.kind is ContentKind.ATOMS
    assert template == original
