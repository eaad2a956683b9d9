import json
import os
import struct
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from m4a_core.atom import Atom
from m4a_core.content import Content
from m4a_core.data import Data
from m4a_core.protocol import BESIGNED, DATA, FILETYPE, ITEM_LIST, METADATA, MOVIE, USER_DATA
from m4a_core.templates import item_list, read_metadata
from m4a_inspect.cli import main
from m4a_inspect.logic import inspect_file, item_values

REPO = Path(__file__).resolve().parents[1]


def write_atoms(path: Path, atoms: list[Atom]) -> Path:
    with open(path, "wb") as f:
        for a in atoms:
            a.write(f)
    return path


def test_read_metadata_keeps_known_items_in_order(sample_file, make_sample):
    with open(sample_file, "rb") as f:
        root = read_metadata(f)

    assert [a.head for a in root.children] == [FILETYPE, MOVIE]
    ilst = item_list(root)
    assert [a.head for a in ilst.children] == [b"\xa9nam", b"\xa9ART", b"\xa9cmt", b"trkn", b"covr"]
    assert ilst.child(b"\xa9nam").child(DATA).data == Data.utf8("Sample Title")
    assert ilst.child(b"\xa9cmt").child(DATA).data == Data.utf16("made by make_sample")
    assert ilst.child(b"covr").child(DATA).data == Data.jpeg(make_sample.FAKE_JPEG)


def test_parsed_atoms_match_builder_output(sample_file, make_sample):
    with open(sample_file, "rb") as f:
        root = read_metadata(f)
    built = make_sample.build_sample()
    assert root.children[0] == built[0]
    assert root.find(USER_DATA) is None
    assert root.find(MOVIE, USER_DATA, METADATA, ITEM_LIST, b"\xa9ART") == built[1].find(
        USER_DATA, METADATA, ITEM_LIST, b"\xa9ART"
    )


def test_item_values(sample_file):
    result = item_values(sample_file)
    assert result["status"] == "PASS"
    items = result["items"]
    assert items["\xa9nam"] == [{"type": "utf8", "value": "Sample Title"}]
    assert items["trkn"][0]["type"] == "reserved"
    assert items["covr"][0]["type"] == "jpeg"
    assert "tmpo" not in items


def test_no_item_list_warns(tmp_path):
    path = write_atoms(tmp_path / "bare.m4a", [Atom(FILETYPE, 0, Content.raw_data(Data.reserved(b"M4A ")))])
    with pytest.warns(UserWarning, match="No ilst"):
        result = item_values(path)
    assert result["items"] == {}


def test_unknown_item_type_fails_closed(tmp_path):
    title = Atom(b"\xa9nam", 0, Content.atom_with(DATA, 0, Content.raw_data(Data.reserved(struct.pack(">iIH", BESIGNED, 0, 7)))))
    ilst = Atom(ITEM_LIST, 0, Content.atom(title))
    moov = Atom(MOVIE, 0, Content.atom_with(USER_DATA, 0, Content.atom_with(METADATA, 4, Content.atom(ilst))))
    path = write_atoms(tmp_path / "bad.m4a", [moov])

    result = inspect_file(path)
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_UNKNOWN_DATA_TYPE"
    assert result["errors"][0]["datatype"] == BESIGNED


def test_cli_tags(sample_file):
    r = CliRunner().invoke(main, ["tags", str(sample_file)])
    assert r.exit_code == 0, r.output
    out = json.loads(r.output)
    assert out["items"]["\xa9ART"] == [{"type": "utf8", "value": "Sample Artist"}]


def test_cli_tree_on_truncated_file(sample_file):
    b = sample_file.read_bytes()
    sample_file.write_bytes(b[:-10])

    r = CliRunner().invoke(main, ["tree", str(sample_file)])
    assert r.exit_code == 1
    out = json.loads(r.output)
    assert out["status"] == "FAIL"
    assert out["errors"][0]["code"] == "E_PARSING"


def test_cli_tree(sample_file):
    r = CliRunner().invoke(main, ["tree", str(sample_file)])
    assert r.exit_code == 0, r.output
    out = json.loads(r.output)
    assert [a["head"] for a in out["atoms"]] == ["ftyp", "moov"]
    assert out["atoms"][1]["children"][0]["children"][0]["offset"] == 4


def run(cmd, cwd):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO / "src"), env.get("PYTHONPATH")]))
    env["PYTHONIOENCODING"] = "utf-8"
    return subprocess.run(cmd, cwd=cwd, check=False, capture_output=True, encoding="utf-8", env=env)


def test_sample_tool_then_inspect(tmp_path):
    out = tmp_path / "tool.m4a"
    r = run([sys.executable, "tools/make_sample.py", str(out)], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout
    assert out.exists()

    r = run([sys.executable, "-m", "m4a_inspect.cli", "tags", str(out)], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout
    assert json.loads(r.stdout)["items"]["\xa9nam"][0]["value"] == "Sample Title"
