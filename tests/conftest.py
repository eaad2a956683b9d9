import importlib.util
from pathlib import Path

import pytest

REPO = Path(__file__).resolve().parents[1]


def _load_make_sample():
    spec = importlib.util.spec_from_file_location("make_sample", REPO / "tools" / "make_sample.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def make_sample():
    return _load_make_sample()


@pytest.fixture
def sample_file(tmp_path, make_sample):
    return make_sample.write_sample(tmp_path / "sample.m4a")
