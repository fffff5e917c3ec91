# conftest.py - shared fixtures
import json

import pytest

from abbrev_completer.core.keymap import Keymap

SAMPLE_DOC = {
    "G": {
        "a": {">>": ["α"]},
        "l": {
            ">>": ["λ"],
            "-": {">>": ["ƛ"]},
        },
    },
    "t": {
        "o": {">>": ["→"]},
        "t": {">>": ["⊤"]},
    },
    "=": {
        ">>": ["⇒"],
        "=": {">>": ["≡"]},
    },
    "M": {"x": {">>": ["𝑥"]}},
}


@pytest.fixture
def sample_doc():
    return json.loads(json.dumps(SAMPLE_DOC))


@pytest.fixture
def keymap(sample_doc):
    return Keymap.build(sample_doc)


@pytest.fixture
def keymap_file(tmp_path, sample_doc):
    path = tmp_path / "keymap.json"
    path.write_text(json.dumps(sample_doc, ensure_ascii=False), encoding="utf-8")
    return path
