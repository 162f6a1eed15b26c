from __future__ import annotations

import sys
from pathlib import Path

import pytest
from ruamel.yaml.comments import CommentedMap


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
MANIFESTS = Path(__file__).parent / "fixtures" / "manifests"

if str(SRC_ROOT) not in sys.path:
	sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture
def manifest_text():
	def _load(name: str) -> str:
		return (MANIFESTS / name).read_text(encoding="utf-8")
	return _load


@pytest.fixture
def load_doc():
	from ci_setters.yaml_utils import _read_all_yaml_docs

	def _load(raw: str) -> CommentedMap:
		docs, _ = _read_all_yaml_docs(raw)
		assert len(docs) == 1
		doc = docs[0]
		assert isinstance(doc, CommentedMap)
		return doc
	return _load
