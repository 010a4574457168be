# tests/unit/test_values.py
"""
Tests for chainloom.core.values and chainloom.core.document.

Tests cover:
1. ChainValues accessors - get_string / get_raw / set
2. Copy semantics - copy / merge / omit never touch the original
3. Document - immutability and metadata freezing
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from chainloom.core.document import Document, is_document_sequence
from chainloom.core.exceptions import ChainError, MissingInputKeyError, TypeMismatchError
from chainloom.core.values import ChainValues, as_chain_values


class TestAccessors:
    """Tests for reading and writing values."""

    def test_get_string(self):
        values = ChainValues({"question": "What is RAG?"})
        assert values.get_string("question") == "What is RAG?"

    def test_get_string_missing_key(self):
        values = ChainValues()
        with pytest.raises(MissingInputKeyError) as exc_info:
            values.get_string("question")
        assert exc_info.value.key == "question"
        assert "question" in str(exc_info.value)

    def test_get_string_wrong_type(self):
        values = ChainValues({"docs": [1, 2]})
        with pytest.raises(TypeMismatchError):
            values.get_string("docs")

    def test_contract_errors_share_base(self):
        assert issubclass(MissingInputKeyError, ChainError)
        assert issubclass(TypeMismatchError, ChainError)

    def test_get_raw_returns_any_type(self):
        docs = [Document("a")]
        values = ChainValues({"docs": docs})
        assert values.get_raw("docs") is docs
        assert values.get_raw("missing") is None
        assert values.get_raw("missing", "default") == "default"

    def test_set(self):
        values = ChainValues()
        values.set("answer", 42)
        assert values["answer"] == 42


class TestCopySemantics:
    """Tests that derived mappings are independent of the original."""

    def test_copy_is_independent(self):
        original = ChainValues({"a": "1"})
        copied = original.copy()
        copied["b"] = "2"

        assert isinstance(copied, ChainValues)
        assert "b" not in original

    def test_merge_other_wins(self):
        original = ChainValues({"a": "1", "b": "old"})
        merged = original.merge({"b": "new", "c": "3"})

        assert merged == {"a": "1", "b": "new", "c": "3"}
        assert original == {"a": "1", "b": "old"}

    def test_omit_by_keys(self):
        original = ChainValues({"docs": [], "question": "q", "lang": "en"})
        rest = original.omit("docs")

        assert rest == {"question": "q", "lang": "en"}
        assert "docs" in original

    def test_omit_accepts_iterables(self):
        original = ChainValues({"a": 1, "b": 2, "c": 3})
        assert original.omit(["a", "b"]) == {"c": 3}

    def test_as_chain_values_copies_plain_dict(self):
        raw = {"a": "1"}
        values = as_chain_values(raw)
        values["b"] = "2"

        assert isinstance(values, ChainValues)
        assert raw == {"a": "1"}

    def test_as_chain_values_none(self):
        assert as_chain_values(None) == {}


class TestDocument:
    """Tests for the Document value type."""

    def test_document_is_frozen(self):
        doc = Document("text", {"source": "a.md"})
        with pytest.raises(FrozenInstanceError):
            doc.page_content = "changed"

    def test_metadata_is_read_only_copy(self):
        meta = {"source": "a.md"}
        doc = Document("text", meta)
        meta["source"] = "b.md"

        assert doc.metadata["source"] == "a.md"
        with pytest.raises(TypeError):
            doc.metadata["source"] = "c.md"

    def test_is_document_sequence(self):
        assert is_document_sequence([Document("a"), Document("b")])
        assert is_document_sequence([])
        assert not is_document_sequence("not docs")
        assert not is_document_sequence([Document("a"), "b"])
        assert not is_document_sequence(None)
