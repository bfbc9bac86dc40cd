# tests/unit/test_document_store.py
"""
Tests for foldkeep.storage.documents module.
"""

import asyncio
from pathlib import Path

import pytest

from foldkeep.core.exceptions import WriteError
from foldkeep.storage.documents import DocumentStore


class TestDocumentStore:
    """Tests for DocumentStore."""

    def test_read_absent_is_none(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)

        assert asyncio.run(documents.read("missing.json")) is None

    def test_write_then_read(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)

        asyncio.run(documents.write("a.json", '{"/a.js":"ab12cd34"}'))

        assert (tmp_path / "a.json").read_text(encoding="utf-8") == '{"/a.js":"ab12cd34"}'
        assert asyncio.run(documents.read("a.json")) == '{"/a.js":"ab12cd34"}'

    def test_write_replaces(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)
        asyncio.run(documents.write("a.json", "[1, 2, 3]"))
        asyncio.run(documents.write("a.json", "[]"))

        assert (tmp_path / "a.json").read_text(encoding="utf-8") == "[]"

    def test_write_leaves_no_temp_file(self, tmp_path: Path):
        asyncio.run(DocumentStore(tmp_path).write("a.json", "[]"))

        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json"]

    def test_utf8(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)
        asyncio.run(documents.write("a.json", '{"/ドキュメント.js":"x"}'))

        assert asyncio.run(documents.read("a.json")) == '{"/ドキュメント.js":"x"}'

    def test_write_into_missing_directory_raises(self, tmp_path: Path):
        documents = DocumentStore(tmp_path / "missing")

        with pytest.raises(WriteError) as exc_info:
            asyncio.run(documents.write("a.json", "[]"))

        assert exc_info.value.document == "a.json"

    def test_ensure_creates_default(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)

        assert asyncio.run(documents.ensure("config.json")) == "{}"
        assert (tmp_path / "config.json").read_text(encoding="utf-8") == "{}"

    def test_ensure_keeps_existing(self, tmp_path: Path):
        (tmp_path / "config.json").write_text('{"a": 1}', encoding="utf-8")

        assert asyncio.run(DocumentStore(tmp_path).ensure("config.json")) == '{"a": 1}'

    def test_exists(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)
        (tmp_path / "a.json").write_text("[]", encoding="utf-8")

        assert asyncio.run(documents.exists("a.json")) is True
        assert asyncio.run(documents.exists("b.json")) is False
        assert documents.directory_exists() is True

    def test_overlapping_writes_of_one_document(self, tmp_path: Path):
        documents = DocumentStore(tmp_path)

        async def many():
            await asyncio.gather(*(documents.write("a.json", f"[{i}]") for i in range(10)))

        asyncio.run(many())

        assert (tmp_path / "a.json").read_text(encoding="utf-8") in {f"[{i}]" for i in range(10)}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.json"]
