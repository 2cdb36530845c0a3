"""Tests for ContentStore."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from hermes.config import AppConfig
from hermes.models import ContentStoreError
from hermes.workspace.store import ContentStore


@pytest.fixture
def store():
    return ContentStore(AppConfig())


class TestLoad:
    """Test loading pages from disk."""

    def test_missing_root(self, tmp_path, store) -> None:
        result = store.load(tmp_path / "nope")

        assert result.pages == {}
        assert result.errors == {}

    def test_reads_existing_slot_files(self, tmp_path, store) -> None:
        (tmp_path / "coral.md").write_text("# Coral\nbody", encoding="utf-8")
        (tmp_path / "sky.md").write_text("sky text", encoding="utf-8")
        (tmp_path / "unrelated.md").write_text("ignored", encoding="utf-8")

        result = store.load(tmp_path)

        assert result.pages == {"coral": "# Coral\nbody", "sky": "sky text"}
        assert result.errors == {}

    def test_unreadable_file_does_not_block_others(self, tmp_path, store) -> None:
        (tmp_path / "coral.md").write_bytes(b"\xff\xfe\xfa not utf-8")
        (tmp_path / "amber.md").write_text("fine", encoding="utf-8")

        result = store.load(tmp_path)

        assert result.pages == {"amber": "fine"}
        assert set(result.errors) == {"coral"}
        assert str(tmp_path / "coral.md") in result.errors["coral"]

    def test_os_error_reported_per_file(self, tmp_path, store) -> None:
        (tmp_path / "coral.md").write_text("x", encoding="utf-8")
        (tmp_path / "sage.md").write_text("y", encoding="utf-8")
        original = Path.read_text

        def flaky(self, *args, **kwargs):
            if self.name == "coral.md":
                raise PermissionError("denied")
            return original(self, *args, **kwargs)

        with patch.object(Path, "read_text", flaky):
            result = store.load(tmp_path)

        assert result.pages == {"sage": "y"}
        assert "denied" in result.errors["coral"]


class TestSave:
    """Test saving pages to disk."""

    def test_creates_root_and_writes(self, tmp_path, store) -> None:
        root = tmp_path / "nested" / "workspace"

        store.save(root, {"coral": "# Hi\n", "amber": ""})

        assert (root / "coral.md").read_text(encoding="utf-8") == "# Hi\n"
        assert not (root / "amber.md").exists()

    def test_overwrites_existing(self, tmp_path, store) -> None:
        (tmp_path / "coral.md").write_text("a much longer old text", encoding="utf-8")

        store.save(tmp_path, {"coral": "new"})

        assert (tmp_path / "coral.md").read_text(encoding="utf-8") == "new"

    def test_blank_content_deletes_file(self, tmp_path, store) -> None:
        (tmp_path / "sky.md").write_text("old", encoding="utf-8")

        store.save(tmp_path, {"sky": " \n\t "})

        assert not (tmp_path / "sky.md").exists()

    def test_all_blank_does_not_create_root(self, tmp_path, store) -> None:
        root = tmp_path / "never"

        store.save(root, {})

        assert not root.exists()

    def test_write_failure_names_path_and_aborts(self, tmp_path, store) -> None:
        (tmp_path / "amber.md").mkdir()

        with pytest.raises(ContentStoreError) as excinfo:
            store.save(tmp_path, {"coral": "one", "amber": "two", "sage": "three"})

        assert excinfo.value.path == tmp_path / "amber.md"
        assert str(tmp_path / "amber.md") in str(excinfo.value)
        assert (tmp_path / "coral.md").exists()
        assert not (tmp_path / "sage.md").exists()

    def test_root_is_a_file(self, tmp_path, store) -> None:
        root = tmp_path / "file"
        root.write_text("x")

        with pytest.raises(ContentStoreError) as excinfo:
            store.save(root, {"coral": "one"})

        assert excinfo.value.path == root

    def test_round_trip(self, tmp_path, store) -> None:
        snapshot = {"coral": "# A\nalpha", "amber": "   ", "sage": "it's fine", "sky": ""}

        store.save(tmp_path, snapshot)

        assert store.load(tmp_path).pages == {"coral": "# A\nalpha", "sage": "it's fine"}


class TestChat:
    """Test chat history persistence."""

    def test_missing_chat(self, tmp_path, store) -> None:
        assert store.load_chat(tmp_path) == []

    def test_round_trip(self, tmp_path, store) -> None:
        messages = [{"role": "user", "text": "héllo"}]

        store.save_chat(tmp_path / "ws", messages)

        assert store.load_chat(tmp_path / "ws") == messages
        assert json.loads((tmp_path / "ws" / "chat.json").read_text(encoding="utf-8")) == messages

    def test_malformed_chat(self, tmp_path, store) -> None:
        (tmp_path / "chat.json").write_text("{not json", encoding="utf-8")

        assert store.load_chat(tmp_path) == []

    def test_non_list_chat(self, tmp_path, store) -> None:
        (tmp_path / "chat.json").write_text('{"a": 1}', encoding="utf-8")

        assert store.load_chat(tmp_path) == []

    def test_save_chat_failure(self, tmp_path, store) -> None:
        (tmp_path / "chat.json").mkdir()

        with pytest.raises(ContentStoreError):
            store.save_chat(tmp_path, [])


class TestListProjects:
    """Test project folder listing."""

    def test_lists_visible_dirs(self, tmp_path, store) -> None:
        (tmp_path / "beta").mkdir()
        (tmp_path / "alpha").mkdir()
        (tmp_path / ".hermes").mkdir()

        assert store.list_projects(tmp_path) == ["alpha", "beta"]

    def test_missing_root(self, tmp_path, store) -> None:
        assert store.list_projects(tmp_path / "missing") == []
