"""Unit tests for the JSON file store."""

import json
from unittest.mock import patch

from backend.app.core.store import FilamentStore


class TestLoadAll:
    def test_missing_file_is_created_empty(self, tmp_path):
        store = FilamentStore(tmp_path / "data" / "filaments.json")
        assert store.load_all() == []
        assert store.path.read_text(encoding="utf-8") == "[]"

    def test_returns_stored_list(self, store):
        store.path.write_text(json.dumps([{"id": 1, "name": "PLA Red"}]), encoding="utf-8")
        assert store.load_all() == [{"id": 1, "name": "PLA Red"}]

    def test_malformed_json_reads_as_empty(self, store, caplog):
        store.path.write_text("[{broken", encoding="utf-8")
        assert store.load_all() == []
        assert "not valid JSON" in caplog.text
        # The corrupt content is left in place until the next save
        assert store.path.read_text(encoding="utf-8") == "[{broken"

    def test_non_list_json_reads_as_empty(self, store):
        store.path.write_text('{"id": 1}', encoding="utf-8")
        assert store.load_all() == []


class TestSaveAll:
    def test_writes_indented_utf8_json(self, store):
        store.save_all([{"id": 1, "name": "Grün"}])
        text = store.path.read_text(encoding="utf-8")
        assert "Grün" in text
        assert text == json.dumps([{"id": 1, "name": "Grün"}], indent=2, ensure_ascii=False)

    def test_overwrites_previous_content(self, store):
        store.save_all([{"id": 1}, {"id": 2}])
        store.save_all([{"id": 3}])
        assert store.load_all() == [{"id": 3}]


class TestNextId:
    def test_uses_millisecond_clock(self):
        with patch("backend.app.core.store.time.time", return_value=1700000000.5):
            assert FilamentStore.next_id([]) == 1700000000500

    def test_never_reuses_an_existing_id(self):
        with patch("backend.app.core.store.time.time", return_value=1700000000.0):
            records = [{"id": 1700000000000}, {"id": 5}]
            assert FilamentStore.next_id(records) == 1700000000001

    def test_ignores_non_integer_ids(self):
        with patch("backend.app.core.store.time.time", return_value=1.0):
            assert FilamentStore.next_id([{"id": "abc"}, {"name": "no id"}, "junk"]) == 1000


class TestFindIndex:
    def test_finds_by_id(self):
        assert FilamentStore.find_index([{"id": 1}, {"id": 2}], 2) == 1

    def test_missing_returns_none(self):
        assert FilamentStore.find_index([{"id": 1}, "junk"], 3) is None
